"""Declaration-key normalisation and segment classification.

Route declarations are identified by file-system-like keys such as
``/home/me/app/src/routes/users/[id]/+server.ts``. Before a key can be folded
into the route tree it goes through two pure string transforms:

1. :func:`normalize_key` -- canonicalise directory separators and strip
   everything up through the last ``<routes_root>/`` marker, leaving a key
   relative to the client's logical root (``users/[id]/+server.ts``). This is
   the only place OS-specific path syntax is consulted.
2. :func:`split_key` -- split the normalised key into segment tokens.

Each token is later classified once, by :func:`classify_segment`, when the
builder creates the tree edge for it:

* ``users`` -- static segment, becomes a property.
* ``[id]`` -- required parameter, becomes ``id(id: string)``.
* ``[[page]]`` -- optional parameter, becomes ``page(page?: string)``.

The route framework also allows a matcher suffix (``[id=integer]``) and a rest
prefix (``[...path]``) inside the brackets; both are stripped from the
parameter name but kept in the raw token. Parameter names that are not valid
JavaScript identifiers are mapped to one (``[user-id]`` becomes ``userId``);
the bracketed spelling is still what gets substituted in path templates.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from routeclient.models import Segment, SegmentKind

_OPTIONAL_RE = re.compile(r"^\[\[(?P<body>[^\[\]]+)\]\]$")
_REQUIRED_RE = re.compile(r"^\[(?P<body>[^\[\]]+)\]$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_$]+")

# Words that cannot name a function parameter.
_RESERVED_WORDS = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const",
    "continue", "debugger", "default", "delete", "do", "else", "enum",
    "eval", "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new",
    "null", "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var",
    "void", "while", "with", "yield",
})


def normalize_key(key: str, routes_root: str = "src/routes") -> str:
    """Return *key* relative to the routes root.

    Keys that do not start with ``/`` may be Windows paths, so backslashes
    are converted to forward slashes first. Everything up through (and
    including) the *last* occurrence of ``<routes_root>/`` is then removed.
    Keys without the marker are returned with only separator normalisation.

    Args:
        key: A declaration key, absolute or already relative.
        routes_root: The routes directory marker (e.g. ``"src/routes"``).
            An empty string disables prefix stripping.

    Returns:
        The normalised key.

    Example::

        >>> normalize_key("/app/src/routes/users/+server.ts")
        'users/+server.ts'
        >>> normalize_key("C:\\\\app\\\\src\\\\routes\\\\users\\\\+server.ts")
        'users/+server.ts'
        >>> normalize_key("users/[id]/+endpoint")
        'users/[id]/+endpoint'
    """
    if not key.startswith("/"):
        key = key.replace("\\", "/")

    root = routes_root.replace("\\", "/").strip("/")
    if not root:
        return key

    marker = root + "/"
    index = key.rfind(marker)
    if index == -1:
        return key
    return key[index + len(marker):]


def split_key(key: str) -> list[str]:
    """Split a normalised key into non-empty segment tokens.

    ``"users/[id]/+server.ts"`` -> ``["users", "[id]", "+server.ts"]``
    ``""``                      -> ``[]``
    """
    return [s for s in key.split("/") if s]


def is_terminal(segment: str, markers: Iterable[str]) -> bool:
    """Return ``True`` if *segment* is one of the terminal *markers*."""
    return segment in set(markers)


def classify_segment(raw: str) -> Segment:
    """Classify a segment token into a :class:`~routeclient.models.Segment`.

    Args:
        raw: The token verbatim, brackets included.

    Returns:
        A segment whose ``name`` is the literal text for static tokens or the
        bare parameter name for bracketed ones.

    Example::

        >>> classify_segment("[[page]]").kind
        <SegmentKind.OPTIONAL: 'optional'>
        >>> classify_segment("[id=integer]").name
        'id'
        >>> classify_segment("[user-id]").name
        'userId'
    """
    match = _OPTIONAL_RE.match(raw)
    if match:
        return Segment(
            raw=raw, kind=SegmentKind.OPTIONAL, name=to_identifier(_param_name(match["body"]))
        )

    match = _REQUIRED_RE.match(raw)
    if match:
        return Segment(
            raw=raw, kind=SegmentKind.REQUIRED, name=to_identifier(_param_name(match["body"]))
        )

    return Segment(raw=raw, kind=SegmentKind.STATIC, name=raw)


def parameter_name(raw: str) -> Optional[str]:
    """Return the parameter name spelled inside a bracketed token.

    This is the name as written (``user-id`` for ``[[user-id=slug]]``), not
    the identifier the emitter uses. Static tokens return ``None``.
    """
    match = _OPTIONAL_RE.match(raw) or _REQUIRED_RE.match(raw)
    if match is None:
        return None
    return _param_name(match["body"])


def to_identifier(name: str) -> str:
    """Map a parameter name to a usable JavaScript identifier.

    Runs of other characters are dropped and the following word is
    capitalised (``user-id`` -> ``userId``). A leading digit gets a ``_``
    prefix and reserved words a ``_`` suffix.
    """
    if _IDENTIFIER_RE.match(name) and name not in _RESERVED_WORDS:
        return name

    words = [w for w in _NON_IDENTIFIER_RE.split(name) if w]
    if not words:
        return "_"
    identifier = words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])
    if identifier[0].isdigit():
        identifier = "_" + identifier
    if identifier in _RESERVED_WORDS:
        identifier += "_"
    return identifier


def _param_name(body: str) -> str:
    """Strip the rest prefix and matcher suffix from a bracket body."""
    if body.startswith("..."):
        body = body[3:]
    return body.split("=", 1)[0]
