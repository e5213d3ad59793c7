"""Extract a validated route collection from a raw manifest document.

A manifest maps declaration keys to per-method route descriptors. Two layouts
are accepted::

    {"routes": {"users/[id]/+server.ts": {"GET": {...}}}}
    {"users/[id]/+server.ts": {"GET": {...}}}

Inside a descriptor ``method`` may be omitted, in which case the method key
it is listed under is used. Key order is preserved exactly as written, since
it fixes the member order of the generated client.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from routeclient.exceptions import ManifestError
from routeclient.models import HTTPMethod, RouteDescriptor, RouteManifest

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def extract_manifest(raw: dict[str, Any], source: Optional[str] = None) -> RouteManifest:
    """Build a :class:`~routeclient.models.RouteManifest` from *raw*.

    Args:
        raw: The document as returned by
            :func:`~routeclient.manifest.loader.load_manifest`.
        source: Where the document came from, recorded on the manifest.

    Returns:
        The validated manifest.

    Raises:
        ManifestError: If a declaration or descriptor has the wrong shape,
            names an unknown HTTP method, or fails validation.

    Example::

        raw = load_manifest("routes.json")
        manifest = extract_manifest(raw, source="routes.json")
        print(manifest.route_count)
    """
    declarations = raw["routes"] if "routes" in raw else raw
    if not isinstance(declarations, dict):
        raise ManifestError("'routes' must be an object mapping declaration keys to methods")

    routes: dict[str, dict[HTTPMethod, RouteDescriptor]] = {}
    for key, methods in declarations.items():
        if not isinstance(methods, dict):
            raise ManifestError(
                f"Declaration '{key}' must map HTTP methods to route descriptors"
            )
        routes[str(key)] = {
            method: descriptor
            for method, descriptor in (
                _extract_descriptor(key, name, body) for name, body in methods.items()
            )
        }

    return RouteManifest(routes=routes, source=source)


def _extract_descriptor(
    key: str, method_name: Any, body: Any
) -> tuple[HTTPMethod, RouteDescriptor]:
    """Validate one ``METHOD: descriptor`` entry of declaration *key*."""
    verb = str(method_name).upper()
    if verb not in _HTTP_METHODS:
        raise ManifestError(
            f"Unsupported HTTP method '{method_name}' in '{key}' "
            f"(expected one of {', '.join(sorted(_HTTP_METHODS))})"
        )
    if not isinstance(body, dict):
        raise ManifestError(f"{verb} in '{key}' must be an object")

    data = dict(body)
    data.setdefault("method", verb)
    try:
        descriptor = RouteDescriptor.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Invalid {verb} route in '{key}': {exc}") from exc

    if descriptor.method.value != verb:
        raise ManifestError(
            f"{verb} in '{key}' declares method {descriptor.method.value}"
        )
    return descriptor.method, descriptor
