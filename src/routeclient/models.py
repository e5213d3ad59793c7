"""Canonical Pydantic models shared across all routeclient modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or the project-local ``routeclient.json``:
    :class:`FormatOptions`, :class:`GeneratorConfig`, :class:`OutputConfig`,
    and :class:`GlobalConfig`.

**Route input models** -- produced by the manifest extractor (or by any caller
holding route definitions in memory) and consumed by the tree builder:
    :class:`HTTPMethod`, :class:`RouteDescriptor`, :class:`RouteManifest` and
    the :data:`RouteCollection` alias.

**Route tree models** -- the immutable output of the tree builder, walked by
the client emitter:
    :class:`SegmentKind`, :class:`Segment`, :class:`Endpoint`,
    :class:`Branch`, and :class:`TreeNode`.

All models use Pydantic v2. Route and tree models are frozen; a tree handed to
the emitter can no longer change.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Iterator, Literal, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# --- Route input ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a route declaration may export.

    The values double as the reserved member names attached to tree nodes, so
    they are kept in the upper-case form used by the route files themselves.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class RouteDescriptor(BaseModel):
    """One REST endpoint: an HTTP method bound to a URL path template.

    The ``path`` template may contain ``[name]`` (required) and ``[[name]]``
    (optional) placeholders; the emitter substitutes the ones belonging to
    enclosing parameter segments. ``return_type`` is written verbatim into the
    generated ``Promise<...>`` annotation.

    Manifests written by JavaScript tooling use camelCase keys, so
    ``returnType`` and ``docComment`` (or ``jsDoc``) are accepted as well as the
    snake_case field names, and serialisation uses the camelCase form.

    Example::

        RouteDescriptor(method="GET", path="/users/[id]", returnType="User")
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    return_type: str = Field(
        default="any",
        validation_alias=AliasChoices("returnType", "return_type"),
        serialization_alias="returnType",
        description="TypeScript type of the parsed response body",
    )
    doc_comment: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("docComment", "jsDoc", "doc_comment"),
        serialization_alias="docComment",
        description="Documentation block emitted above the call method",
    )

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


RouteCollection = Mapping[str, Mapping[HTTPMethod, RouteDescriptor]]
"""Declaration key -> HTTP method -> :class:`RouteDescriptor`.

Iteration order is significant: it fixes the order of the generated members.
"""


class RouteManifest(BaseModel):
    """A route collection loaded from a manifest document.

    Produced by :func:`~routeclient.manifest.extractor.extract_manifest`.
    ``source`` records where the manifest was read from, for diagnostics.
    """

    routes: dict[str, dict[HTTPMethod, RouteDescriptor]] = Field(default_factory=dict)
    source: Optional[str] = None

    @property
    def route_count(self) -> int:
        """Total number of route descriptors across all declaration keys."""
        return sum(len(methods) for methods in self.routes.values())


# --- Route tree ---


class SegmentKind(str, enum.Enum):
    """Classification of one declaration-key segment."""

    STATIC = "static"
    REQUIRED = "required"
    OPTIONAL = "optional"


class Segment(BaseModel):
    """One slash-delimited token of a declaration key, classified.

    ``raw`` is the token verbatim (``users``, ``[id]``, ``[[page]]``) and is
    the identity used for structural sharing in the tree. ``name`` is the
    identifier the emitter uses: the literal text for static segments, the
    bare parameter name for dynamic ones.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    kind: SegmentKind
    name: str

    @property
    def is_param(self) -> bool:
        """Whether this segment is a required or optional path parameter."""
        return self.kind is not SegmentKind.STATIC


class Endpoint(BaseModel):
    """A route descriptor attached to a tree node under its HTTP method."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["endpoint"] = "endpoint"
    method: HTTPMethod
    route: RouteDescriptor
    declared_at: str = Field(
        default="", description="Declaration key that attached this endpoint"
    )


class Branch(BaseModel):
    """An edge from a tree node to the child reached through ``segment``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["branch"] = "branch"
    segment: Segment
    node: TreeNode


TreeMember = Annotated[Union[Branch, Endpoint], Field(discriminator="kind")]


class TreeNode(BaseModel):
    """One level of the route tree.

    ``members`` holds child branches and attached endpoints in the order they
    were first inserted by the builder. That order is the only ordering the
    generated client guarantees, and it is stable across runs.
    """

    model_config = ConfigDict(frozen=True)

    members: tuple[TreeMember, ...] = ()

    @property
    def branches(self) -> tuple[Branch, ...]:
        """Child branches, in insertion order."""
        return tuple(m for m in self.members if isinstance(m, Branch))

    @property
    def endpoints(self) -> tuple[Endpoint, ...]:
        """Attached endpoints, in insertion order."""
        return tuple(m for m in self.members if isinstance(m, Endpoint))

    def child(self, raw: str) -> Optional[TreeNode]:
        """Return the child reached through the segment spelled *raw*, if any."""
        for branch in self.branches:
            if branch.segment.raw == raw:
                return branch.node
        return None

    def endpoint(self, method: HTTPMethod | str) -> Optional[RouteDescriptor]:
        """Return the route attached under *method* at this node, if any."""
        method = HTTPMethod(method.upper()) if isinstance(method, str) else method
        for ep in self.endpoints:
            if ep.method is method:
                return ep.route
        return None

    def walk(
        self, prefix: tuple[Segment, ...] = ()
    ) -> Iterator[tuple[tuple[Segment, ...], Endpoint]]:
        """Yield ``(segments, endpoint)`` for every endpoint, depth first.

        ``segments`` is the path of segments from the root to the node the
        endpoint is attached to.
        """
        for member in self.members:
            if isinstance(member, Endpoint):
                yield prefix, member
            else:
                yield from member.node.walk(prefix + (member.segment,))

    @property
    def is_empty(self) -> bool:
        """Whether this node has neither branches nor endpoints."""
        return not self.members


Branch.model_rebuild()
TreeNode.model_rebuild()


# --- Generator config ---


class Dialect(str, enum.Enum):
    """Target language of the generated client."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"


class DuplicatePolicy(str, enum.Enum):
    """What to do when two declarations attach the same method to one node."""

    ERROR = "error"
    LAST_WINS = "last_wins"


class MethodCase(str, enum.Enum):
    """Spelling of the generated verb method names."""

    UPPER = "upper"
    LOWER = "lower"


class FormatOptions(BaseModel):
    """Formatting applied by the printer to the generated source."""

    indent_width: int = Field(default=4, ge=1, le=16, description="Spaces per level")
    single_quote: bool = Field(default=True, description="Quote strings with '")
    dialect: Dialect = Field(default=Dialect.TYPESCRIPT)
    trailing_commas: bool = Field(
        default=True, description="Trailing comma after the last object member"
    )


class GeneratorConfig(BaseModel):
    """Settings for one client generation run.

    See Also:
        :func:`~routeclient.config.resolve_config`: merges this model from
        the global config, the project config, environment and CLI flags.
    """

    routes_root: str = Field(
        default="src/routes",
        description="Directory marker stripped (with everything before it) from keys",
    )
    terminal_markers: list[str] = Field(
        default_factory=lambda: ["+server.ts", "+server.js", "+endpoint"],
        description="Final key segments that attach routes to the parent node",
    )
    duplicate_policy: DuplicatePolicy = Field(default=DuplicatePolicy.ERROR)
    method_case: MethodCase = Field(default=MethodCase.UPPER)
    banner: bool = Field(
        default=True, description="Emit the 'generated file' banner comment"
    )
    format: FormatOptions = Field(default_factory=FormatOptions)


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/routeclient/config.json``.

    Loaded and saved by :func:`~routeclient.config.load_global_config` and
    :func:`~routeclient.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags.
    """

    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
