"""Emit the client object for a route tree.

This is the second stage of client generation: a pure recursive descent over
the frozen :class:`~routeclient.models.TreeNode` that produces a
:class:`~routeclient.generator.ts_ast.ObjectLiteral`. Every tree member
becomes exactly one object member, in tree order:

* **Endpoint** -- an ``async`` verb method. It calls the caller-supplied
  ``fetchFn`` when given, the ambient ``fetch`` otherwise, with the route's
  URL and ``{ method, ...init }``, and resolves with ``res.json()``.
* **Branch on a parameter segment** -- a method named after the parameter,
  taking one ``string`` argument (optional for ``[[name]]``) and returning
  the object for the child node.
* **Branch on a static segment** -- a property holding the child's object.

Parameter segments open a scope: the :class:`EmitContext` passed down the
recursion records every enclosing parameter, and
:func:`substitute_path` replaces their placeholders in each route's path
template with interpolations of the accessor arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Union

from routeclient.exceptions import MemberNameConflictError
from routeclient.generator.path_keys import parameter_name
from routeclient.generator.ts_ast import (
    ArrowFunction,
    CallExpression,
    ConditionalExpression,
    DocComment,
    Expression,
    Identifier,
    IfStatement,
    MemberExpression,
    Method,
    ObjectLiteral,
    ObjectMember,
    Parameter,
    Property,
    ReturnStatement,
    SpreadElement,
    StringLiteral,
    TemplateLiteral,
)
from routeclient.models import (
    Branch,
    Endpoint,
    GeneratorConfig,
    MethodCase,
    RouteDescriptor,
    Segment,
    SegmentKind,
    TreeNode,
)

_INIT_PARAM = Parameter(name="init", type_annotation="RequestInit", optional=True)
_FETCH_PARAM = Parameter(name="fetchFn", type_annotation="typeof fetch", optional=True)


@dataclass(frozen=True)
class EmitContext:
    """Parameters open at the current depth of the emission.

    Passed by value down the recursion; :meth:`with_param` returns a new
    context and never mutates the receiver.
    """

    params: tuple[Segment, ...] = ()
    method_case: MethodCase = MethodCase.UPPER

    def with_param(self, segment: Segment) -> EmitContext:
        return replace(self, params=self.params + (segment,))

    @property
    def optional_param_name(self) -> Optional[str]:
        """Name of the innermost open optional parameter, if any."""
        for segment in reversed(self.params):
            if segment.kind is SegmentKind.OPTIONAL:
                return segment.name
        return None


def emit_client(tree: TreeNode, config: Optional[GeneratorConfig] = None) -> ObjectLiteral:
    """Emit the client object literal for the whole *tree*.

    Args:
        tree: Root node produced by
            :func:`~routeclient.generator.route_tree.build_route_tree`.
        config: Generator settings; only ``method_case`` is consulted here.

    Returns:
        The object literal that becomes the module's default export.
    """
    config = config or GeneratorConfig()
    context = EmitContext(method_case=config.method_case)
    return ObjectLiteral(members=emit_members(tree, context))


def emit_members(node: TreeNode, context: EmitContext) -> tuple[ObjectMember, ...]:
    """Emit one object member per member of *node*, preserving order.

    Raises:
        MemberNameConflictError: When two members of *node* would get the
            same name in the emitted object.
    """
    members: list[ObjectMember] = []
    emitted: dict[str, str] = {}
    for member in node.members:
        if isinstance(member, Endpoint):
            emitted_member: ObjectMember = emit_endpoint(member, context)
            name = emitted_member.name
        else:
            emitted_member = _emit_branch(member, context)
            name = member.segment.name

        origin = _declared_at(member)
        if name in emitted:
            raise MemberNameConflictError(name, emitted[name], origin)
        emitted[name] = origin
        members.append(emitted_member)
    return tuple(members)


def _declared_at(member: Union[Branch, Endpoint]) -> str:
    """Declaration key behind *member*, for conflict messages.

    A branch reports the first endpoint below it, or its raw segment when
    nothing is attached underneath.
    """
    if isinstance(member, Endpoint):
        return member.declared_at
    for _, endpoint in member.node.walk():
        return endpoint.declared_at
    return member.segment.raw


def _emit_branch(branch: Branch, context: EmitContext) -> ObjectMember:
    segment = branch.segment
    if segment.kind is SegmentKind.STATIC:
        return Property(
            key=segment.name,
            value=ObjectLiteral(members=emit_members(branch.node, context)),
        )

    inner = context.with_param(segment)
    return Method(
        name=segment.name,
        params=(
            Parameter(
                name=segment.name,
                type_annotation="string",
                optional=segment.kind is SegmentKind.OPTIONAL,
            ),
        ),
        body=(ReturnStatement(ObjectLiteral(members=emit_members(branch.node, inner))),),
    )


def emit_endpoint(endpoint: Endpoint, context: EmitContext) -> Method:
    """Emit the ``async`` call method for one attached endpoint."""
    route = endpoint.route
    verb = endpoint.method.value
    url = substitute_path(route.path, context)

    return Method(
        name=verb.lower() if context.method_case is MethodCase.LOWER else verb,
        params=(_INIT_PARAM, _FETCH_PARAM),
        body=(
            IfStatement(
                test=Identifier("fetchFn"),
                consequent=(ReturnStatement(_request("fetchFn", url, verb)),),
                alternate=(ReturnStatement(_request("fetch", url, verb)),),
            ),
        ),
        is_async=True,
        return_type=f"Promise<{route.return_type}>",
        doc=_doc_for(route),
    )


def _request(fn: str, url: Expression, verb: str) -> Expression:
    """``fn(url, { method: verb, ...init }).then((res) => res.json())``."""
    options = ObjectLiteral(
        members=(
            Property(key="method", value=StringLiteral(verb)),
            SpreadElement(Identifier("init")),
        )
    )
    call = CallExpression(Identifier(fn), (url, options))
    parse = ArrowFunction(
        params=("res",),
        body=CallExpression(MemberExpression(Identifier("res"), "json")),
    )
    return CallExpression(MemberExpression(call, "then"), (parse,))


def _doc_for(route: RouteDescriptor) -> DocComment:
    if route.doc_comment and route.doc_comment.strip():
        doc = DocComment.from_text(route.doc_comment)
        if doc.lines:
            return doc
    return DocComment.from_text(f"{route.method.value} {route.path}")


def substitute_path(template: str, context: EmitContext) -> TemplateLiteral:
    """Turn a path template into a template literal for the open parameters.

    For every parameter in *context* (outermost first), each ``[[name]]`` in
    the template becomes ``${name ? name : ''}`` and each ``[name]`` becomes
    ``${name}``. A raw token carrying a matcher or rest marker
    (``[id=integer]``, ``[...path]``) is substituted the same way as its
    plain form. Placeholders for parameters that are not open are left as
    literal text.

    Example::

        >>> ctx = EmitContext().with_param(classify_segment("[[page]]"))
        >>> substitute_path("/posts/[[page]]", ctx).parts
        ('/posts/', ConditionalExpression(...))
    """
    parts: list[Union[str, Expression]] = [template]
    for segment in context.params:
        replacements = _replacements_for(segment)
        pattern = re.compile(
            "|".join(re.escape(token) for token in sorted(replacements, key=len, reverse=True))
        )
        parts = _split_parts(parts, pattern, replacements)
    return TemplateLiteral(parts=tuple(p for p in parts if p != ""))


def _replacements_for(segment: Segment) -> dict[str, Expression]:
    # Placeholders use the name as spelled in the key; the accessor argument
    # may carry a different, identifier-safe name.
    spelled = parameter_name(segment.raw) or segment.name
    name = Identifier(segment.name)
    fallback = ConditionalExpression(test=name, consequent=name, alternate=StringLiteral(""))
    replacements: dict[str, Expression] = {
        f"[[{spelled}]]": fallback,
        f"[{spelled}]": name,
    }
    replacements.setdefault(
        segment.raw, fallback if segment.kind is SegmentKind.OPTIONAL else name
    )
    return replacements


def _split_parts(
    parts: list[Union[str, Expression]],
    pattern: re.Pattern[str],
    replacements: dict[str, Expression],
) -> list[Union[str, Expression]]:
    """Split every literal chunk of *parts* around matches of *pattern*."""
    result: list[Union[str, Expression]] = []
    for part in parts:
        if not isinstance(part, str):
            result.append(part)
            continue
        position = 0
        for match in pattern.finditer(part):
            result.append(part[position:match.start()])
            result.append(replacements[match.group(0)])
            position = match.end()
        result.append(part[position:])
    return result
