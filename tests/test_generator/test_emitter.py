"""Tests for routeclient.generator.emitter.

Covers:
- Static branches become properties, parameter branches become accessors
- Optional parameters produce an optional accessor argument
- Verb methods: async, (init?, fetchFn?), Promise<returnType>, doc comment
- substitute_path for required, optional, matcher and rest parameters
- Every enclosing parameter is substituted, outermost first
- method_case controls verb method names
- Member names are unique within each emitted object
- Parameter names that are not identifiers are mapped, placeholders still substituted
"""

from __future__ import annotations

import pytest

from routeclient.exceptions import MemberNameConflictError
from routeclient.generator.emitter import (
    EmitContext,
    emit_client,
    emit_endpoint,
    substitute_path,
)
from routeclient.generator.path_keys import classify_segment
from routeclient.generator.route_tree import build_route_tree
from routeclient.generator.ts_ast import (
    CallExpression,
    ConditionalExpression,
    Identifier,
    IfStatement,
    MemberExpression,
    Method,
    ObjectLiteral,
    Property,
    ReturnStatement,
    StringLiteral,
)
from routeclient.models import (
    Endpoint,
    GeneratorConfig,
    HTTPMethod,
    MethodCase,
    RouteDescriptor,
)


def _route(method: str, path: str, return_type: str = "any", **kwargs: str) -> RouteDescriptor:
    return RouteDescriptor(method=method, path=path, return_type=return_type, **kwargs)


def _context(*raws: str) -> EmitContext:
    context = EmitContext()
    for raw in raws:
        context = context.with_param(classify_segment(raw))
    return context


def _optional(name: str) -> ConditionalExpression:
    return ConditionalExpression(Identifier(name), Identifier(name), StringLiteral(""))


class TestSubstitutePath:
    def test_no_params_leaves_text(self) -> None:
        assert substitute_path("/users/[id]", EmitContext()).parts == ("/users/[id]",)

    def test_required_param(self) -> None:
        parts = substitute_path("/users/[id]", _context("[id]")).parts
        assert parts == ("/users/", Identifier("id"))

    def test_optional_param(self) -> None:
        parts = substitute_path("/posts/[[page]]", _context("[[page]]")).parts
        assert parts == ("/posts/", _optional("page"))

    def test_all_enclosing_params_substituted(self) -> None:
        parts = substitute_path(
            "/orgs/[org]/repos/[repo]/issues", _context("[org]", "[repo]")
        ).parts
        assert parts == ("/orgs/", Identifier("org"), "/repos/", Identifier("repo"), "/issues")

    def test_mixed_required_and_optional(self) -> None:
        parts = substitute_path("/[[lang]]/docs/[slug]", _context("[[lang]]", "[slug]")).parts
        assert parts == ("/", _optional("lang"), "/docs/", Identifier("slug"))

    def test_params_not_open_left_literal(self) -> None:
        parts = substitute_path("/users/[id]/posts/[postId]", _context("[id]")).parts
        assert parts == ("/users/", Identifier("id"), "/posts/[postId]")

    def test_repeated_placeholder(self) -> None:
        parts = substitute_path("/[id]/copy/[id]", _context("[id]")).parts
        assert parts == ("/", Identifier("id"), "/copy/", Identifier("id"))

    def test_matcher_token(self) -> None:
        parts = substitute_path("/items/[id=integer]", _context("[id=integer]")).parts
        assert parts == ("/items/", Identifier("id"))

    def test_rest_token(self) -> None:
        parts = substitute_path("/files/[...path]", _context("[...path]")).parts
        assert parts == ("/files/", Identifier("path"))

    def test_plain_spelling_matches_optional_segment(self) -> None:
        # The path template may spell an optional segment's placeholder as [name].
        parts = substitute_path("/posts/[page]", _context("[[page]]")).parts
        assert parts == ("/posts/", Identifier("page"))

    def test_name_prefix_not_confused(self) -> None:
        parts = substitute_path("/[idx]/[id]", _context("[id]")).parts
        assert parts == ("/[idx]/", Identifier("id"))

    def test_mapped_name_substitutes_spelled_placeholder(self) -> None:
        parts = substitute_path("/a/[user-id]", _context("[user-id]")).parts
        assert parts == ("/a/", Identifier("userId"))

    def test_mapped_optional_name_with_plain_spelling(self) -> None:
        parts = substitute_path("/a/[user-id]", _context("[[user-id]]")).parts
        assert parts == ("/a/", Identifier("userId"))

    def test_mapped_name_with_optional_spelling(self) -> None:
        parts = substitute_path("/a/[[user-id]]", _context("[[user-id]]")).parts
        assert parts == ("/a/", _optional("userId"))


class TestEmitContext:
    def test_with_param_does_not_mutate(self) -> None:
        base = EmitContext()
        inner = base.with_param(classify_segment("[id]"))
        assert base.params == ()
        assert [s.name for s in inner.params] == ["id"]

    def test_optional_param_name(self) -> None:
        assert _context("[[a]]", "[b]").optional_param_name == "a"
        assert _context("[a]").optional_param_name is None


class TestEmitEndpoint:
    def test_method_shape(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, route=_route("GET", "/users/[id]", "User"))
        method = emit_endpoint(endpoint, _context("[id]"))

        assert method.name == "GET"
        assert method.is_async
        assert method.return_type == "Promise<User>"
        assert [(p.name, p.type_annotation, p.optional) for p in method.params] == [
            ("init", "RequestInit", True),
            ("fetchFn", "typeof fetch", True),
        ]

    def test_body_prefers_fetch_fn(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.POST, route=_route("POST", "/users"))
        method = emit_endpoint(endpoint, EmitContext())

        (branch,) = method.body
        assert isinstance(branch, IfStatement)
        assert branch.test == Identifier("fetchFn")
        (custom,) = branch.consequent
        (ambient,) = branch.alternate
        for statement, fn in ((custom, "fetchFn"), (ambient, "fetch")):
            assert isinstance(statement, ReturnStatement)
            then_call = statement.argument
            assert isinstance(then_call, CallExpression)
            assert isinstance(then_call.callee, MemberExpression)
            assert then_call.callee.property == "then"
            request = then_call.callee.object
            assert request.callee == Identifier(fn)
            options = request.arguments[1]
            assert Property("method", StringLiteral("POST")) in options.members

    def test_lowercase_methods(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.DELETE, route=_route("DELETE", "/a"))
        method = emit_endpoint(endpoint, EmitContext(method_case=MethodCase.LOWER))
        assert method.name == "delete"

    def test_default_doc_comment(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, route=_route("GET", "/users"))
        assert emit_endpoint(endpoint, EmitContext()).doc.lines == ("GET /users",)

    def test_declared_doc_comment(self) -> None:
        route = _route("GET", "/users", doc_comment="/**\n * List users.\n * @returns all\n */")
        method = emit_endpoint(Endpoint(method=HTTPMethod.GET, route=route), EmitContext())
        assert method.doc.lines == ("List users.", "@returns all")

    def test_comment_terminator_in_doc_escaped(self) -> None:
        route = _route("GET", "/a", doc_comment="see a/*/b */ then")
        method = emit_endpoint(Endpoint(method=HTTPMethod.GET, route=route), EmitContext())
        assert method.doc.lines == ("see a/*\\/b *\\/ then",)

    def test_comment_terminator_in_default_doc_escaped(self) -> None:
        endpoint = Endpoint(method=HTTPMethod.GET, route=_route("GET", "/files/*/raw"))
        assert emit_endpoint(endpoint, EmitContext()).doc.lines == ("GET /files/*\\/raw",)

    def test_blank_doc_comment_falls_back(self) -> None:
        route = _route("GET", "/users", doc_comment="/** */")
        method = emit_endpoint(Endpoint(method=HTTPMethod.GET, route=route), EmitContext())
        assert method.doc.lines == ("GET /users",)


class TestEmitClient:
    def test_static_branch_is_property(self) -> None:
        tree = build_route_tree({"users/+server.ts": {HTTPMethod.GET: _route("GET", "/users")}})
        client = emit_client(tree)
        (users,) = client.members
        assert isinstance(users, Property)
        assert users.key == "users"
        assert isinstance(users.value, ObjectLiteral)
        (get,) = users.value.members
        assert isinstance(get, Method) and get.name == "GET"

    def test_required_param_branch_is_accessor(self) -> None:
        tree = build_route_tree(
            {"users/[id]/+server.ts": {HTTPMethod.GET: _route("GET", "/users/[id]")}}
        )
        (users,) = emit_client(tree).members
        (accessor,) = users.value.members
        assert isinstance(accessor, Method)
        assert accessor.name == "id"
        assert not accessor.is_async
        (param,) = accessor.params
        assert (param.name, param.type_annotation, param.optional) == ("id", "string", False)
        (ret,) = accessor.body
        assert isinstance(ret.argument, ObjectLiteral)

    def test_non_identifier_param_branch(self) -> None:
        tree = build_route_tree(
            {"a/[user-id]/+server.ts": {HTTPMethod.GET: _route("GET", "/a/[user-id]")}}
        )
        (a,) = emit_client(tree).members
        (accessor,) = a.value.members
        assert accessor.name == "userId"
        assert accessor.params[0].name == "userId"
        (get,) = accessor.body[0].argument.members
        url = get.body[0].consequent[0].argument.callee.object.arguments[0]
        assert url.parts == ("/a/", Identifier("userId"))

    def test_optional_param_branch(self) -> None:
        tree = build_route_tree(
            {"posts/[[page]]/+server.ts": {HTTPMethod.GET: _route("GET", "/posts/[[page]]")}}
        )
        (posts,) = emit_client(tree).members
        (accessor,) = posts.value.members
        assert accessor.params[0].optional

    def test_nested_params_reach_endpoint(self) -> None:
        path = "/orgs/[org]/repos/[repo]"
        tree = build_route_tree(
            {"orgs/[org]/repos/[repo]/+server.ts": {HTTPMethod.GET: _route("GET", path)}}
        )
        (orgs,) = emit_client(tree).members
        (org,) = orgs.value.members
        (repos,) = org.body[0].argument.members
        (repo,) = repos.value.members
        (get,) = repo.body[0].argument.members
        request = get.body[0].consequent[0].argument.callee.object
        url = request.arguments[0]
        assert url.parts == ("/orgs/", Identifier("org"), "/repos/", Identifier("repo"))

    def test_method_case_from_config(self) -> None:
        tree = build_route_tree({"a/+server.ts": {HTTPMethod.GET: _route("GET", "/a")}})
        (a,) = emit_client(tree, GeneratorConfig(method_case=MethodCase.LOWER)).members
        assert a.value.members[0].name == "get"

    def test_member_per_tree_member_in_order(self) -> None:
        tree = build_route_tree({
            "b/+server.ts": {HTTPMethod.GET: _route("GET", "/b")},
            "a/+server.ts": {HTTPMethod.GET: _route("GET", "/a")},
        })
        assert [m.key for m in emit_client(tree).members] == ["b", "a"]

    def test_empty_tree(self) -> None:
        assert emit_client(build_route_tree({})).members == ()


class TestMemberNameConflicts:
    def test_required_and_optional_siblings_conflict(self) -> None:
        tree = build_route_tree({
            "items/[id]/+server.ts": {HTTPMethod.GET: _route("GET", "/items/[id]")},
            "items/[[id]]/+server.ts": {HTTPMethod.POST: _route("POST", "/items/[[id]]")},
        })
        with pytest.raises(MemberNameConflictError) as excinfo:
            emit_client(tree)
        assert excinfo.value.name == "id"
        assert excinfo.value.first_key == "items/[id]/+server.ts"
        assert excinfo.value.second_key == "items/[[id]]/+server.ts"

    def test_static_segment_and_lowercase_verb_conflict(self) -> None:
        tree = build_route_tree({
            "a/+server.ts": {HTTPMethod.GET: _route("GET", "/a")},
            "a/get/+server.ts": {HTTPMethod.POST: _route("POST", "/a/get")},
        })
        with pytest.raises(MemberNameConflictError) as excinfo:
            emit_client(tree, GeneratorConfig(method_case=MethodCase.LOWER))
        assert excinfo.value.name == "get"
        assert excinfo.value.first_key == "a/+server.ts"
        assert excinfo.value.second_key == "a/get/+server.ts"

    def test_static_segment_and_uppercase_verb_do_not_conflict(self) -> None:
        tree = build_route_tree({
            "a/+server.ts": {HTTPMethod.GET: _route("GET", "/a")},
            "a/get/+server.ts": {HTTPMethod.POST: _route("POST", "/a/get")},
        })
        (a,) = emit_client(tree).members
        verb, static = a.value.members
        assert isinstance(verb, Method) and verb.name == "GET"
        assert isinstance(static, Property) and static.key == "get"

    def test_mapped_parameter_name_conflicts_with_static_segment(self) -> None:
        tree = build_route_tree({
            "users/userId/+server.ts": {HTTPMethod.GET: _route("GET", "/users/userId")},
            "users/[user-id]/+server.ts": {HTTPMethod.GET: _route("GET", "/users/[user-id]")},
        })
        with pytest.raises(MemberNameConflictError, match="userId"):
            emit_client(tree)

    def test_branch_without_endpoints_reports_segment(self) -> None:
        tree = build_route_tree({
            "[id]/nothing-here": {},
            "[[id]]/+server.ts": {HTTPMethod.GET: _route("GET", "/[[id]]")},
        })
        with pytest.raises(MemberNameConflictError) as excinfo:
            emit_client(tree)
        assert excinfo.value.first_key == "[id]"

    def test_nested_conflict_detected(self) -> None:
        tree = build_route_tree({
            "orgs/[org]/[id]/+server.ts": {HTTPMethod.GET: _route("GET", "/orgs/[org]/[id]")},
            "orgs/[org]/[[id]]/+server.ts": {HTTPMethod.GET: _route("GET", "/orgs/[org]/[[id]]")},
        })
        with pytest.raises(MemberNameConflictError):
            emit_client(tree)
