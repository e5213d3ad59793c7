"""Tests for routeclient.generator.path_keys.

Covers:
- normalize_key: routes-root stripping, last-marker wins, Windows separators
- split_key drops empty segments
- is_terminal against the default and custom markers
- classify_segment for static, required, optional, matcher and rest tokens
- Parameter names are mapped to JavaScript identifiers
"""

from __future__ import annotations

import pytest

from routeclient.generator.path_keys import (
    classify_segment,
    is_terminal,
    normalize_key,
    parameter_name,
    split_key,
    to_identifier,
)
from routeclient.models import GeneratorConfig, SegmentKind


class TestNormalizeKey:
    """normalize_key() strips everything through the routes root."""

    def test_absolute_posix_key(self) -> None:
        assert normalize_key("/home/me/app/src/routes/users/+server.ts") == "users/+server.ts"

    def test_relative_key_with_marker(self) -> None:
        assert normalize_key("src/routes/users/[id]/+server.ts") == "users/[id]/+server.ts"

    def test_key_without_marker_unchanged(self) -> None:
        assert normalize_key("users/[id]/+endpoint") == "users/[id]/+endpoint"

    def test_last_marker_wins(self) -> None:
        key = "/repo/src/routes/vendor/src/routes/users/+server.ts"
        assert normalize_key(key) == "users/+server.ts"

    def test_windows_separators(self) -> None:
        key = "C:\\app\\src\\routes\\users\\[id]\\+server.ts"
        assert normalize_key(key) == "users/[id]/+server.ts"

    def test_backslashes_kept_for_posix_absolute(self) -> None:
        # A leading "/" marks a POSIX path, where "\" is an ordinary character.
        assert normalize_key("/src/routes/a\\b/+server.ts") == "a\\b/+server.ts"

    def test_custom_routes_root(self) -> None:
        assert normalize_key("/app/api/v1/users/+server.ts", "api/v1") == "users/+server.ts"

    def test_routes_root_trailing_slash_ignored(self) -> None:
        assert normalize_key("/app/routes/users/+server.ts", "routes/") == "users/+server.ts"

    def test_empty_routes_root_disables_stripping(self) -> None:
        assert normalize_key("src/routes/users/+server.ts", "") == "src/routes/users/+server.ts"

    def test_marker_must_be_followed_by_slash(self) -> None:
        assert normalize_key("/app/src/routes") == "/app/src/routes"


class TestSplitKey:
    def test_splits_on_slash(self) -> None:
        assert split_key("users/[id]/+server.ts") == ["users", "[id]", "+server.ts"]

    def test_drops_empty_segments(self) -> None:
        assert split_key("/users//[id]/") == ["users", "[id]"]

    def test_empty_key(self) -> None:
        assert split_key("") == []


class TestIsTerminal:
    @pytest.mark.parametrize("segment", ["+server.ts", "+server.js", "+endpoint"])
    def test_default_markers(self, segment: str) -> None:
        assert is_terminal(segment, GeneratorConfig().terminal_markers)

    def test_non_marker(self) -> None:
        assert not is_terminal("+page.svelte", GeneratorConfig().terminal_markers)

    def test_custom_markers(self) -> None:
        assert is_terminal("route.py", ["route.py"])
        assert not is_terminal("+server.ts", ["route.py"])


class TestClassifySegment:
    def test_static(self) -> None:
        seg = classify_segment("users")
        assert seg.kind is SegmentKind.STATIC
        assert seg.name == "users"
        assert not seg.is_param

    def test_required(self) -> None:
        seg = classify_segment("[id]")
        assert seg.kind is SegmentKind.REQUIRED
        assert seg.name == "id"
        assert seg.raw == "[id]"
        assert seg.is_param

    def test_optional(self) -> None:
        seg = classify_segment("[[page]]")
        assert seg.kind is SegmentKind.OPTIONAL
        assert seg.name == "page"

    def test_matcher_stripped_from_name(self) -> None:
        seg = classify_segment("[id=integer]")
        assert seg.kind is SegmentKind.REQUIRED
        assert seg.name == "id"
        assert seg.raw == "[id=integer]"

    def test_rest_prefix_stripped_from_name(self) -> None:
        seg = classify_segment("[...path]")
        assert seg.kind is SegmentKind.REQUIRED
        assert seg.name == "path"

    def test_optional_with_matcher(self) -> None:
        seg = classify_segment("[[lang=locale]]")
        assert seg.kind is SegmentKind.OPTIONAL
        assert seg.name == "lang"

    @pytest.mark.parametrize("raw", ["[", "]", "[]", "a[b]", "[a]b", "[[a]"])
    def test_malformed_brackets_are_static(self, raw: str) -> None:
        assert classify_segment(raw).kind is SegmentKind.STATIC

    def test_non_identifier_name_mapped(self) -> None:
        seg = classify_segment("[user-id]")
        assert seg.kind is SegmentKind.REQUIRED
        assert seg.name == "userId"
        assert seg.raw == "[user-id]"

    def test_reserved_word_name_mapped(self) -> None:
        assert classify_segment("[[default]]").name == "default_"


class TestParameterName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("[id]", "id"),
            ("[[page]]", "page"),
            ("[user-id=slug]", "user-id"),
            ("[...rest-path]", "rest-path"),
            ("users", None),
        ],
    )
    def test_spelled_name(self, raw: str, expected: str | None) -> None:
        assert parameter_name(raw) == expected


class TestToIdentifier:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("id", "id"),
            ("user_id", "user_id"),
            ("$ref", "$ref"),
            ("user-id", "userId"),
            ("first.last name", "firstLastName"),
            ("2fa", "_2fa"),
            ("class", "class_"),
            ("---", "_"),
        ],
    )
    def test_mapping(self, name: str, expected: str) -> None:
        assert to_identifier(name) == expected
