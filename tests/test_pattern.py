"""Tests for perch.routing.pattern — segment parsing and the matcher."""

import pytest

from perch.routing.pattern import (
    Literal,
    Param,
    Pattern,
    Wildcard,
    match_pattern,
    split_path,
)


class TestSplitPath:
    def test_root(self) -> None:
        assert split_path("/") == [""]

    def test_empty(self) -> None:
        assert split_path("") == [""]

    def test_trims_surrounding_slashes(self) -> None:
        assert split_path("//users/42//") == ["users", "42"]

    def test_keeps_interior_empty_segments(self) -> None:
        assert split_path("/a//b") == ["a", "", "b"]


class TestPatternParse:
    def test_literal(self) -> None:
        assert Pattern.parse("/users").segments == (Literal("users"),)

    def test_param(self) -> None:
        pattern = Pattern.parse("/users/:id")
        assert pattern.segments == (Literal("users"), Param("id"))
        assert pattern.param_names == ("id",)
        assert pattern.has_wildcard is False

    def test_wildcard(self) -> None:
        pattern = Pattern.parse("/file/*")
        assert pattern.segments == (Literal("file"), Wildcard())
        assert pattern.has_wildcard is True

    def test_star_inside_text_is_literal(self) -> None:
        assert Pattern.parse("/a*b").segments == (Literal("a*b"),)

    def test_source_kept_verbatim(self) -> None:
        assert Pattern.parse("/users/").source == "/users/"
        assert str(Pattern.parse("/x")) == "/x"


class TestLiteralMatching:
    def test_root_matches_root(self) -> None:
        assert match_pattern("/", "/").matched is True

    def test_root_does_not_match_other(self) -> None:
        assert match_pattern("/", "/users").matched is False

    def test_exact(self) -> None:
        assert match_pattern("/api/users", "/api/users").matched is True

    def test_differing_segment(self) -> None:
        assert match_pattern("/api/users", "/api/posts").matched is False

    def test_trailing_slash_ignored(self) -> None:
        assert match_pattern("/users", "/users/").matched is True

    def test_length_mismatch_without_wildcard(self) -> None:
        assert match_pattern("/users", "/users/42").matched is False
        assert match_pattern("/users/:id", "/users").matched is False


class TestParamMatching:
    def test_captures(self) -> None:
        result = match_pattern("/users/:id", "/users/42")
        assert result.matched is True
        assert result.params == {"id": "42"}

    def test_multiple_params(self) -> None:
        result = match_pattern("/users/:user/posts/:post", "/users/ann/posts/7")
        assert result.params == {"user": "ann", "post": "7"}

    def test_failed_match_leaks_no_captures(self) -> None:
        result = match_pattern("/users/:id/edit", "/users/42/view")
        assert result.matched is False
        assert result.params == {}

    def test_absent_segment_captures_none(self) -> None:
        # A wildcard lifts the length check, so the param can run past the path
        result = match_pattern("/*/:name", "/only")
        assert result.matched is True
        assert result.params == {"name": None}


class TestWildcardMatching:
    @pytest.mark.parametrize("path", ["/file/1", "/file/1/2", "/file"])
    def test_trailing_wildcard_absorbs_rest(self, path: str) -> None:
        assert match_pattern("/file/*", path).matched is True

    def test_trailing_wildcard_needs_prefix(self) -> None:
        assert match_pattern("/file/*", "/files/1").matched is False

    def test_middle_wildcard(self) -> None:
        assert match_pattern("/file/*/min", "/file/1/min").matched is True

    def test_middle_wildcard_literal_still_aligned(self) -> None:
        assert match_pattern("/file/*/min", "/file/1").matched is False

    def test_middle_wildcard_does_not_span_segments(self) -> None:
        # Literals after the wildcard align by index: "min" vs "2"
        assert match_pattern("/file/*/min", "/file/1/2/min").matched is False

    def test_root_wildcard_matches_everything(self) -> None:
        assert match_pattern("/*", "/").matched is True
        assert match_pattern("/*", "/list/1/2").matched is True


class TestPurity:
    def test_same_inputs_same_result(self) -> None:
        pattern = Pattern.parse("/users/:id")
        first = match_pattern(pattern, "/users/9")
        second = match_pattern(pattern, "/users/9")
        assert first == second

    def test_string_and_parsed_pattern_agree(self) -> None:
        assert match_pattern("/a/:b", "/a/c") == match_pattern(Pattern.parse("/a/:b"), "/a/c")
