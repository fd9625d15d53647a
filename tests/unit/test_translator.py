"""Unit tests for term translation."""

from __future__ import annotations

import pytest

from ostmap_query.exceptions import ValidationError
from ostmap_query.query.ranges import Range
from ostmap_query.query.specs import TERM_INDEX_TABLE, SubstringFilter
from ostmap_query.query.translator import has_wildcard, translate_term


class TestWildcardToken:
    def test_prefix_range_without_filter(self) -> None:
        spec = translate_term("abc*", "text")
        assert spec.table == TERM_INDEX_TABLE
        assert spec.field == "text"
        assert spec.range == Range(b"abc", b"abd")
        assert spec.filter is None

    def test_range_contents(self) -> None:
        spec = translate_term("abc*", "text")
        assert spec.range.contains(b"abc")
        assert spec.range.contains(b"abcd")
        assert not spec.range.contains(b"abd")
        assert not spec.range.contains(b"ab")

    def test_only_trailing_marker_stripped(self) -> None:
        spec = translate_term("a*b*", "text")
        assert spec.range.start == b"a*b"
        assert spec.range.contains(b"a*bc")
        assert not spec.range.contains(b"axbc")

    def test_double_trailing_marker(self) -> None:
        spec = translate_term("ab**", "text")
        assert spec.range.start == b"ab*"

    def test_lone_marker_matches_whole_field(self) -> None:
        spec = translate_term("*", "user")
        assert spec.range == Range(b"", None)
        assert spec.filter is None


class TestExactToken:
    def test_exact_range_with_filter(self) -> None:
        spec = translate_term("abc", "text")
        assert spec.range.is_single_key
        assert spec.range.start == b"abc"
        assert spec.filter == SubstringFilter(b"abc")

    def test_exact_range_contents(self) -> None:
        spec = translate_term("abc", "text")
        assert spec.range.contains(b"abc")
        assert not spec.range.contains(b"abcd")

    def test_leading_marker_is_literal(self) -> None:
        spec = translate_term("*abc", "text")
        assert spec.range.start == b"*abc"
        assert spec.filter == SubstringFilter(b"*abc")

    def test_embedded_marker_is_literal(self) -> None:
        spec = translate_term("a*c", "text")
        assert spec.range.is_single_key
        assert spec.filter == SubstringFilter(b"a*c")

    def test_bytes_token(self) -> None:
        spec = translate_term(b"\xff\x00", "text")
        assert spec.range.start == b"\xff\x00"

    def test_unicode_token_utf8(self) -> None:
        spec = translate_term("überflutung", "text")
        assert spec.range.start == "überflutung".encode()


class TestField:
    def test_field_used_verbatim(self) -> None:
        assert translate_term("abc", "Text.Body").field == "Text.Body"

    def test_empty_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            translate_term("abc", "")


def test_translation_is_idempotent() -> None:
    assert translate_term("abc", "text") == translate_term("abc", "text")
    assert translate_term("abc*", "text") == translate_term("abc*", "text")


@pytest.mark.parametrize(
    ("token", "expected"),
    [("abc*", True), (b"abc*", True), ("abc", False), ("*abc", False), ("", False)],
)
def test_has_wildcard(token: str | bytes, expected: bool) -> None:
    assert has_wildcard(token) is expected
