"""Unit tests for the request expression parser."""

from __future__ import annotations

import pytest

from ostmap_query.exceptions import RequestSyntaxError
from ostmap_query.query.parser import parse_request
from ostmap_query.query.requests import TermRequest, TimeSpanRequest

# ---------------------------------------------------------------------------
# Term requests
# ---------------------------------------------------------------------------


class TestTermRequests:
    def test_bare_token(self) -> None:
        assert parse_request("text:flood") == TermRequest(token="flood", field="text")

    def test_wildcard_kept_on_token(self) -> None:
        assert parse_request("text:flood*") == TermRequest(token="flood*", field="text")

    def test_quoted_token(self) -> None:
        assert parse_request('user:"jane doe"') == TermRequest(token="jane doe", field="user")

    def test_quoted_escapes(self) -> None:
        req = parse_request(r'text:"say \"hi\""')
        assert req == TermRequest(token='say "hi"', field="text")

    def test_colon_inside_token(self) -> None:
        assert parse_request("text:a:b") == TermRequest(token="a:b", field="text")

    def test_surrounding_whitespace(self) -> None:
        assert parse_request("  text:abc  ") == TermRequest(token="abc", field="text")

    def test_dotted_field(self) -> None:
        assert parse_request("place.name:berlin").field == "place.name"

    def test_numeric_token(self) -> None:
        assert parse_request("text:2016") == TermRequest(token="2016", field="text")


# ---------------------------------------------------------------------------
# Time span requests
# ---------------------------------------------------------------------------


class TestTimeSpanRequests:
    def test_span(self) -> None:
        assert parse_request("100..200") == TimeSpanRequest(start_time="100", end_time="200")

    def test_span_large_values(self) -> None:
        req = parse_request("1461103200000..1461189600000")
        assert req == TimeSpanRequest("1461103200000", "1461189600000")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.parametrize(
        "expression",
        ["", "   ", "flood", "text:", ":flood", "-5..10", "100..", "text:two words", '"abc"'],
    )
    def test_invalid(self, expression: str) -> None:
        with pytest.raises(RequestSyntaxError):
            parse_request(expression)

    def test_error_carries_expression(self) -> None:
        with pytest.raises(RequestSyntaxError) as exc_info:
            parse_request("flood")
        assert exc_info.value.expression == "flood"
