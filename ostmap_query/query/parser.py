"""Parse one-line request expressions into request objects."""

from __future__ import annotations

import re
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from ostmap_query.exceptions import RequestSyntaxError
from ostmap_query.query.requests import ScanRequest, TermRequest, TimeSpanRequest

_ESCAPE_RE = re.compile(r"\\(.)")


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("ostmap_query.query").joinpath("grammar.lark").read_text()


_parser = Lark(
    _load_grammar(),
    parser="earley",
    ambiguity="resolve",
)


class _RequestTransformer(Transformer):
    """Transform the Lark parse tree into request objects."""

    def start(self, items: list[Any]) -> ScanRequest:
        return items[0]

    def span_request(self, items: list[Any]) -> TimeSpanRequest:
        return TimeSpanRequest(start_time=str(items[0]), end_time=str(items[1]))

    def term_request(self, items: list[Any]) -> TermRequest:
        return TermRequest(token=items[1], field=str(items[0]))

    def bare_token(self, items: list[Any]) -> str:
        return str(items[0])

    def quoted_token(self, items: list[Any]) -> str:
        return str(items[0])

    def QUOTED_STRING(self, token: Token) -> str:
        # Strip surrounding quotes and resolve backslash escapes
        return _ESCAPE_RE.sub(r"\1", str(token)[1:-1])


_transformer = _RequestTransformer()


def parse_request(expression: str) -> ScanRequest:
    """Parse a request expression.

    Args:
        expression: ``FIELD:TOKEN``, ``FIELD:"quoted token"`` or
            ``START..END``.

    Returns:
        A TermRequest or TimeSpanRequest.

    Raises:
        RequestSyntaxError: If the expression cannot be parsed.
    """
    expression = expression.strip()
    if not expression:
        raise RequestSyntaxError(expression, "empty request")

    try:
        tree = _parser.parse(expression)
        return _transformer.transform(tree)
    except UnexpectedInput as e:
        raise RequestSyntaxError(expression, str(e)) from e
