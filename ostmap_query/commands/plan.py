"""Show the range scan a search request translates into."""

from __future__ import annotations

import json

import click
from rich.markup import escape

from ostmap_query.cli import Context, pass_context
from ostmap_query.commands._common import (
    EXIT_TRANSLATION_ERROR,
    describe_spec,
    query_overrides,
    render_plan,
)
from ostmap_query.exceptions import TranslationError
from ostmap_query.query.parser import parse_request
from ostmap_query.query.requests import plan_request
from ostmap_query.utils.output import console, error, verbose


@click.command("plan")
@click.argument("expression", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@pass_context
@query_overrides
def cli(
    ctx: Context,
    expression: tuple[str, ...],
    output_format: str,
) -> None:
    """Translate a request and print the scan without touching the store.

    EXPRESSION is a request; multiple arguments are joined with spaces.

    \b
    Syntax:
      FIELD:TOKEN          exact term, filtered on the same term
      FIELD:TOKEN*         term prefix
      FIELD:"two words"    quoted term
      START..END           raw records in a time span (END excluded)

    \b
    Examples:
      ostmap-query plan text:flood
      ostmap-query plan 'user:nasa*'
      ostmap-query plan 1461103200000..1461189600000 --format json
    """
    text = " ".join(expression)
    try:
        request = parse_request(text)
        spec = plan_request(request, ctx.options)
    except TranslationError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_TRANSLATION_ERROR)

    verbose(escape(f"Request: {request!r}"))
    rows = describe_spec(spec)

    if output_format == "json":
        click.echo(json.dumps(rows, indent=2))
    else:
        console.print(render_plan(rows))
