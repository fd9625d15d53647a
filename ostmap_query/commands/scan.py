"""Run a search request against the configured store."""

from __future__ import annotations

import json
from itertools import islice

import click
from rich.markup import escape

from ostmap_query.cli import Context, pass_context
from ostmap_query.commands._common import (
    EXIT_NO_STORE,
    EXIT_STORE_ERROR,
    EXIT_TRANSLATION_ERROR,
    entry_to_dict,
    query_overrides,
    render_entries,
    require_config,
)
from ostmap_query.exceptions import ConfigValidationError, StoreError, TranslationError
from ostmap_query.query.parser import parse_request
from ostmap_query.query.ranges import exact_range
from ostmap_query.query.requests import RangeListRequest, ScanRequest, TermRequest, plan_request
from ostmap_query.service import QueryService
from ostmap_query.store.connector import Entry
from ostmap_query.store.sqlite_store import connect_store
from ostmap_query.utils.output import console, error, info, verbose


def _collect(service: QueryService, request: ScanRequest, limit: int | None) -> list[Entry]:
    """Read up to ``limit`` entries; the scanner is closed either way."""
    with service.open(request) as scanner:
        return list(islice(scanner, limit))


def _index_targets(entries: list[Entry]) -> RangeListRequest:
    """Exact ranges over the raw rows named by term index entries.

    Index entries carry the raw record row in their qualifier. Repeated
    rows are dropped, first occurrence wins.
    """
    rows = dict.fromkeys(entry.qualifier for entry in entries)
    return RangeListRequest(tuple(exact_range(row) for row in rows))


@click.command("scan")
@click.argument("expression", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Limit number of entries",
)
@click.option(
    "--resolve",
    is_flag=True,
    default=False,
    help="For term requests, fetch the raw records the index entries point to",
)
@pass_context
@query_overrides
def cli(
    ctx: Context,
    expression: tuple[str, ...],
    output_format: str,
    limit: int | None,
    resolve: bool,
) -> None:
    """Scan the store for a request and print the matching entries.

    EXPRESSION uses the same syntax as the plan command.

    \b
    Examples:
      ostmap-query scan text:flood
      ostmap-query scan 'text:flood*' --resolve --limit 20
      ostmap-query scan 1461103200000..1461189600000 --format json
    """
    config = require_config(ctx)

    # Translate first so bad requests fail before connecting
    text = " ".join(expression)
    try:
        request = parse_request(text)
        plan_request(request, ctx.options)
    except TranslationError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_TRANSLATION_ERROR)

    try:
        settings = config.require_store()
    except ConfigValidationError as e:
        error(str(e), hint="Fill in the [store] section, see: ostmap-query init-config")
        raise SystemExit(EXIT_NO_STORE)

    try:
        connector = connect_store(settings, config.authorizations)
    except StoreError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_STORE_ERROR)

    service = QueryService(connector, ctx.options)
    title = f"Entries for {text}"
    try:
        entries = _collect(service, request, limit)
        verbose(f"Scan returned {len(entries)} entries")
        if resolve and isinstance(request, TermRequest):
            targets = _index_targets(entries)
            verbose(f"Resolving {len(targets.ranges)} raw record rows")
            entries = _collect(service, targets, limit)
            title = f"Records for {text}"
    except StoreError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_STORE_ERROR)
    finally:
        connector.close()

    if output_format == "json":
        click.echo(json.dumps([entry_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        info("No entries found")
        return
    console.print(render_entries(entries, escape(title)))
