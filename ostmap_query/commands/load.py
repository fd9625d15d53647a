"""Load entries into the reference store."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from ostmap_query.cli import Context, pass_context
from ostmap_query.commands._common import (
    EXIT_NO_STORE,
    EXIT_STORE_ERROR,
    EXIT_TRANSLATION_ERROR,
    require_config,
)
from ostmap_query.exceptions import ConfigValidationError, StoreError, TranslationError
from ostmap_query.query.specs import RAW_DATA_TABLE, TERM_INDEX_TABLE
from ostmap_query.store.loader import read_entries
from ostmap_query.store.sqlite_store import connect_store
from ostmap_query.utils.output import error, success


@click.command("load")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--table",
    "-t",
    type=click.Choice([RAW_DATA_TABLE, TERM_INDEX_TABLE]),
    default=RAW_DATA_TABLE,
    show_default=True,
    help="Table to load into",
)
@pass_context
def cli(ctx: Context, path: Path, table: str) -> None:
    """Import entries from a JSON-lines file.

    Each line is an object with "family" and either "row"/"row_hex" or
    a "timestamp" (encoded as the row key, followed by any "row"
    suffix). "qualifier", "value" and "visibility" are optional; the
    first two also accept a "_hex" variant.

    \b
    Examples:
      ostmap-query load tweets.jsonl
      ostmap-query load index.jsonl --table TermIndex
    """
    config = require_config(ctx)
    try:
        settings = config.require_store()
    except ConfigValidationError as e:
        error(str(e), hint="Fill in the [store] section, see: ostmap-query init-config")
        raise SystemExit(EXIT_NO_STORE)

    try:
        entries = list(read_entries(path))
    except TranslationError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_TRANSLATION_ERROR)

    try:
        connector = connect_store(settings, config.authorizations)
        try:
            count = connector.write_entries(table, entries)
        finally:
            connector.close()
    except StoreError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_STORE_ERROR)

    success(f"Loaded {count} entries into {table}")
