"""Helpers shared by the scan-related commands."""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import click
from rich.markup import escape

from ostmap_query.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_NO_STORE,
    EXIT_STORE_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSLATION_ERROR,
    Context,
)
from ostmap_query.config import Config
from ostmap_query.query.specs import RAW_DATA_TABLE, BatchScanSpec, TermScanSpec
from ostmap_query.store.connector import Entry
from ostmap_query.utils.output import create_table, error, format_key

__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_NO_STORE",
    "EXIT_STORE_ERROR",
    "EXIT_SUCCESS",
    "EXIT_TRANSLATION_ERROR",
    "describe_spec",
    "entry_to_dict",
    "query_overrides",
    "render_entries",
    "render_plan",
    "require_config",
]


def require_config(ctx: Context) -> Config:
    if ctx.config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_NO_STORE)
    return ctx.config


def query_overrides(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--parallelism`` and ``--end-inclusive/--end-exclusive`` to a command.

    Given values replace the ``[query]`` settings on ``ctx.options``
    before the command body runs. Apply it below ``pass_context`` so the
    :class:`Context` arrives as the first argument.
    """

    @click.option(
        "--parallelism",
        "-P",
        type=int,
        default=None,
        help="Override the configured batch scan parallelism",
    )
    @click.option(
        "--end-inclusive/--end-exclusive",
        default=None,
        help="Override whether a time span includes its end timestamp",
    )
    @functools.wraps(func)
    def wrapper(
        ctx: Context,
        *args: Any,
        parallelism: int | None,
        end_inclusive: bool | None,
        **kwargs: Any,
    ) -> Any:
        if parallelism is not None:
            ctx.options = replace(ctx.options, parallelism=parallelism)
        if end_inclusive is not None:
            ctx.options = replace(ctx.options, end_inclusive=end_inclusive)
        return func(ctx, *args, **kwargs)

    return wrapper


def describe_spec(spec: TermScanSpec | BatchScanSpec) -> list[dict[str, Any]]:
    """Flatten a scan specification into one dict per range."""
    if isinstance(spec, TermScanSpec):
        return [
            {
                "table": spec.table,
                "field": spec.field,
                "start": spec.range.start.hex(),
                "end": None if spec.range.end is None else spec.range.end.hex(),
                "start_inclusive": spec.range.start_inclusive,
                "end_inclusive": spec.range.end_inclusive,
                "filter": None if spec.filter is None else spec.filter.term.hex(),
                "parallelism": 1,
            }
        ]
    return [
        {
            "table": RAW_DATA_TABLE,
            "field": None,
            "start": rng.start.hex(),
            "end": None if rng.end is None else rng.end.hex(),
            "start_inclusive": rng.start_inclusive,
            "end_inclusive": rng.end_inclusive,
            "filter": None,
            "parallelism": spec.parallelism,
        }
        for rng in spec.ranges
    ]


def _hex_key(value: str | None) -> str:
    return format_key(None if value is None else bytes.fromhex(value))


def render_plan(rows: list[dict[str, Any]]):
    """Build a table showing the ranges of a scan plan."""
    table = create_table(title="Scan plan")
    table.add_column("Table", style="scan.table")
    table.add_column("Field", style="scan.field")
    table.add_column("Range", style="scan.key")
    table.add_column("Filter")
    table.add_column("Parallelism", justify="right")

    for row in rows:
        left = "[" if row["start_inclusive"] else "("
        right = "]" if row["end_inclusive"] else ")"
        rng = f"{left}{_hex_key(row['start'])}, {_hex_key(row['end'])}{right}"
        table.add_row(
            row["table"],
            row["field"] or "*",
            escape(rng),
            escape(_hex_key(row["filter"])) if row["filter"] is not None else "",
            str(row["parallelism"]),
        )
    return table


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    return {
        "row": entry.row.hex(),
        "family": entry.family,
        "qualifier": entry.qualifier.hex(),
        "visibility": entry.visibility,
        "value": entry.value.decode("utf-8", errors="replace"),
    }


def render_entries(entries: list[Entry], title: str):
    """Build a table listing scanned entries."""
    table = create_table(title=title)
    table.add_column("Row", style="scan.key")
    table.add_column("Family", style="scan.field")
    table.add_column("Qualifier")
    table.add_column("Value", overflow="fold")

    for entry in entries:
        table.add_row(
            escape(format_key(entry.row)),
            escape(entry.family),
            escape(format_key(entry.qualifier)),
            escape(entry.value.decode("utf-8", errors="replace")),
        )
    return table
