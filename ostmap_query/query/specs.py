"""Scan specifications produced by the translation layer."""

from __future__ import annotations

from dataclasses import dataclass

from ostmap_query.query.ranges import Range

# Fixed logical tables of the store.
RAW_DATA_TABLE = "RawTwitterData"
TERM_INDEX_TABLE = "TermIndex"

DEFAULT_PARALLELISM = 5


@dataclass(frozen=True)
class SubstringFilter:
    """Server-side predicate keeping entries that contain ``term``."""

    term: bytes


@dataclass(frozen=True)
class TermScanSpec:
    """A single-range scan restricted to one indexed field."""

    table: str
    field: str
    range: Range
    filter: SubstringFilter | None = None


@dataclass(frozen=True)
class BatchScanSpec:
    """Ranges to be scanned with up to ``parallelism`` concurrent sub-scans.

    Ranges keep the order they were given in; nothing is merged or
    deduplicated.
    """

    ranges: tuple[Range, ...] = ()
    parallelism: int = DEFAULT_PARALLELISM


@dataclass(frozen=True)
class QueryOptions:
    """Per-call translation options.

    Attributes:
        parallelism: Fan-out declared on batch scans.
        end_inclusive: Include records stamped exactly at the end of a
            time span.
    """

    parallelism: int = DEFAULT_PARALLELISM
    end_inclusive: bool = False
