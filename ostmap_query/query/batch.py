"""Package ranges into batch scan specifications."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ostmap_query.exceptions import ParseError, ValidationError
from ostmap_query.query.keys import MAX_TIMESTAMP, encode_timestamp
from ostmap_query.query.ranges import Range, span_range
from ostmap_query.query.specs import DEFAULT_PARALLELISM, BatchScanSpec

log = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")


def parse_timestamp(name: str, value: str) -> int:
    """Parse a decimal timestamp string.

    Args:
        name: Name of the input, used in the error message.
        value: Decimal digits with an optional leading sign. ``-0`` is
            accepted as zero.

    Raises:
        ParseError: If the value is not a non-negative 64-bit integer.
    """
    if not isinstance(value, str) or not _DECIMAL_RE.fullmatch(value):
        raise ParseError(name, value)
    number = int(value)
    if number < 0 or number > MAX_TIMESTAMP:
        raise ParseError(name, value)
    return number


def _check_parallelism(parallelism: int) -> None:
    if isinstance(parallelism, bool) or not isinstance(parallelism, int) or parallelism < 1:
        raise ValidationError("parallelism", parallelism, "must be a positive integer")


def build_from_time_span(
    start_time: str,
    end_time: str,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
    end_inclusive: bool = False,
) -> BatchScanSpec:
    """Build a single-range batch scan over raw records in a time span.

    Both inputs are parsed before anything else is built, so a bad
    value fails without producing a partial range.

    Args:
        start_time: Span start as a decimal string (inclusive).
        end_time: Span end as a decimal string (exclusive unless
            ``end_inclusive`` is set).
        parallelism: Maximum concurrent sub-scans.
        end_inclusive: Include records stamped exactly at ``end_time``.

    Raises:
        ParseError: If either time is not a valid timestamp.
        RangeError: If the start is after the end.
    """
    start = parse_timestamp("start time", start_time)
    end = parse_timestamp("end time", end_time)
    _check_parallelism(parallelism)

    span = span_range(encode_timestamp(start), encode_timestamp(end), end_inclusive=end_inclusive)
    log.debug("Time span %d..%d -> %r", start, end, span)
    return BatchScanSpec(ranges=(span,), parallelism=parallelism)


def build_from_ranges(
    ranges: Iterable[Range],
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> BatchScanSpec:
    """Wrap caller-supplied ranges unchanged into a batch scan."""
    _check_parallelism(parallelism)
    return BatchScanSpec(ranges=tuple(ranges), parallelism=parallelism)
