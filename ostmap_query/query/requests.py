"""Search request kinds and their translation into scan specifications."""

from __future__ import annotations

from dataclasses import dataclass, field

from ostmap_query.query.batch import build_from_ranges, build_from_time_span
from ostmap_query.query.ranges import Range
from ostmap_query.query.specs import BatchScanSpec, QueryOptions, TermScanSpec
from ostmap_query.query.translator import translate_term


@dataclass(frozen=True)
class TermRequest:
    """Look up ``token`` in the term index under ``field``.

    A trailing ``*`` on the token requests a prefix search.
    """

    token: str
    field: str


@dataclass(frozen=True)
class TimeSpanRequest:
    """Raw records stamped between two decimal timestamps."""

    start_time: str
    end_time: str


@dataclass(frozen=True)
class RangeListRequest:
    """Raw records under a list of pre-computed row ranges."""

    ranges: tuple[Range, ...] = field(default_factory=tuple)


ScanRequest = TermRequest | TimeSpanRequest | RangeListRequest


def plan_request(
    request: ScanRequest,
    options: QueryOptions | None = None,
) -> TermScanSpec | BatchScanSpec:
    """Translate a request into the scan the store should run.

    Args:
        request: One of the request kinds above.
        options: Parallelism and span-boundary options (defaults apply
            when None).

    Returns:
        A TermScanSpec for term requests, a BatchScanSpec otherwise.
    """
    if options is None:
        options = QueryOptions()

    if isinstance(request, TermRequest):
        return translate_term(request.token, request.field)
    if isinstance(request, TimeSpanRequest):
        return build_from_time_span(
            request.start_time,
            request.end_time,
            parallelism=options.parallelism,
            end_inclusive=options.end_inclusive,
        )
    if isinstance(request, RangeListRequest):
        return build_from_ranges(request.ranges, parallelism=options.parallelism)
    raise TypeError(f"Unsupported request type: {type(request).__name__}")
