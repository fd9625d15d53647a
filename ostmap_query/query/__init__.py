"""Translation of search requests into store range scans."""

from ostmap_query.query.batch import build_from_ranges, build_from_time_span, parse_timestamp
from ostmap_query.query.keys import decode_timestamp, encode_timestamp
from ostmap_query.query.parser import parse_request
from ostmap_query.query.ranges import (
    Range,
    exact_range,
    increment_prefix,
    prefix_range,
    span_range,
)
from ostmap_query.query.requests import (
    RangeListRequest,
    ScanRequest,
    TermRequest,
    TimeSpanRequest,
    plan_request,
)
from ostmap_query.query.specs import (
    RAW_DATA_TABLE,
    TERM_INDEX_TABLE,
    BatchScanSpec,
    QueryOptions,
    SubstringFilter,
    TermScanSpec,
)
from ostmap_query.query.translator import translate_term

__all__ = [
    "RAW_DATA_TABLE",
    "TERM_INDEX_TABLE",
    "BatchScanSpec",
    "QueryOptions",
    "Range",
    "RangeListRequest",
    "ScanRequest",
    "SubstringFilter",
    "TermRequest",
    "TermScanSpec",
    "TimeSpanRequest",
    "build_from_ranges",
    "build_from_time_span",
    "decode_timestamp",
    "encode_timestamp",
    "exact_range",
    "increment_prefix",
    "parse_request",
    "parse_timestamp",
    "plan_request",
    "prefix_range",
    "span_range",
    "translate_term",
]
