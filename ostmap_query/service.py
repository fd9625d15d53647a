"""Scanners over the fixed ostmap tables."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ostmap_query.query.batch import build_from_ranges, build_from_time_span
from ostmap_query.query.ranges import Range
from ostmap_query.query.requests import ScanRequest, plan_request
from ostmap_query.query.specs import (
    RAW_DATA_TABLE,
    BatchScanSpec,
    QueryOptions,
    TermScanSpec,
)
from ostmap_query.query.translator import translate_term
from ostmap_query.store.connector import Scanner, StoreConnector

log = logging.getLogger(__name__)


class QueryService:
    """Open scanners for search requests through a store connector.

    The service holds no state beyond the connector and the options it
    was built with. Store errors raised by the connector are not caught.

    Args:
        connector: Authenticated store handle.
        options: Parallelism and span-boundary options.
    """

    def __init__(self, connector: StoreConnector, options: QueryOptions | None = None) -> None:
        self.connector = connector
        self.options = options if options is not None else QueryOptions()

    def open_spec(self, spec: TermScanSpec | BatchScanSpec) -> Scanner:
        """Open a scanner for an already translated scan."""
        if isinstance(spec, TermScanSpec):
            return self.connector.open_scanner(spec.table, spec.field, spec.range, spec.filter)
        return self.connector.open_batch_scanner(RAW_DATA_TABLE, spec)

    def open(self, request: ScanRequest) -> Scanner:
        """Translate ``request`` and open its scanner.

        Translation errors are raised before the connector is touched.
        """
        spec = plan_request(request, self.options)
        log.debug("Opening scanner for %r", request)
        return self.open_spec(spec)

    def term_index_scanner(self, token: str | bytes, field: str) -> Scanner:
        """Scanner over the term index for ``token`` in ``field``."""
        return self.open_spec(translate_term(token, field))

    def raw_data_scanner_by_time_span(self, start_time: str, end_time: str) -> Scanner:
        """Batch scanner over raw records between two decimal timestamps."""
        spec = build_from_time_span(
            start_time,
            end_time,
            parallelism=self.options.parallelism,
            end_inclusive=self.options.end_inclusive,
        )
        return self.open_spec(spec)

    def raw_data_batch_scanner(self, ranges: Iterable[Range]) -> Scanner:
        """Batch scanner over raw records under pre-computed ranges."""
        return self.open_spec(build_from_ranges(ranges, parallelism=self.options.parallelism))
