"""Interface between the translation layer and a sorted key-value store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from ostmap_query.query.ranges import Range
from ostmap_query.query.specs import BatchScanSpec, SubstringFilter


@dataclass(frozen=True)
class Entry:
    """A single cell returned by a scan."""

    row: bytes
    family: str
    qualifier: bytes
    value: bytes
    visibility: str = ""


class Scanner(ABC):
    """Iterator over scan results that must be closed after use.

    Use as a context manager so the underlying cursor state is
    released on every exit path::

        with connector.open_scanner(table, "text", rng) as scanner:
            for entry in scanner:
                ...
    """

    def __init__(self) -> None:
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Entry]:
        if self._closed:
            raise RuntimeError("Scanner is closed")
        return self._iter_entries()

    @abstractmethod
    def _iter_entries(self) -> Iterator[Entry]:
        """Yield the entries of the scan, in key order per range."""

    def close(self) -> None:
        """Release resources held by the scanner. Safe to call twice."""
        self._closed = True

    def __enter__(self) -> Scanner:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


class StoreConnector(Protocol):
    """Authenticated handle able to open scanners over named tables.

    Implementations raise ``ConnectivityError``, ``AuthError`` or
    ``TableNotFoundError``; callers let them propagate.
    """

    def open_scanner(
        self,
        table: str,
        field: str,
        range: Range,
        filter: SubstringFilter | None = None,
    ) -> Scanner: ...

    def open_batch_scanner(self, table: str, batch_spec: BatchScanSpec) -> Scanner: ...
