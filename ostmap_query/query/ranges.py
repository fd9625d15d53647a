"""Byte ranges over the sorted key space of the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ostmap_query.exceptions import RangeError, ValidationError

log = logging.getLogger(__name__)


def to_bytes(value: bytes | str) -> bytes:
    """Return ``value`` as bytes, UTF-8 encoding text."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _key_bound(name: str, value: object) -> bytes:
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return to_bytes(value)
    raise ValidationError(name, value, "must be bytes or text")


@dataclass(frozen=True)
class Range:
    """A range of row keys under unsigned lexicographic order.

    ``end`` of None means the range is unbounded above. The default
    bounds are inclusive start and exclusive end.
    """

    start: bytes
    end: bytes | None
    start_inclusive: bool = True
    end_inclusive: bool = False

    def __post_init__(self) -> None:
        # Text bounds are stored UTF-8 encoded
        object.__setattr__(self, "start", _key_bound("start", self.start))
        if self.end is not None:
            object.__setattr__(self, "end", _key_bound("end", self.end))
        if self.end is not None and self.start > self.end:
            log.error("Invalid range: start %s > end %s", self.start.hex(), self.end.hex())
            raise RangeError(self.start, self.end)

    @property
    def is_single_key(self) -> bool:
        """True when the range matches exactly one key."""
        return self.start == self.end and self.start_inclusive and self.end_inclusive

    def contains(self, key: bytes) -> bool:
        """Check whether ``key`` falls inside the range."""
        key = to_bytes(key)
        if key < self.start or (key == self.start and not self.start_inclusive):
            return False
        if self.end is None:
            return True
        return key < self.end or (key == self.end and self.end_inclusive)

    def __repr__(self) -> str:
        left = "[" if self.start_inclusive else "("
        right = "]" if self.end_inclusive else ")"
        end = "+inf" if self.end is None else self.end.hex()
        return f"<Range {left}{self.start.hex()}, {end}{right}>"


def increment_prefix(prefix: bytes) -> bytes | None:
    """Return the smallest key greater than every key starting with ``prefix``.

    The last byte that is not 0xFF is incremented and everything after
    it dropped. Returns None when no such key exists (empty prefix or
    all 0xFF bytes), meaning the prefix range has no upper bound.
    """
    data = bytearray(prefix)
    while data and data[-1] == 0xFF:
        data.pop()
    if not data:
        return None
    data[-1] += 1
    return bytes(data)


def exact_range(value: bytes | str) -> Range:
    """Range matching only the key ``value``."""
    key = to_bytes(value)
    return Range(key, key, start_inclusive=True, end_inclusive=True)


def prefix_range(prefix: bytes | str) -> Range:
    """Range matching every key that starts with ``prefix``."""
    start = to_bytes(prefix)
    return Range(start, increment_prefix(start))


def span_range(start_key: bytes, end_key: bytes, *, end_inclusive: bool = False) -> Range:
    """Range between two encoded keys.

    By default the end key is excluded, so a record stamped exactly at
    the end of the span is not returned. With ``end_inclusive`` every
    key that begins with ``end_key`` is included as well.

    Raises:
        RangeError: If ``start_key`` sorts after ``end_key``.
    """
    start = to_bytes(start_key)
    end = to_bytes(end_key)
    if start > end:
        log.error("Span start %s is after span end %s", start.hex(), end.hex())
        raise RangeError(start, end)
    if end_inclusive:
        return Range(start, increment_prefix(end))
    return Range(start, end)
