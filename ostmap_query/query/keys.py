"""Order-preserving fixed-width keys for raw-record timestamps."""

from __future__ import annotations

import struct

from ostmap_query.exceptions import EncodingError

TIMESTAMP_KEY_SIZE = 8

# Timestamps are parsed as signed 64-bit values, so only the non-negative
# half of the range is valid.
MAX_TIMESTAMP = 2**63 - 1

_TIMESTAMP_STRUCT = struct.Struct(">Q")


def encode_timestamp(value: int) -> bytes:
    """Encode a timestamp as an 8-byte big-endian key.

    Big-endian unsigned encoding keeps lexicographic byte order equal
    to numeric order, so time spans map directly onto key ranges.

    Args:
        value: Non-negative integer, at most ``MAX_TIMESTAMP``.

    Returns:
        The 8-byte key.

    Raises:
        EncodingError: If the value is not an int or is out of range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(value, "timestamp must be an integer")
    if value < 0:
        raise EncodingError(value, "timestamp must not be negative")
    if value > MAX_TIMESTAMP:
        raise EncodingError(value, f"timestamp must not exceed {MAX_TIMESTAMP}")
    return _TIMESTAMP_STRUCT.pack(value)


def decode_timestamp(key: bytes) -> int:
    """Decode an 8-byte key produced by :func:`encode_timestamp`.

    Raises:
        EncodingError: If the key is not exactly 8 bytes or decodes
            outside the timestamp range.
    """
    if len(key) != TIMESTAMP_KEY_SIZE:
        raise EncodingError(key, f"expected {TIMESTAMP_KEY_SIZE} bytes, got {len(key)}")
    (value,) = _TIMESTAMP_STRUCT.unpack(bytes(key))
    if value > MAX_TIMESTAMP:
        raise EncodingError(key, f"decoded timestamp exceeds {MAX_TIMESTAMP}")
    return value
