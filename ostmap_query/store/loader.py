"""Read store entries from JSON-lines files."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ostmap_query.exceptions import EncodingError, ValidationError
from ostmap_query.query.keys import encode_timestamp
from ostmap_query.store.connector import Entry


def _bytes_field(record: dict[str, Any], name: str, default: bytes | None = None) -> bytes:
    """Read ``name`` as text, or ``name_hex`` as hex digits."""
    hex_name = f"{name}_hex"
    if hex_name in record:
        try:
            return bytes.fromhex(record[hex_name])
        except (TypeError, ValueError) as e:
            raise ValidationError(hex_name, record[hex_name], "must be hex digits") from e
    if name in record:
        value = record[name]
        if not isinstance(value, str):
            raise ValidationError(name, value, "must be a string")
        return value.encode("utf-8")
    if default is None:
        raise ValidationError(name, None, f"'{name}' or '{hex_name}' is required")
    return default


def parse_entry(record: dict[str, Any]) -> Entry:
    """Build an Entry from one decoded JSON record.

    The row is either ``row``/``row_hex``, or an encoded ``timestamp``
    followed by the optional ``row``/``row_hex`` suffix.

    Raises:
        ValidationError: If a field is missing or malformed.
        EncodingError: If the timestamp cannot be encoded.
    """
    if not isinstance(record, dict):
        raise ValidationError("entry", record, "must be a JSON object")

    if "timestamp" in record:
        row = encode_timestamp(record["timestamp"]) + _bytes_field(record, "row", b"")
    else:
        row = _bytes_field(record, "row")

    family = record.get("family")
    if not isinstance(family, str) or not family:
        raise ValidationError("family", family, "must be a non-empty string")

    visibility = record.get("visibility", "")
    if not isinstance(visibility, str):
        raise ValidationError("visibility", visibility, "must be a string")

    return Entry(
        row=row,
        family=family,
        qualifier=_bytes_field(record, "qualifier", b""),
        value=_bytes_field(record, "value", b""),
        visibility=visibility,
    )


def read_entries(path: Path) -> Iterator[Entry]:
    """Yield entries from a JSON-lines file, skipping blank lines.

    Raises:
        ValidationError: With the line number, if a line is not a
            valid entry.
    """
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield parse_entry(json.loads(line))
            except json.JSONDecodeError as e:
                raise ValidationError(f"line {lineno}", line, f"invalid JSON: {e.msg}") from e
            except (ValidationError, EncodingError) as e:
                raise ValidationError(f"line {lineno}", line, str(e)) from e
