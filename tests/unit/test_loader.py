"""Unit tests for JSON-lines entry loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ostmap_query.exceptions import ValidationError
from ostmap_query.query.keys import encode_timestamp
from ostmap_query.store.connector import Entry
from ostmap_query.store.loader import parse_entry, read_entries


class TestParseEntry:
    def test_text_fields(self) -> None:
        entry = parse_entry({"row": "flood", "family": "text", "qualifier": "q", "value": "v"})
        assert entry == Entry(b"flood", "text", b"q", b"v")

    def test_hex_fields(self) -> None:
        entry = parse_entry({"row_hex": "00ff", "family": "t", "qualifier_hex": "0a"})
        assert entry.row == b"\x00\xff"
        assert entry.qualifier == b"\n"
        assert entry.value == b""

    def test_timestamp_row(self) -> None:
        entry = parse_entry({"timestamp": 100, "row": "#1", "family": "t"})
        assert entry.row == encode_timestamp(100) + b"#1"

    def test_visibility(self) -> None:
        entry = parse_entry({"row": "a", "family": "t", "visibility": "restricted"})
        assert entry.visibility == "restricted"

    @pytest.mark.parametrize(
        "record",
        [
            {"family": "t"},
            {"row": "a"},
            {"row": "a", "family": ""},
            {"row": 5, "family": "t"},
            {"row_hex": "zz", "family": "t"},
            {"row": "a", "family": "t", "visibility": 1},
            ["row", "family"],
        ],
    )
    def test_invalid(self, record: object) -> None:
        with pytest.raises(ValidationError):
            parse_entry(record)  # type: ignore[arg-type]


class TestReadEntries:
    def test_reads_lines(self, temp_dir: Path) -> None:
        path = temp_dir / "entries.jsonl"
        lines = [
            json.dumps({"timestamp": 1, "family": "t", "value": "one"}),
            "",
            json.dumps({"timestamp": 2, "family": "t", "value": "two"}),
        ]
        path.write_text("\n".join(lines) + "\n")
        entries = list(read_entries(path))
        assert [e.value for e in entries] == [b"one", b"two"]

    def test_bad_json_reports_line(self, temp_dir: Path) -> None:
        path = temp_dir / "entries.jsonl"
        path.write_text('{"row": "a", "family": "t"}\n{not json\n')
        with pytest.raises(ValidationError) as exc_info:
            list(read_entries(path))
        assert exc_info.value.field == "line 2"

    def test_negative_timestamp_reports_line(self, temp_dir: Path) -> None:
        path = temp_dir / "entries.jsonl"
        path.write_text('{"timestamp": -1, "family": "t"}\n')
        with pytest.raises(ValidationError) as exc_info:
            list(read_entries(path))
        assert exc_info.value.field == "line 1"
