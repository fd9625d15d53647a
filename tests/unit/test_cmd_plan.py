"""Unit tests for the plan command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from ostmap_query.cli import cli
from ostmap_query.query.keys import encode_timestamp


def _invoke(config: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config), "--no-color", "plan", *args])


def _write_config(temp_dir: Path, body: str = "") -> Path:
    path = temp_dir / "config.toml"
    path.write_text(
        '[store]\ninstance = "i"\nzookeeper = "sqlite:///unused.db"\n'
        'user = "u"\npassword = "p"\n' + body
    )
    return path


class TestPlanJson:
    def test_prefix_term(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "text:abc*", "--format", "json")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert row["table"] == "TermIndex"
        assert row["field"] == "text"
        assert row["start"] == b"abc".hex()
        assert row["end"] == b"abd".hex()
        assert row["filter"] is None

    def test_exact_term(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "text:abc", "--format", "json")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert row["start"] == row["end"] == b"abc".hex()
        assert row["start_inclusive"] and row["end_inclusive"]
        assert row["filter"] == b"abc".hex()

    def test_time_span_uses_config(self, temp_dir: Path) -> None:
        config = _write_config(temp_dir, "[query]\nparallelism = 4\n")
        result = _invoke(config, "100..200", "--format", "json")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert row["table"] == "RawTwitterData"
        assert row["start"] == encode_timestamp(100).hex()
        assert row["end"] == encode_timestamp(200).hex()
        assert row["end_inclusive"] is False
        assert row["parallelism"] == 4

    def test_overrides(self, temp_dir: Path) -> None:
        result = _invoke(
            _write_config(temp_dir),
            "100..200",
            "--format",
            "json",
            "--parallelism",
            "2",
            "--end-inclusive",
        )
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert row["parallelism"] == 2
        assert row["end"] == encode_timestamp(200)[:-1].hex() + "c9"

    def test_arguments_joined(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), 'user:"jane', 'doe"', "--format", "json")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert bytes.fromhex(row["start"]) == b"jane doe"


class TestPlanTable:
    def test_table_output(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "text:flood*")
        assert result.exit_code == 0, result.output
        assert "Scan plan" in result.output
        assert "TermIndex" in result.output
        assert "flood" in result.output


class TestPlanErrors:
    def test_syntax_error(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "flood")
        assert result.exit_code == 1

    def test_reversed_span(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "200..100")
        assert result.exit_code == 1

    def test_out_of_range_timestamp(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "0..99999999999999999999")
        assert result.exit_code == 1

    def test_bad_parallelism(self, temp_dir: Path) -> None:
        result = _invoke(_write_config(temp_dir), "1..2", "--parallelism", "0")
        assert result.exit_code == 1
