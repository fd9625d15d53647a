"""Unit tests for the top-level command group."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from ostmap_query import __version__
from ostmap_query.cli import EXIT_CONFIG_ERROR, cli


def _invoke(*args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--no-color", *args])


def test_version() -> None:
    result = _invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_commands_registered() -> None:
    assert set(cli.commands) == {"init-config", "load", "plan", "scan", "store-init"}


def test_invalid_toml_exits_with_config_error(temp_dir: Path) -> None:
    path = temp_dir / "config.toml"
    path.write_text("[query\nparallelism = 5\n")
    result = _invoke("--config", str(path), "plan", "text:flood")
    assert result.exit_code == EXIT_CONFIG_ERROR


def test_invalid_value_exits_with_config_error(temp_dir: Path) -> None:
    path = temp_dir / "config.toml"
    path.write_text("[query]\nparallelism = 0\n")
    result = _invoke("--config", str(path), "plan", "text:flood")
    assert result.exit_code == EXIT_CONFIG_ERROR


def test_directory_as_config(temp_dir: Path) -> None:
    result = _invoke("--config", str(temp_dir), "plan", "text:flood")
    assert result.exit_code == EXIT_CONFIG_ERROR


def test_missing_config_still_plans(temp_dir: Path) -> None:
    result = _invoke("--config", str(temp_dir / "absent.toml"), "--quiet", "plan", "text:flood")
    assert result.exit_code == 0, result.output
    assert "No config file found" not in result.output
