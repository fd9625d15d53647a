"""Configuration management for ostmap-query."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from ostmap_query.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from ostmap_query.query.specs import DEFAULT_PARALLELISM, QueryOptions

DEFAULT_AUTHORIZATIONS: tuple[str, ...] = ("standard",)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "ostmap-query" / "config.toml"


@dataclass(frozen=True)
class StoreSettings:
    """Values needed to connect to the store.

    Attributes:
        instance: Store instance name.
        zookeeper: Coordination-service endpoint. The reference store
            takes a SQLAlchemy database URL here.
        user: Principal name.
        password: Principal credential.
    """

    instance: str
    zookeeper: str
    user: str
    password: str


@dataclass
class Config:
    """Application configuration.

    Attributes:
        instance: Store instance name.
        zookeeper: Coordination-service endpoint of the store.
        user: Principal used to connect.
        password: Credential of the principal.
        parallelism: Concurrent sub-scans declared on batch scans.
        end_inclusive: Include records stamped exactly at the end of a
            time span.
        authorizations: Authorization labels granted and used for scans.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    instance: str | None = None
    zookeeper: str | None = None
    user: str | None = None
    password: str | None = None
    parallelism: int = DEFAULT_PARALLELISM
    end_inclusive: bool = False
    authorizations: tuple[str, ...] = DEFAULT_AUTHORIZATIONS
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if self.parallelism < 1:
            raise ConfigValidationError(
                "query.parallelism", self.parallelism, "must be a positive integer"
            )

        missing = self.missing_store_keys()
        if missing:
            warnings.append(
                f"Store settings incomplete (missing {', '.join(missing)}); "
                f"only offline commands will work"
            )

        return warnings

    def missing_store_keys(self) -> list[str]:
        values = {
            "store.instance": self.instance,
            "store.zookeeper": self.zookeeper,
            "store.user": self.user,
            "store.password": self.password,
        }
        return [key for key, value in values.items() if not value]

    def require_store(self) -> StoreSettings:
        """Return the connection settings, all of which must be present.

        Raises:
            ConfigValidationError: If any store value is missing.
        """
        missing = self.missing_store_keys()
        if missing:
            raise ConfigValidationError(missing[0], None, "required to connect to the store")
        return StoreSettings(
            instance=self.instance,
            zookeeper=self.zookeeper,
            user=self.user,
            password=self.password,
        )

    def query_options(self) -> QueryOptions:
        return QueryOptions(parallelism=self.parallelism, end_inclusive=self.end_inclusive)


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigNotFoundError: If the path exists but is not a file.
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: ostmap-query init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    if not config_path.is_file():
        raise ConfigNotFoundError(config_path)

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _optional_str(section: dict[str, Any], prefix: str, name: str) -> str | None:
    value = section[name]
    if value is not None and not isinstance(value, str):
        raise ConfigValidationError(f"{prefix}.{name}", value, "must be a string or null")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [store] section
    store = data.get("store", {})
    for name in ("instance", "zookeeper", "user", "password"):
        if name in store:
            setattr(config, name, _optional_str(store, "store", name))

    # Parse [query] section
    query = data.get("query", {})
    if "parallelism" in query:
        value = query["parallelism"]
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValidationError("query.parallelism", value, "must be an integer")
        config.parallelism = value

    if "end_inclusive" in query:
        value = query["end_inclusive"]
        if not isinstance(value, bool):
            raise ConfigValidationError("query.end_inclusive", value, "must be a boolean")
        config.end_inclusive = value

    if "authorizations" in query:
        value = query["authorizations"]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigValidationError(
                "query.authorizations", value, "must be a list of strings"
            )
        config.authorizations = tuple(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    store_data: dict[str, Any] = {}
    for name in ("instance", "zookeeper", "user", "password"):
        value = getattr(config, name)
        if value is not None:
            store_data[name] = value

    data: dict[str, Any] = {
        "query": {
            "parallelism": config.parallelism,
            "end_inclusive": config.end_inclusive,
            "authorizations": list(config.authorizations),
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }
    if store_data:
        data["store"] = store_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
    config_path.chmod(0o600)
