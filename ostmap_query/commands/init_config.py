"""Write a starter configuration file."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click
import tomli_w

from ostmap_query.cli import EXIT_CONFIG_ERROR, Context, pass_context
from ostmap_query.config import get_default_config_path
from ostmap_query.utils.output import error, info, success

STORE_KEYS = ("instance", "zookeeper", "user", "password")


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("ostmap_query").joinpath("config.example.toml").read_text()


def render_config(store: dict[str, str]) -> str:
    """Return the example config with the given ``[store]`` values filled in.

    Only ``key = value`` lines of the ``[store]`` section are replaced;
    comments and the other sections are kept as shipped.
    """
    section = None
    lines = []
    for line in _load_example_config().splitlines(keepends=True):
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            section = stripped[1:-1]
        elif section == "store" and "=" in stripped and not stripped.startswith("#"):
            key = stripped.split("=", 1)[0].strip()
            if key in store:
                line = tomli_w.dumps({key: store[key]})
        lines.append(line)
    return "".join(lines)


@click.command("init-config")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing config file")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/ostmap-query/config.toml)",
)
@click.option("--instance", default=None, help="Store instance name")
@click.option("--zookeeper", default=None, help="Store endpoint (SQLAlchemy URL for the local store)")
@click.option("--user", default=None, help="Principal name")
@click.option("--password", default=None, help="Principal credential")
@pass_context
def cli(
    ctx: Context,
    force: bool,
    output: Path | None,
    instance: str | None,
    zookeeper: str | None,
    user: str | None,
    password: str | None,
) -> None:
    """Create a configuration file from the bundled example.

    Store values given as options replace the example ones. The file
    holds the store credential, so it is created readable by the owner
    only.

    \b
    Examples:
      ostmap-query init-config
      ostmap-query init-config --output ./ostmap.toml \\
          --zookeeper sqlite:///dev.db --instance dev
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(EXIT_CONFIG_ERROR)

    given = {"instance": instance, "zookeeper": zookeeper, "user": user, "password": password}
    store = {key: value for key, value in given.items() if value is not None}

    try:
        config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        config_path.write_text(render_config(store))
        config_path.chmod(0o600)
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(EXIT_CONFIG_ERROR)

    success(f"Created config file: {config_path}")
    unset = [f"store.{key}" for key in STORE_KEYS if key not in store]
    if unset:
        info(f"Example values kept for {', '.join(unset)}; edit them before scanning.")
