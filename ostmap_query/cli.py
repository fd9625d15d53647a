"""Command-line interface for ostmap-query."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from rich.markup import escape

from ostmap_query import __version__
from ostmap_query.config import Config, load_config
from ostmap_query.exceptions import ConfigError
from ostmap_query.query.specs import QueryOptions
from ostmap_query.utils.output import error, set_color, set_verbosity, warning

log = logging.getLogger(__name__)

# Process exit codes shared by all commands
EXIT_SUCCESS = 0
EXIT_TRANSLATION_ERROR = 1
EXIT_STORE_ERROR = 2
EXIT_NO_STORE = 3
EXIT_CONFIG_ERROR = 4


class Context:
    """State handed from the group to every command.

    Attributes:
        config: Loaded configuration.
        options: Translation options, taken from ``[query]`` and
            possibly overridden per command.
    """

    def __init__(self) -> None:
        self.config: Config | None = None
        self.options: QueryOptions = QueryOptions()
        self.quiet: bool = False


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(path_type=Path),
    help="Path to config file (default: ~/.config/ostmap-query/config.toml)",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Log translated ranges and opened scanners (implies --verbose)",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Suppress config warnings")
@click.version_option(version=__version__, prog_name="ostmap-query")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """ostmap-query: Translate searches into range scans over the ostmap store.

    Term searches run against the TermIndex table, time spans and row
    ranges against RawTwitterData.

    \b
    Examples:
      ostmap-query plan 'text:flood*'
      ostmap-query scan 1461103200000..1461189600000
    """
    app_ctx = ctx.ensure_object(Context)
    app_ctx.quiet = quiet
    set_verbosity(verbose=verbose, debug=debug)

    color = not (no_color or os.environ.get("NO_COLOR") is not None)
    if not color:
        set_color(False)

    try:
        loaded, warnings = load_config(config)
    except ConfigError as e:
        error(escape(str(e)), hint="Fix the file or recreate it with: ostmap-query init-config")
        ctx.exit(EXIT_CONFIG_ERROR)

    if color and not loaded.colored_output:
        set_color(False)
    if not quiet:
        for warn in warnings:
            warning(escape(warn))

    app_ctx.config = loaded
    app_ctx.options = loaded.query_options()
    log.debug("Query options from config: %r", app_ctx.options)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from ostmap_query.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


register_commands()
