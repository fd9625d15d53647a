"""Command discovery and registration."""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from collections.abc import Iterator


def discover_commands() -> Iterator[click.Command]:
    """Yield the ``cli`` command of every public module in this package.

    Modules are visited in name order so ``--help`` lists commands
    consistently.
    """
    import ostmap_query.commands as commands_pkg

    names = sorted(
        info.name for info in pkgutil.iter_modules(commands_pkg.__path__)
        if not info.name.startswith("_")
    )
    for name in names:
        module = importlib.import_module(f"ostmap_query.commands.{name}")
        cmd = getattr(module, "cli", None)
        if isinstance(cmd, click.Command):
            yield cmd
