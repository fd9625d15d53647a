"""Create a local reference store."""

from __future__ import annotations

import click
from rich.markup import escape

from ostmap_query.cli import Context, pass_context
from ostmap_query.commands._common import EXIT_NO_STORE, EXIT_STORE_ERROR, require_config
from ostmap_query.exceptions import StoreError
from ostmap_query.store.sqlite_store import init_store
from ostmap_query.utils.output import error, success


@click.command("store-init")
@click.option("--url", default=None, help="Store URL (default: [store] zookeeper)")
@click.option("--instance", default=None, help="Instance name (default: [store] instance)")
@click.option("--user", default=None, help="Principal name (default: [store] user)")
@click.option("--password", default=None, help="Principal credential (default: [store] password)")
@pass_context
def cli(
    ctx: Context,
    url: str | None,
    instance: str | None,
    user: str | None,
    password: str | None,
) -> None:
    """Create a SQLite store with the raw record and term index tables.

    Values not given on the command line come from the [store] section
    of the configuration. Running it again keeps existing entries.

    \b
    Examples:
      ostmap-query store-init
      ostmap-query store-init --url sqlite:///dev.db --instance dev \\
          --user root --password secret
    """
    config = require_config(ctx)
    values = {
        "store.zookeeper": url or config.zookeeper,
        "store.instance": instance or config.instance,
        "store.user": user or config.user,
        "store.password": password or config.password,
    }
    missing = [key for key, value in values.items() if not value]
    if missing:
        error(f"Missing {', '.join(missing)}", hint="Pass the option or set it in the config file")
        raise SystemExit(EXIT_NO_STORE)

    try:
        init_store(
            values["store.zookeeper"],
            values["store.instance"],
            values["store.user"],
            values["store.password"],
        )
    except StoreError as e:
        error(escape(str(e)))
        raise SystemExit(EXIT_STORE_ERROR)

    success(f"Initialised store '{values['store.instance']}' at {values['store.zookeeper']}")
