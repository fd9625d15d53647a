"""Engine and session management for the reference SQLite store."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

import sqlalchemy.engine
from sqlalchemy import create_engine, text
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import ArgumentError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from ostmap_query.exceptions import ConnectivityError
from ostmap_query.store.models import StoreBase

log = logging.getLogger(__name__)

REQUIRED_TABLES = {"store_instance", "store_principals", "store_tables", "store_entries"}


def get_store_engine(url: str) -> sqlalchemy.engine.Engine:
    """Create a SQLAlchemy engine for the store at ``url``.

    Args:
        url: SQLAlchemy database URL, e.g. ``sqlite:////var/lib/ostmap.db``.

    Raises:
        ConnectivityError: If the URL is malformed or the database
            cannot be opened.
    """
    try:
        # - timeout: wait up to 30s for locks
        # - check_same_thread: False so batch sub-scans can run on workers
        engine = create_engine(
            url,
            connect_args={
                "timeout": 30,
                "check_same_thread": False,
            },
        )
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except (ArgumentError, OperationalError) as e:
        raise ConnectivityError(url, str(e)) from e
    return engine


def create_schema(engine: sqlalchemy.engine.Engine) -> None:
    """Create missing store tables."""
    StoreBase.metadata.create_all(engine)
    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()


def validate_schema(engine: sqlalchemy.engine.Engine) -> None:
    """Check that the store schema has been created.

    Raises:
        ConnectivityError: If required tables are missing.
    """
    existing = set(sa_inspect(engine).get_table_names())
    missing = REQUIRED_TABLES - existing
    if missing:
        raise ConnectivityError(
            str(engine.url),
            f"no store initialised (missing tables: {', '.join(sorted(missing))})",
        )


def make_session_factory(engine: sqlalchemy.engine.Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine)


@contextmanager
def get_store_session(engine: sqlalchemy.engine.Engine) -> Generator[Session, None, None]:
    """Open a session that commits on success and always closes.

    Yields:
        SQLAlchemy Session bound to the store engine.
    """
    session = make_session_factory(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
