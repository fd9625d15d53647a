"""Store connector interface and the reference SQLite store."""

from ostmap_query.store.connector import Entry, Scanner, StoreConnector
from ostmap_query.store.sqlite_store import (
    SqliteScanner,
    SqliteStoreConnector,
    connect_store,
    grant_authorizations,
    init_store,
)

__all__ = [
    "Entry",
    "Scanner",
    "SqliteScanner",
    "SqliteStoreConnector",
    "StoreConnector",
    "connect_store",
    "grant_authorizations",
    "init_store",
]
