"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from ostmap_query.query.keys import encode_timestamp
from ostmap_query.query.specs import RAW_DATA_TABLE, TERM_INDEX_TABLE
from ostmap_query.store.connector import Entry

if TYPE_CHECKING:
    from collections.abc import Generator

    from ostmap_query.config import StoreSettings
    from ostmap_query.store.sqlite_store import SqliteStoreConnector

INSTANCE = "ostmap-test"
USER = "root"
PASSWORD = "secret"


def raw_row(timestamp: int, suffix: bytes = b"#0") -> bytes:
    """Row key of a raw record: encoded timestamp plus a disambiguating suffix."""
    return encode_timestamp(timestamp) + suffix


RAW_ENTRIES = [
    Entry(raw_row(99), "t", b"json", b'{"text": "too early"}'),
    Entry(raw_row(100), "t", b"json", b'{"text": "flood warning issued"}'),
    Entry(raw_row(150), "t", b"json", b'{"text": "river flow rising"}'),
    Entry(raw_row(199), "t", b"json", b'{"text": "floods reach town"}'),
    Entry(raw_row(200), "t", b"json", b'{"text": "fire on the hill"}'),
    Entry(raw_row(250), "t", b"json", b'{"text": "secret"}', visibility="restricted"),
]

INDEX_ENTRIES = [
    Entry(b"fire", "text", raw_row(200), b"1"),
    Entry(b"flood", "text", raw_row(100), b"1"),
    Entry(b"floods", "text", raw_row(199), b"1"),
    Entry(b"flow", "text", raw_row(150), b"1"),
    Entry(b"flood", "user", raw_row(150), b"1"),
    Entry(b"abcd", "text", raw_row(100), b"1"),
    Entry(b"abd", "text", raw_row(150), b"1"),
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def store_url(temp_dir: Path) -> str:
    """URL of an initialised, empty reference store."""
    from ostmap_query.store.sqlite_store import init_store

    url = f"sqlite:///{temp_dir / 'store.db'}"
    init_store(url, INSTANCE, USER, PASSWORD)
    return url


@pytest.fixture
def store_settings(store_url: str) -> StoreSettings:
    from ostmap_query.config import StoreSettings

    return StoreSettings(instance=INSTANCE, zookeeper=store_url, user=USER, password=PASSWORD)


@pytest.fixture
def connector(store_settings: StoreSettings) -> Generator[SqliteStoreConnector, None, None]:
    """Connector to a store loaded with sample raw records and index entries."""
    from ostmap_query.store.sqlite_store import connect_store

    conn = connect_store(store_settings)
    conn.write_entries(RAW_DATA_TABLE, RAW_ENTRIES)
    conn.write_entries(TERM_INDEX_TABLE, INDEX_ENTRIES)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def sample_config(temp_dir: Path, store_url: str) -> Path:
    """Create a config file pointing at the sample store."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[store]
instance = "{INSTANCE}"
zookeeper = "{store_url}"
user = "{USER}"
password = "{PASSWORD}"

[query]
parallelism = 3
end_inclusive = false

[display]
colored_output = false
""")
    return config_path
