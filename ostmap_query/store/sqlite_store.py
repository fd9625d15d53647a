"""Reference store connector backed by SQLite.

Implements the scanner contract the translation layer relies on: rows
kept in unsigned byte order, scans restricted to a column family,
substring filtering evaluated inside the database and visibility labels
checked against the connector's authorizations.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor

import sqlalchemy.engine
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, sessionmaker

from ostmap_query.config import DEFAULT_AUTHORIZATIONS, StoreSettings
from ostmap_query.exceptions import AuthError, ConnectivityError, TableNotFoundError
from ostmap_query.query.ranges import Range
from ostmap_query.query.specs import (
    RAW_DATA_TABLE,
    TERM_INDEX_TABLE,
    BatchScanSpec,
    SubstringFilter,
)
from ostmap_query.store.connector import Entry, Scanner
from ostmap_query.store.models import StoreEntry, StoreInstance, StorePrincipal, StoreTable
from ostmap_query.store.session import (
    create_schema,
    get_store_engine,
    get_store_session,
    make_session_factory,
    validate_schema,
)

log = logging.getLogger(__name__)

DEFAULT_TABLES: tuple[str, ...] = (RAW_DATA_TABLE, TERM_INDEX_TABLE)


def _digest(salt: str, credential: str) -> str:
    return hashlib.sha256(f"{salt}:{credential}".encode()).hexdigest()


def _select_entries(
    session: Session,
    table: str,
    rng: Range,
    family: str | None,
    substring: SubstringFilter | None,
    authorizations: frozenset[str],
) -> list[Entry]:
    """Run one range scan and return its entries in key order."""
    stmt = select(StoreEntry).where(StoreEntry.table_name == table)

    if family is not None:
        stmt = stmt.where(StoreEntry.family == family)

    if rng.start_inclusive:
        stmt = stmt.where(StoreEntry.row >= rng.start)
    else:
        stmt = stmt.where(StoreEntry.row > rng.start)
    if rng.end is not None:
        if rng.end_inclusive:
            stmt = stmt.where(StoreEntry.row <= rng.end)
        else:
            stmt = stmt.where(StoreEntry.row < rng.end)

    if substring is not None:
        term = substring.term
        stmt = stmt.where(
            or_(
                func.instr(StoreEntry.row, term) > 0,
                func.instr(StoreEntry.qualifier, term) > 0,
                func.instr(StoreEntry.value, term) > 0,
            )
        )

    stmt = stmt.where(
        or_(StoreEntry.visibility == "", StoreEntry.visibility.in_(sorted(authorizations)))
    )
    stmt = stmt.order_by(StoreEntry.row, StoreEntry.family, StoreEntry.qualifier)

    return [
        Entry(
            row=e.row,
            family=e.family,
            qualifier=e.qualifier,
            value=e.value,
            visibility=e.visibility,
        )
        for e in session.scalars(stmt)
    ]


class SqliteScanner(Scanner):
    """Scanner running one sub-scan per range.

    With a parallelism above one, sub-scans run on a thread pool, each
    in its own session. Results are yielded range by range in the order
    the ranges were given.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        table: str,
        ranges: Sequence[Range],
        *,
        family: str | None = None,
        substring: SubstringFilter | None = None,
        authorizations: frozenset[str] = frozenset(),
        parallelism: int = 1,
    ) -> None:
        super().__init__()
        self._session_factory = session_factory
        self.table = table
        self.ranges = list(ranges)
        self.family = family
        self.substring = substring
        self.authorizations = authorizations
        self.parallelism = parallelism
        self._executor: ThreadPoolExecutor | None = None

    def _scan_range(self, rng: Range) -> list[Entry]:
        with self._session_factory() as session:
            return _select_entries(
                session, self.table, rng, self.family, self.substring, self.authorizations
            )

    def _iter_entries(self) -> Iterator[Entry]:
        if self.parallelism <= 1 or len(self.ranges) <= 1:
            for rng in self.ranges:
                yield from self._scan_range(rng)
            return

        self._executor = ThreadPoolExecutor(max_workers=self.parallelism)
        try:
            futures = [self._executor.submit(self._scan_range, rng) for rng in self.ranges]
            for future in futures:
                yield from future.result()
        finally:
            self._shutdown()

    def _shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None

    def close(self) -> None:
        self._shutdown()
        super().close()


class SqliteStoreConnector:
    """Store connector over a SQLite database created by :func:`init_store`."""

    def __init__(
        self,
        engine: sqlalchemy.engine.Engine,
        principal: str,
        authorizations: Iterable[str] = DEFAULT_AUTHORIZATIONS,
    ) -> None:
        self.engine = engine
        self.principal = principal
        self.authorizations = frozenset(authorizations)
        self._session_factory = make_session_factory(engine)

    def _require_table(self, table: str) -> None:
        with self._session_factory() as session:
            if session.get(StoreTable, table) is None:
                raise TableNotFoundError(table)

    def open_scanner(
        self,
        table: str,
        field: str,
        range: Range,
        filter: SubstringFilter | None = None,
    ) -> SqliteScanner:
        """Open a scanner over one range of ``table`` restricted to ``field``.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        self._require_table(table)
        log.debug("Opening scanner on %s family=%s %r filter=%s", table, field, range, filter)
        return SqliteScanner(
            self._session_factory,
            table,
            [range],
            family=field,
            substring=filter,
            authorizations=self.authorizations,
        )

    def open_batch_scanner(self, table: str, batch_spec: BatchScanSpec) -> SqliteScanner:
        """Open a scanner over every range of ``batch_spec``.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        self._require_table(table)
        log.debug(
            "Opening batch scanner on %s with %d ranges, parallelism %d",
            table,
            len(batch_spec.ranges),
            batch_spec.parallelism,
        )
        return SqliteScanner(
            self._session_factory,
            table,
            batch_spec.ranges,
            authorizations=self.authorizations,
            parallelism=batch_spec.parallelism,
        )

    def write_entries(self, table: str, entries: Iterable[Entry]) -> int:
        """Insert or replace entries in ``table``.

        Returns:
            Number of entries written.

        Raises:
            TableNotFoundError: If the table does not exist.
        """
        self._require_table(table)
        count = 0
        with get_store_session(self.engine) as session:
            for entry in entries:
                session.merge(
                    StoreEntry(
                        table_name=table,
                        row=entry.row,
                        family=entry.family,
                        qualifier=entry.qualifier,
                        visibility=entry.visibility,
                        value=entry.value,
                    )
                )
                count += 1
        log.debug("Wrote %d entries to %s", count, table)
        return count

    def close(self) -> None:
        self.engine.dispose()


def init_store(
    url: str,
    instance: str,
    principal: str,
    credential: str,
    tables: Iterable[str] = DEFAULT_TABLES,
) -> None:
    """Create a store with one instance, one principal and the given tables.

    Re-running against an existing store renames the instance, resets
    the principal's credential and adds missing tables.
    """
    engine = get_store_engine(url)
    try:
        create_schema(engine)
        with get_store_session(engine) as session:
            session.merge(StoreInstance(id=1, name=instance))

            salt = secrets.token_hex(16)
            existing = session.get(StorePrincipal, principal)
            auths = existing.authorizations if existing is not None else ""
            session.merge(
                StorePrincipal(
                    name=principal,
                    salt=salt,
                    credential_digest=_digest(salt, credential),
                    authorizations=auths,
                )
            )
            for table in tables:
                session.merge(StoreTable(name=table))
        log.info("Initialised store %s at %s", instance, url)
    finally:
        engine.dispose()


def grant_authorizations(session: Session, principal: StorePrincipal, labels: Iterable[str]) -> None:
    """Add ``labels`` to the principal's authorizations.

    Idempotent. The grant is stored on the principal, so it is visible
    to every later connection made by that principal.
    """
    granted = principal.granted()
    wanted = granted | set(labels)
    if wanted != granted:
        principal.authorizations = ",".join(sorted(wanted))
        session.flush()
        log.info("Granted authorizations %s to %s", ",".join(sorted(wanted)), principal.name)


def connect_store(
    settings: StoreSettings,
    authorizations: Iterable[str] = DEFAULT_AUTHORIZATIONS,
) -> SqliteStoreConnector:
    """Build a connector from store settings.

    Checks the instance name and the principal's credential, then grants
    the requested authorizations to the principal.

    Raises:
        ConnectivityError: If the store cannot be reached or is a
            different instance.
        AuthError: If the principal is unknown or the credential wrong.
    """
    labels = tuple(authorizations)
    engine = get_store_engine(settings.zookeeper)
    try:
        validate_schema(engine)
        with get_store_session(engine) as session:
            inst = session.get(StoreInstance, 1)
            if inst is None or inst.name != settings.instance:
                raise ConnectivityError(
                    settings.zookeeper, f"unknown store instance '{settings.instance}'"
                )

            principal = session.get(StorePrincipal, settings.user)
            if principal is None or not hmac.compare_digest(
                principal.credential_digest, _digest(principal.salt, settings.password)
            ):
                raise AuthError(settings.user)

            grant_authorizations(session, principal, labels)
    except Exception:
        engine.dispose()
        raise

    log.debug("Connected to %s as %s", settings.instance, settings.user)
    return SqliteStoreConnector(engine, settings.user, labels)
