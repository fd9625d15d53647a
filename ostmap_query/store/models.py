"""SQLAlchemy ORM models for the reference SQLite store."""

from __future__ import annotations

from sqlalchemy import Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class StoreBase(DeclarativeBase):
    """Base class for store ORM models."""

    pass


class StoreInstance(StoreBase):
    """Singleton row naming the store instance."""

    __tablename__ = "store_instance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    name: Mapped[str] = mapped_column(String(256), nullable=False)

    def __repr__(self) -> str:
        return f"<StoreInstance(name='{self.name}')>"


class StorePrincipal(StoreBase):
    """A principal allowed to connect, with its granted authorizations."""

    __tablename__ = "store_principals"

    name: Mapped[str] = mapped_column(String(256), primary_key=True)
    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    credential_digest: Mapped[str] = mapped_column(String(128), nullable=False)
    # Comma-separated authorization labels
    authorizations: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def granted(self) -> set[str]:
        return {label for label in self.authorizations.split(",") if label}

    def __repr__(self) -> str:
        return f"<StorePrincipal(name='{self.name}', auths='{self.authorizations}')>"


class StoreTable(StoreBase):
    """A named table of the store."""

    __tablename__ = "store_tables"

    name: Mapped[str] = mapped_column(String(256), primary_key=True)

    def __repr__(self) -> str:
        return f"<StoreTable(name='{self.name}')>"


class StoreEntry(StoreBase):
    """One cell of a table.

    Rows and qualifiers are BLOBs: SQLite compares them with memcmp,
    which is the unsigned lexicographic order ranges are defined on.
    """

    __tablename__ = "store_entries"

    table_name: Mapped[str] = mapped_column(String(256), primary_key=True)
    row: Mapped[bytes] = mapped_column(LargeBinary, primary_key=True)
    family: Mapped[str] = mapped_column(String(256), primary_key=True)
    qualifier: Mapped[bytes] = mapped_column(LargeBinary, primary_key=True)
    visibility: Mapped[str] = mapped_column(String(256), primary_key=True, default="")
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    __table_args__ = (Index("ix_store_entries_family", "table_name", "family", "row"),)

    def __repr__(self) -> str:
        return f"<StoreEntry(table='{self.table_name}', row={self.row[:16].hex()}...)>"
