"""
Catalog data model.

Domain values handed to callers (``CatalogEntry``, ``SyncMetadata``) and the
SQLAlchemy tables that persist them.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class CatalogBase(DeclarativeBase):
    """Declarative base for catalog tables."""


class CatalogEntryRecord(CatalogBase):
    """Persisted catalog row, one per Steam app id."""

    __tablename__ = "catalog_entries"
    __table_args__ = (Index("ix_catalog_entries_name", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    last_updated: Mapped[int | None] = mapped_column(Integer)


class SyncMetadataRecord(CatalogBase):
    """Single-row table holding the last successful sync stamp."""

    __tablename__ = "sync_metadata"
    __table_args__ = (CheckConstraint("id = 1", name="ck_sync_metadata_singleton"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    last_sync_timestamp: Mapped[int] = mapped_column(Integer, nullable=False)


def to_epoch_ms(moment: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return int(moment.timestamp() * 1000)


def from_epoch_ms(stamp: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(stamp / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class CatalogEntry:
    """A canonical game in the local catalog."""

    id: int
    name: str
    last_updated: int | None = None

    @property
    def last_updated_at(self) -> datetime | None:
        """Sync stamp as a datetime."""
        return from_epoch_ms(self.last_updated) if self.last_updated is not None else None

    def to_row(self) -> dict:
        """Convert to a parameter dict for bulk statements."""
        return {
            "id": self.id,
            "name": self.name,
            "last_updated": self.last_updated,
        }

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict."""
        return {
            "id": self.id,
            "name": self.name,
            "last_updated": self.last_updated_at.isoformat() if self.last_updated_at else None,
        }


@dataclass(frozen=True)
class SyncMetadata:
    """Bookkeeping for the most recent successful sync."""

    last_sync_timestamp: int

    @property
    def last_sync_at(self) -> datetime:
        """Last sync as a datetime."""
        return from_epoch_ms(self.last_sync_timestamp)
