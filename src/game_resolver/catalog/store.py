"""
Catalog Store.

Async SQLite persistence for the mirrored Steam catalog. The synchronizer is
the only writer and does all of its work inside one transaction opened with
``begin()``; WAL journaling lets resolver reads keep seeing the previous
committed snapshot until that transaction commits.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import case, delete, event, func, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from game_resolver.catalog.models import (
    CatalogBase,
    CatalogEntry,
    CatalogEntryRecord,
    SyncMetadata,
    SyncMetadataRecord,
)
from game_resolver.config import get_settings
from game_resolver.logger import get_logger

LIKE_ESCAPE = "\\"


class StoreError(Exception):
    """Raised when a catalog read or write fails."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.original_error = original_error


def _configure_sqlite(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


class CatalogStore:
    """
    Persisted table of canonical ``(id, name, last_updated)`` entries plus one
    row of sync metadata.

    Example:
        >>> store = CatalogStore("sqlite+aiosqlite:///databases/steam_game.db")
        >>> await store.initialize()
        >>> async with store.begin() as conn:
        ...     await store.upsert_batch(conn, [CatalogEntry(1001, "Diablo IV", 0)])
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._database_url = database_url or get_settings().catalog.database_url
        self._engine = engine or create_async_engine(self._database_url)
        event.listen(self._engine.sync_engine, "connect", _configure_sqlite)
        self._logger = get_logger(__name__, component="catalog_store")

    @property
    def engine(self) -> AsyncEngine:
        """Underlying async engine."""
        return self._engine

    async def initialize(self) -> None:
        """Create the database file's directory and any missing tables."""
        database = make_url(self._database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(CatalogBase.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreError(
                f"Failed to initialize catalog schema: {e}",
                operation="initialize",
                original_error=e,
            ) from e

        self._logger.info("Catalog store initialized", database=database)

    async def close(self) -> None:
        """Dispose of pooled connections."""
        await self._engine.dispose()

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """
        Open a write transaction.

        Commits when the block exits cleanly and rolls back every statement
        issued inside it when the block raises.
        """
        try:
            async with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise StoreError(
                f"Catalog transaction failed: {e}",
                operation="transaction",
                original_error=e,
            ) from e

    async def upsert_batch(
        self,
        conn: AsyncConnection,
        entries: Sequence[CatalogEntry],
    ) -> int:
        """
        Insert entries, replacing existing rows with the same id.

        Returns:
            Number of entries written
        """
        if not entries:
            return 0

        stmt = sqlite_insert(CatalogEntryRecord)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CatalogEntryRecord.id],
            set_={
                "name": stmt.excluded.name,
                "last_updated": stmt.excluded.last_updated,
            },
        )
        try:
            await conn.execute(stmt, [entry.to_row() for entry in entries])
        except SQLAlchemyError as e:
            raise StoreError(
                f"Batch upsert failed: {e}",
                operation="upsert_batch",
                original_error=e,
            ) from e
        return len(entries)

    async def prune_older_than(self, conn: AsyncConnection, stamp: int) -> int:
        """
        Delete entries not written by the sync run stamped ``stamp``.

        Returns:
            Number of rows deleted
        """
        stmt = delete(CatalogEntryRecord).where(
            or_(
                CatalogEntryRecord.last_updated.is_(None),
                CatalogEntryRecord.last_updated < stamp,
            )
        )
        try:
            result = await conn.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(
                f"Prune failed: {e}",
                operation="prune",
                original_error=e,
            ) from e
        return result.rowcount or 0

    async def get_sync_metadata(self) -> SyncMetadata | None:
        """Return the last successful sync, or None if the catalog was never synced."""
        stmt = select(SyncMetadataRecord.last_sync_timestamp).where(SyncMetadataRecord.id == 1)
        row = await self._fetch_one(stmt, operation="get_sync_metadata")
        return SyncMetadata(last_sync_timestamp=row[0]) if row else None

    async def set_last_sync(self, stamp: int) -> None:
        """Record a successful sync."""
        stmt = sqlite_insert(SyncMetadataRecord).values(id=1, last_sync_timestamp=stamp)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SyncMetadataRecord.id],
            set_={"last_sync_timestamp": stmt.excluded.last_sync_timestamp},
        )
        try:
            async with self._engine.begin() as conn:
                await conn.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreError(
                f"Failed to record sync timestamp: {e}",
                operation="set_last_sync",
                original_error=e,
            ) from e

    async def find_candidates(
        self,
        patterns: Sequence[str],
        *,
        limit: int,
    ) -> list[CatalogEntry]:
        """
        Case-insensitive ``LIKE`` pre-filter.

        Rows are ranked by the first pattern they match, then by name length,
        so a loose pattern can never crowd a strict match out of ``limit``.

        Args:
            patterns: LIKE patterns escaped with ``LIKE_ESCAPE``, strictest
                first; a row matching any of them is a candidate
            limit: Maximum rows returned

        Returns:
            Candidate entries
        """
        if not patterns:
            return []

        matches = [
            CatalogEntryRecord.name.ilike(pattern, escape=LIKE_ESCAPE) for pattern in patterns
        ]
        tier = case(
            *((match, rank) for rank, match in enumerate(matches)),
            else_=len(matches),
        )

        stmt = (
            select(
                CatalogEntryRecord.id,
                CatalogEntryRecord.name,
                CatalogEntryRecord.last_updated,
            )
            .where(or_(*matches))
            .order_by(tier, func.length(CatalogEntryRecord.name), CatalogEntryRecord.id)
            .limit(limit)
        )
        rows = await self._fetch_all(stmt, operation="find_candidates")
        return [CatalogEntry(id=row[0], name=row[1], last_updated=row[2]) for row in rows]

    async def get_entry(self, entry_id: int) -> CatalogEntry | None:
        """Look up one entry by id."""
        stmt = select(
            CatalogEntryRecord.id,
            CatalogEntryRecord.name,
            CatalogEntryRecord.last_updated,
        ).where(CatalogEntryRecord.id == entry_id)
        row = await self._fetch_one(stmt, operation="get_entry")
        return CatalogEntry(id=row[0], name=row[1], last_updated=row[2]) if row else None

    async def count(self) -> int:
        """Number of entries in the catalog."""
        stmt = select(func.count()).select_from(CatalogEntryRecord)
        row = await self._fetch_one(stmt, operation="count")
        return int(row[0]) if row else 0

    async def snapshot(self) -> list[CatalogEntry]:
        """Every entry ordered by id."""
        stmt = select(
            CatalogEntryRecord.id,
            CatalogEntryRecord.name,
            CatalogEntryRecord.last_updated,
        ).order_by(CatalogEntryRecord.id)
        rows = await self._fetch_all(stmt, operation="snapshot")
        return [CatalogEntry(id=row[0], name=row[1], last_updated=row[2]) for row in rows]

    async def _fetch_one(self, stmt: Any, *, operation: str) -> Any:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                return result.first()
        except SQLAlchemyError as e:
            raise StoreError(
                f"Catalog read failed: {e}",
                operation=operation,
                original_error=e,
            ) from e

    async def _fetch_all(self, stmt: Any, *, operation: str) -> list[Any]:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                return list(result.all())
        except SQLAlchemyError as e:
            raise StoreError(
                f"Catalog read failed: {e}",
                operation=operation,
                original_error=e,
            ) from e


def escape_like(text: str) -> str:
    """Escape LIKE metacharacters in user-supplied text."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
