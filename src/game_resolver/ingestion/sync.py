"""
Catalog synchronizer.

Mirrors the remote Steam app listing into the local catalog store. A run
streams the listing, upserts it in fixed-size batches, prunes entries that
vanished upstream and commits everything as one transaction; the sync
timestamp only advances after that commit.
"""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Protocol
from uuid import UUID, uuid4

from game_resolver.catalog.models import CatalogEntry
from game_resolver.catalog.store import CatalogStore, StoreError
from game_resolver.config import get_settings
from game_resolver.ingestion.contracts import RemoteApp
from game_resolver.ingestion.extractors.app_list import AppListExtractor
from game_resolver.ingestion.extractors.base import ExtractionError, ParseError
from game_resolver.logger import get_logger


class CatalogSource(Protocol):
    """Anything that can stream the remote listing once."""

    def stream_apps(self) -> AsyncIterator[RemoteApp]: ...


class SyncOutcome(str, Enum):
    """Terminal state of a sync run."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SyncReport:
    """Result of one sync run."""

    started: datetime
    finished: datetime
    outcome: SyncOutcome
    records_processed: int = 0
    records_pruned: int = 0
    error: str | None = None
    run_id: UUID = field(default_factory=uuid4)

    @property
    def duration_seconds(self) -> float:
        """Get total duration in seconds."""
        return (self.finished - self.started).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        return {
            "run_id": str(self.run_id),
            "started": self.started.isoformat(),
            "finished": self.finished.isoformat(),
            "outcome": self.outcome.value,
            "records_processed": self.records_processed,
            "records_pruned": self.records_pruned,
            "duration_seconds": round(self.duration_seconds, 3),
            "error": self.error,
        }


class CatalogSynchronizer:
    """
    Keeps the local catalog in step with the remote listing.

    Only one run may be in flight; a trigger arriving during a run is
    dropped and reported as ``skipped``. Failures roll the whole run back
    and are left for the next scheduled check.

    Example:
        >>> synchronizer = CatalogSynchronizer(store)
        >>> report = await synchronizer.sync_if_due()
    """

    def __init__(
        self,
        store: CatalogStore,
        source: CatalogSource | None = None,
        *,
        batch_size: int | None = None,
        refresh_interval: timedelta | None = None,
        prune_missing: bool | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the synchronizer.

        Args:
            store: Catalog store written by every run
            source: Remote listing (defaults to an ``AppListExtractor``)
            batch_size: Records per upsert batch
            refresh_interval: Minimum age of the last sync before a new one is due
            prune_missing: Delete entries absent from the latest listing
            clock: Wall clock in epoch seconds
        """
        settings = get_settings().catalog
        self._store = store
        self._owns_source = source is None
        self._source: CatalogSource = source or AppListExtractor()
        self._batch_size = batch_size or settings.batch_size
        self._refresh_interval = refresh_interval or settings.refresh_interval
        self._prune_missing = settings.prune_missing if prune_missing is None else prune_missing
        self._clock = clock
        self._in_flight = False
        self._logger = get_logger(__name__, component="synchronizer")

    @property
    def in_flight(self) -> bool:
        """Whether a sync run is currently executing."""
        return self._in_flight

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._clock(), tz=timezone.utc)

    async def close(self) -> None:
        """Close the default source's HTTP client."""
        if self._owns_source and isinstance(self._source, AppListExtractor):
            await self._source.close()

    async def is_due(self) -> bool:
        """
        A sync is due when none ever succeeded or the last one is older
        than the refresh interval.
        """
        metadata = await self._store.get_sync_metadata()
        if metadata is None:
            return True
        age_ms = int(self._clock() * 1000) - metadata.last_sync_timestamp
        return age_ms >= self._refresh_interval.total_seconds() * 1000

    async def sync_if_due(self) -> SyncReport | None:
        """
        Run a sync if one is due.

        Returns:
            The run's report, or None when the catalog is fresh
        """
        if self._in_flight:
            return self._skipped()

        try:
            due = await self.is_due()
        except StoreError as e:
            self._logger.error("Sync due-check failed", error=str(e))
            return None

        if not due:
            self._logger.debug("Catalog sync not due")
            return None

        return await self.sync()

    async def sync(self) -> SyncReport:
        """
        Run one full sync regardless of the refresh interval.

        Returns:
            SyncReport: Outcome and counters for the run
        """
        if self._in_flight:
            return self._skipped()

        self._in_flight = True
        started = self._now()
        run_stamp = int(self._clock() * 1000)
        counters = {"processed": 0, "pruned": 0}
        error: str | None = None

        try:
            await self._run(run_stamp, counters)
            await self._store.set_last_sync(run_stamp)
        except (ExtractionError, StoreError) as e:
            error = f"{type(e).__name__}: {e}"
        finally:
            self._in_flight = False

        report = SyncReport(
            started=started,
            finished=self._now(),
            outcome=SyncOutcome.FAILED if error else SyncOutcome.SUCCESS,
            records_processed=counters["processed"],
            records_pruned=counters["pruned"],
            error=error,
        )
        self._log_report(report)
        return report

    async def _run(self, run_stamp: int, counters: dict[str, int]) -> None:
        """Stream, upsert and prune inside a single transaction."""
        async with self._store.begin() as conn:
            batch: list[CatalogEntry] = []
            async with aclosing(self._source.stream_apps()) as apps:
                async for app in apps:
                    batch.append(CatalogEntry(id=app.appid, name=app.name, last_updated=run_stamp))
                    if len(batch) >= self._batch_size:
                        counters["processed"] += await self._store.upsert_batch(conn, batch)
                        batch = []

            if batch:
                counters["processed"] += await self._store.upsert_batch(conn, batch)

            if counters["processed"] == 0:
                raise ParseError("Remote listing contained no usable records")

            if self._prune_missing:
                counters["pruned"] = await self._store.prune_older_than(conn, run_stamp)

    def _skipped(self) -> SyncReport:
        now = self._now()
        report = SyncReport(started=now, finished=now, outcome=SyncOutcome.SKIPPED)
        self._log_report(report)
        return report

    def _log_report(self, report: SyncReport) -> None:
        log = self._logger.error if report.outcome is SyncOutcome.FAILED else self._logger.info
        log(
            "Catalog sync finished",
            run_id=str(report.run_id),
            started=report.started.isoformat(),
            finished=report.finished.isoformat(),
            records_processed=report.records_processed,
            records_pruned=report.records_pruned,
            outcome=report.outcome.value,
            duration_seconds=round(report.duration_seconds, 3),
            error=report.error,
        )
