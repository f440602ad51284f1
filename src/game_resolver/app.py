"""
Service wiring.

Builds the catalog store, synchronizer, resolver, caches and metadata
lookups from ``Settings`` and owns the two background timers.
"""

from typing import Any

from game_resolver.cache.resolution import CachedGameResolver
from game_resolver.cache.sweeper import CacheSweeper
from game_resolver.catalog.store import CatalogStore
from game_resolver.config import Settings, get_settings
from game_resolver.ingestion.sync import CatalogSource, CatalogSynchronizer, SyncReport
from game_resolver.logger import get_logger
from game_resolver.metadata import TitleLookup, TitleMetadataService
from game_resolver.resolution.outcomes import ResolutionOutcome
from game_resolver.resolution.resolver import GameResolver
from game_resolver.scheduler import PeriodicTask


class GameResolverService:
    """
    The assembled resolution engine.

    ``start()`` prepares the store and arms the sync-check and cache-sweep
    timers; ``stop()`` cancels them and releases every resource.

    Example:
        >>> async with GameResolverService() as service:
        ...     outcome = await service.resolve("elden ring")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        store: CatalogStore | None = None,
        source: CatalogSource | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._logger = get_logger(__name__, component="service")

        self.store = store or CatalogStore(self.settings.catalog.database_url)
        self.synchronizer = CatalogSynchronizer(
            self.store,
            source,
            batch_size=self.settings.catalog.batch_size,
            refresh_interval=self.settings.catalog.refresh_interval,
            prune_missing=self.settings.catalog.prune_missing,
        )
        self.resolver = CachedGameResolver(
            GameResolver(self.store, config=self.settings.resolver),
            config=self.settings.cache,
        )
        self.metadata = TitleMetadataService(self.resolver, config=self.settings.cache)
        self.sweeper = CacheSweeper([self.resolver.cache, *self.metadata.caches])

        self._sync_timer = PeriodicTask(
            "catalog_sync",
            self.synchronizer.sync_if_due,
            interval_seconds=self.settings.catalog.check_interval_seconds,
        )
        self._sweep_timer = PeriodicTask(
            "cache_sweep",
            self.sweeper.run,
            interval_seconds=self.settings.cache.sweep_interval_seconds,
            run_immediately=False,
        )
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self, *, schedule: bool = True) -> None:
        """
        Initialize the store and, unless ``schedule`` is False, start timers.

        The sync timer fires immediately, so a missing or stale catalog
        begins refreshing right away.
        """
        if self._started:
            return
        await self.store.initialize()
        if schedule:
            self._sync_timer.start()
            self._sweep_timer.start()
        self._started = True
        self._logger.info("Service started", scheduled=schedule)

    async def stop(self) -> None:
        """Cancel timers and release HTTP clients and database connections."""
        await self._sync_timer.stop()
        await self._sweep_timer.stop()
        await self.synchronizer.close()
        await self.metadata.close()
        await self.store.close()
        self._started = False
        self._logger.info("Service stopped")

    async def __aenter__(self) -> "GameResolverService":
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    async def resolve(self, query: str) -> ResolutionOutcome:
        return await self.resolver.resolve(query)

    async def lookup(self, query: str) -> TitleLookup:
        return await self.metadata.lookup(query)

    async def sync(self, *, force: bool = False) -> SyncReport | None:
        """Run a sync now; without ``force`` only if one is due."""
        if force:
            return await self.synchronizer.sync()
        return await self.synchronizer.sync_if_due()

    async def stats(self) -> dict[str, Any]:
        """Catalog size, last sync time and cache counters."""
        metadata = await self.store.get_sync_metadata()
        return {
            "catalog_entries": await self.store.count(),
            "last_sync": metadata.last_sync_at.isoformat() if metadata else None,
            "sync_in_flight": self.synchronizer.in_flight,
            "caches": [s.to_dict() for s in self.sweeper.stats()],
        }
