"""
Expired-entry sweep for in-process caches.
"""

from collections.abc import Iterable
from typing import Any

from game_resolver.cache.ttl_cache import BoundedTTLCache, CacheStats
from game_resolver.logger import get_logger


class CacheSweeper:
    """
    Purges expired entries from every registered cache.

    Driven by a ``PeriodicTask``; a sweep is idempotent.
    """

    def __init__(self, caches: Iterable[BoundedTTLCache[Any, Any]] = ()) -> None:
        self._caches: dict[str, BoundedTTLCache[Any, Any]] = {}
        self._logger = get_logger(__name__, component="cache_sweeper")
        for cache in caches:
            self.register(cache)

    @property
    def caches(self) -> list[BoundedTTLCache[Any, Any]]:
        return list(self._caches.values())

    def register(self, cache: BoundedTTLCache[Any, Any]) -> None:
        """Add a cache to the sweep; names must be unique."""
        if cache.name in self._caches and self._caches[cache.name] is not cache:
            raise ValueError(f"A different cache named {cache.name!r} is already registered")
        self._caches[cache.name] = cache

    def sweep(self) -> dict[str, int]:
        """
        Purge every registered cache.

        Returns:
            Entries removed per cache name
        """
        removed = {name: cache.purge_expired() for name, cache in self._caches.items()}
        self._logger.info(
            "Cache sweep complete",
            removed=sum(removed.values()),
            **{f"{name}_removed": count for name, count in removed.items()},
        )
        return removed

    async def run(self) -> None:
        """Awaitable entry point for the scheduler."""
        self.sweep()

    def stats(self) -> list[CacheStats]:
        return [cache.stats() for cache in self._caches.values()]
