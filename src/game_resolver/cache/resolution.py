"""
Resolution cache in front of the fuzzy resolver.

Keys are the normalized, pre-alias query so ``"Diablo IV!"`` and
``"diablo iv"`` share an entry. Only confident matches are stored;
ambiguous, not-found and invalid outcomes are recomputed every time.
"""

from game_resolver.cache.ttl_cache import BoundedTTLCache
from game_resolver.config import CacheConfig, get_settings
from game_resolver.logger import get_logger
from game_resolver.resolution.outcomes import Confident, ResolutionOutcome
from game_resolver.resolution.resolver import GameResolver


class CachedGameResolver:
    """
    ``GameResolver`` with a bounded TTL cache of confident results.

    Example:
        >>> cached = CachedGameResolver(GameResolver(store))
        >>> await cached.resolve("GTA5")
        >>> await cached.resolve("gta5")  # served from cache
    """

    def __init__(
        self,
        resolver: GameResolver,
        *,
        cache: BoundedTTLCache[str, Confident] | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        cfg = config or get_settings().cache
        self._resolver = resolver
        self._cache: BoundedTTLCache[str, Confident] = cache or BoundedTTLCache(
            "resolutions",
            ttl_seconds=cfg.resolution_ttl_seconds,
            max_entries=cfg.max_entries,
        )
        self._logger = get_logger(__name__, component="resolution_cache")

    @property
    def cache(self) -> BoundedTTLCache[str, Confident]:
        return self._cache

    @property
    def resolver(self) -> GameResolver:
        return self._resolver

    async def resolve(self, raw_query: str) -> ResolutionOutcome:
        """Serve a cached confident match or resolve and cache it."""
        query = self._resolver.normalizer.normalize(raw_query)

        cached = self._cache.get(query.literal) if query.literal else None
        if cached is not None:
            self._logger.debug("Resolution cache hit", query=query.literal, app_id=cached.entry.id)
            return cached

        outcome = await self._resolver.resolve_query(query)
        if isinstance(outcome, Confident):
            self._cache.set(query.literal, outcome)
        return outcome
