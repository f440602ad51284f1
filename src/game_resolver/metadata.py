"""
Cached per-title metadata lookups.

Wraps the player count, review summary and store details extractors with
one bounded TTL cache each. Only successful lookups are cached; a failed
lookup returns None and is retried on the next request.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from game_resolver.cache.resolution import CachedGameResolver
from game_resolver.cache.ttl_cache import BoundedTTLCache
from game_resolver.config import CacheConfig, get_settings
from game_resolver.ingestion.contracts import ReviewQuerySummary, SteamStoreGame
from game_resolver.ingestion.extractors import (
    SteamPlayerStatsExtractor,
    SteamReviewsExtractor,
    SteamStoreExtractor,
)
from game_resolver.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig
from game_resolver.logger import get_logger
from game_resolver.resolution.outcomes import Confident, ResolutionOutcome


@dataclass(frozen=True)
class TitleLookup:
    """A resolution plus whatever metadata could be fetched for it."""

    outcome: ResolutionOutcome
    player_count: int | None = None
    reviews: ReviewQuerySummary | None = None
    details: SteamStoreGame | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self.outcome.to_dict()
        if isinstance(self.outcome, Confident):
            result["player_count"] = self.player_count
            result["reviews"] = self.reviews.rating_text if self.reviews else None
            result["details"] = (
                {
                    "name": self.details.name,
                    "developers": self.details.developers,
                    "publishers": self.details.publishers,
                    "is_free": self.details.is_free,
                    "release_date": self.details.release_date.date,
                    "short_description": self.details.short_description,
                }
                if self.details
                else None
            )
        return result


class TitleMetadataService:
    """
    Player counts, review summaries and store details behind TTL caches.

    Example:
        >>> async with TitleMetadataService(resolver) as service:
        ...     lookup = await service.lookup("elden ring")
        ...     print(lookup.to_dict())
    """

    def __init__(
        self,
        resolver: CachedGameResolver | None = None,
        *,
        config: CacheConfig | None = None,
        client: httpx.AsyncClient | None = None,
        player_stats: SteamPlayerStatsExtractor | None = None,
        reviews: SteamReviewsExtractor | None = None,
        store: SteamStoreExtractor | None = None,
    ) -> None:
        settings = get_settings()
        cfg = config or settings.cache
        self._resolver = resolver
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.steam.timeout_seconds),
            follow_redirects=True,
            headers={"User-Agent": "GameResolver/1.0", "Accept": "application/json"},
        )

        # the three endpoints share one request budget
        limiter = RateLimiter(
            RateLimiterConfig(requests_per_minute=settings.steam.requests_per_minute)
        )
        self._player_stats = player_stats or SteamPlayerStatsExtractor(
            rate_limiter=limiter, client=self._client
        )
        self._reviews = reviews or SteamReviewsExtractor(rate_limiter=limiter, client=self._client)
        self._store = store or SteamStoreExtractor(rate_limiter=limiter, client=self._client)

        self.player_counts: BoundedTTLCache[int, int] = BoundedTTLCache(
            "player_counts", cfg.player_count_ttl_seconds, cfg.max_entries
        )
        self.review_summaries: BoundedTTLCache[int, ReviewQuerySummary] = BoundedTTLCache(
            "review_summaries", cfg.reviews_ttl_seconds, cfg.max_entries
        )
        self.title_details_cache: BoundedTTLCache[int, SteamStoreGame] = BoundedTTLCache(
            "title_details", cfg.details_ttl_seconds, cfg.max_entries
        )
        self._logger = get_logger(__name__, component="metadata")

    @property
    def caches(self) -> list[BoundedTTLCache[int, Any]]:
        return [self.player_counts, self.review_summaries, self.title_details_cache]

    async def close(self) -> None:
        """Close the shared HTTP client if this service created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "TitleMetadataService":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def player_count(self, app_id: int) -> int | None:
        """Current player count, cached for a few minutes."""
        cached = self.player_counts.get(app_id)
        if cached is not None:
            return cached

        result = await self._player_stats.extract(app_id)
        if not result.success or result.data is None:
            return None
        self.player_counts.set(app_id, result.data.player_count)
        return result.data.player_count

    async def review_summary(self, app_id: int) -> ReviewQuerySummary | None:
        """Aggregate review summary, cached for an hour."""
        cached = self.review_summaries.get(app_id)
        if cached is not None:
            return cached

        result = await self._reviews.extract_summary(app_id)
        if not result.success or result.data is None:
            return None
        self.review_summaries.set(app_id, result.data)
        return result.data

    async def title_details(self, app_id: int) -> SteamStoreGame | None:
        """Store details, cached for a day."""
        cached = self.title_details_cache.get(app_id)
        if cached is not None:
            return cached

        result = await self._store.extract(app_id)
        if not result.success or result.data is None:
            return None
        self.title_details_cache.set(app_id, result.data)
        return result.data

    async def lookup(self, query: str) -> TitleLookup:
        """
        Resolve a free-text title and, on a confident match, fetch its
        player count, review summary and store details.

        An all-digit query is first tried as a Steam app id; when no catalog
        entry has that id it is resolved as a title like any other query.
        """
        if self._resolver is None:
            raise RuntimeError("TitleMetadataService.lookup requires a resolver")

        outcome: ResolutionOutcome | None = None
        app_id_text = query.strip()
        if app_id_text.isascii() and app_id_text.isdigit():
            by_id = await self._resolver.resolver.resolve_app_id(int(app_id_text))
            if isinstance(by_id, Confident):
                outcome = by_id
        if outcome is None:
            outcome = await self._resolver.resolve(query)
        if not isinstance(outcome, Confident):
            return TitleLookup(outcome=outcome)

        app_id = outcome.entry.id
        player_count = await self.player_count(app_id)
        reviews = await self.review_summary(app_id)
        details = await self.title_details(app_id)

        self._logger.info(
            "Title lookup complete",
            query=query,
            app_id=app_id,
            player_count=player_count,
            has_reviews=reviews is not None,
            has_details=details is not None,
        )
        return TitleLookup(
            outcome=outcome,
            player_count=player_count,
            reviews=reviews,
            details=details,
        )
