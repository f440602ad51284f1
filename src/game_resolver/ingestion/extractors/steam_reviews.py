"""
Steam Reviews API extractor.

Fetches the aggregate review summary for an app from Steam's Reviews API.
"""

import time
from typing import Any

from game_resolver.config import get_settings
from game_resolver.ingestion.contracts import AppId, ReviewQuerySummary, SteamReviewsResponse
from game_resolver.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
)
from game_resolver.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig


class SteamReviewsExtractor(BaseExtractor):
    """
    Extractor for Steam Reviews API.

    Only the query summary is fetched; no individual reviews are requested.

    Example:
        >>> async with SteamReviewsExtractor() as extractor:
        ...     result = await extractor.extract_summary(app_id=1091500)
        ...     if result.success:
        ...         print(result.data.rating_text)
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Steam Reviews extractor.

        Args:
            rate_limiter: Custom rate limiter (creates default if None)
            **kwargs: Arguments passed to BaseExtractor
        """
        super().__init__(**kwargs)
        settings = get_settings()
        self._store_url = settings.steam.store_url.rstrip("/")
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(
                requests_per_minute=settings.steam.requests_per_minute,
            )
        )

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_reviews_api"

    def _build_url(self, app_id: AppId) -> str:
        """Build API URL for app reviews."""
        return f"{self._store_url}/appreviews/{app_id}"

    async def extract_summary(
        self,
        app_id: AppId,
        *,
        language: str = "all",
    ) -> ExtractionResult[ReviewQuerySummary]:
        """
        Extract the review summary for an app.

        Args:
            app_id: Steam application ID
            language: Language filter ('all' or specific language)

        Returns:
            ExtractionResult[ReviewQuerySummary]: Extraction result with metadata
        """
        url = self._build_url(app_id)
        start_time = time.perf_counter()

        self._logger.debug("Starting review summary extraction", app_id=app_id)

        try:
            await self._rate_limiter.acquire()
            response = await self._make_request(
                "GET",
                url,
                params={
                    "json": 1,
                    "filter": "all",
                    "language": language,
                    "purchase_type": "all",
                    "num_per_page": 0,
                },
            )
            raw_data = self._decode_json(response, url)
            reviews_data = self._validate(SteamReviewsResponse, raw_data, url)
        except ExtractionError as e:
            return self._failure(e, endpoint=url, start_time=start_time, app_id=app_id)

        if not reviews_data.is_successful:
            return self._failure(
                f"Steam Reviews API returned success=0 for app_id={app_id}",
                endpoint=url,
                start_time=start_time,
                app_id=app_id,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        summary = reviews_data.query_summary

        self._logger.info(
            "Review summary extraction successful",
            app_id=app_id,
            total_reviews=summary.total_reviews,
            positive_ratio=summary.positive_ratio,
            duration_ms=round(duration_ms, 2),
        )

        return ExtractionResult(
            success=True,
            data=summary,
            source=self.source_name,
            endpoint=url,
            duration_ms=duration_ms,
        )
