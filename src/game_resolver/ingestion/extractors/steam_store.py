"""
Steam Store API extractor.

Fetches title details (name, developers, publishers, price, release)
from Steam's Store API.
"""

import time
from typing import Any

from game_resolver.config import get_settings
from game_resolver.ingestion.contracts import AppId, SteamStoreAPIResponse, SteamStoreGame
from game_resolver.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
)
from game_resolver.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig


class SteamStoreExtractor(BaseExtractor):
    """
    Extractor for Steam Store API.

    Handles rate limiting, retries, and response validation.

    Example:
        >>> async with SteamStoreExtractor() as extractor:
        ...     result = await extractor.extract(app_id=1091500)
        ...     if result.success:
        ...         print(result.data.name)
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Steam Store extractor.

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
        return "steam_store_api"

    def _build_url(self) -> str:
        """Build API URL for app details."""
        return f"{self._store_url}/api/appdetails"

    async def extract(
        self,
        app_id: AppId,
        *,
        country_code: str = "US",
        language: str = "english",
    ) -> ExtractionResult[SteamStoreGame]:
        """
        Extract game details from Steam Store API.

        Args:
            app_id: Steam application ID
            country_code: Country for pricing (default: US)
            language: Language for descriptions (default: english)

        Returns:
            ExtractionResult[SteamStoreGame]: Extraction result with metadata
        """
        url = self._build_url()
        endpoint = f"{url}?appids={app_id}"
        start_time = time.perf_counter()

        self._logger.debug("Starting details extraction", app_id=app_id)

        try:
            await self._rate_limiter.acquire()
            response = await self._make_request(
                "GET",
                url,
                params={
                    "appids": app_id,
                    "cc": country_code,
                    "l": language,
                },
            )
            raw_data = self._decode_json(response, endpoint)

            # Steam returns {app_id: {success: bool, data: {...}}}
            app_data = raw_data.get(str(app_id), {}) if isinstance(raw_data, dict) else {}
            wrapper = self._validate(SteamStoreAPIResponse, app_data or {"success": False}, endpoint)
        except ExtractionError as e:
            return self._failure(e, endpoint=endpoint, start_time=start_time, app_id=app_id)

        if not wrapper.success or wrapper.data is None:
            return self._failure(
                f"Steam API returned success=false for app_id={app_id}",
                endpoint=endpoint,
                start_time=start_time,
                app_id=app_id,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._logger.info(
            "Details extraction successful",
            app_id=app_id,
            game_name=wrapper.data.name,
            duration_ms=round(duration_ms, 2),
        )

        return ExtractionResult(
            success=True,
            data=wrapper.data,
            source=self.source_name,
            endpoint=endpoint,
            duration_ms=duration_ms,
        )
