"""
Steam Player Stats API extractor.

Fetches current player counts from Steam's Player Stats API.
Requires a Steam API key.
"""

import time
from typing import Any

from game_resolver.config import get_settings
from game_resolver.ingestion.contracts import AppId, PlayerCountAPIResponse, PlayerCountResponse
from game_resolver.ingestion.extractors.base import (
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
)
from game_resolver.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig


class SteamPlayerStatsExtractor(BaseExtractor):
    """
    Extractor for Steam Player Stats API.

    Fetches current player counts for games.
    Requires a valid Steam API key.

    Example:
        >>> async with SteamPlayerStatsExtractor() as extractor:
        ...     result = await extractor.extract(app_id=1091500)
        ...     if result.success:
        ...         print(f"Current players: {result.data.player_count}")
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Steam Player Stats extractor.

        Args:
            rate_limiter: Custom rate limiter (creates default if None)
            **kwargs: Arguments passed to BaseExtractor
        """
        super().__init__(**kwargs)
        settings = get_settings()
        self._base_url = settings.steam.base_url.rstrip("/")
        self._api_key = settings.steam.api_key.get_secret_value()
        self._rate_limiter = rate_limiter or RateLimiter(
            RateLimiterConfig(
                requests_per_minute=settings.steam.requests_per_minute,
            )
        )

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_player_stats_api"

    def _build_url(self) -> str:
        """Build API URL for player stats."""
        return f"{self._base_url}/ISteamUserStats/GetNumberOfCurrentPlayers/v1/"

    async def extract(
        self,
        app_id: AppId,
    ) -> ExtractionResult[PlayerCountResponse]:
        """
        Extract current player count from Steam Player Stats API.

        Args:
            app_id: Steam application ID

        Returns:
            ExtractionResult[PlayerCountResponse]: Extraction result with metadata
        """
        url = self._build_url()
        endpoint = f"{url}?appid={app_id}"
        start_time = time.perf_counter()

        self._logger.debug("Starting player count extraction", app_id=app_id)

        try:
            await self._rate_limiter.acquire()
            response = await self._make_request(
                "GET",
                url,
                params={
                    "appid": app_id,
                    "key": self._api_key,
                },
            )
            raw_data = self._decode_json(response, endpoint)
            player_data = self._validate(PlayerCountAPIResponse, raw_data, endpoint).response
        except ExtractionError as e:
            return self._failure(e, endpoint=endpoint, start_time=start_time, app_id=app_id)

        duration_ms = (time.perf_counter() - start_time) * 1000

        if not player_data.is_successful:
            return self._failure(
                f"Steam Player Stats API returned result={player_data.result}",
                endpoint=endpoint,
                start_time=start_time,
                app_id=app_id,
            )

        self._logger.info(
            "Player count extraction successful",
            app_id=app_id,
            player_count=player_data.player_count,
            duration_ms=round(duration_ms, 2),
        )

        return ExtractionResult(
            success=True,
            data=player_data,
            source=self.source_name,
            endpoint=endpoint,
            duration_ms=duration_ms,
        )
