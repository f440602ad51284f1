"""
Steam App List Extractor.

Streams the complete Steam app listing (ISteamApps/GetAppList/v2). The
document holds several hundred thousand records, so the body is parsed
incrementally with ijson as bytes arrive instead of being buffered.
"""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import ijson
from pydantic import ValidationError as PydanticValidationError

from game_resolver.config import get_settings
from game_resolver.ingestion.contracts import RemoteApp
from game_resolver.ingestion.extractors.base import BaseExtractor, ParseError


class AppListExtractor(BaseExtractor):
    """
    Lazy, finite, non-restartable source of ``RemoteApp`` records.

    Records with a zero ``appid`` or a blank ``name`` are skipped. A record
    that is not an object or whose ``appid`` is not an integer aborts the
    stream with ``ParseError``, as does malformed JSON.

    Example:
        >>> async with AppListExtractor() as extractor:
        ...     async for app in extractor.stream_apps():
        ...         print(app.appid, app.name)
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        records_path: str | None = None,
        stream_timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the app list extractor.

        Args:
            url: Listing endpoint (defaults to STEAM_APP_LIST_URL)
            records_path: ijson prefix of the record array items
            stream_timeout: Read timeout while the body is streaming
            **kwargs: Arguments passed to BaseExtractor
        """
        super().__init__(**kwargs)
        settings = get_settings()
        self._url = url or settings.steam.app_list_url
        self._records_path = records_path or settings.catalog.records_path
        self._stream_timeout = stream_timeout or settings.catalog.stream_timeout_seconds
        self._api_key = settings.steam.api_key.get_secret_value()

    @property
    def source_name(self) -> str:
        """Return source identifier."""
        return "steam_app_list_api"

    def _parse_record(self, raw: Any) -> RemoteApp | None:
        """Validate one streamed record; None means skip it."""
        if not isinstance(raw, dict):
            raise ParseError(
                f"Expected an object in the app listing, got {type(raw).__name__}",
                source=self.source_name,
                endpoint=self._url,
            )

        if not raw.get("appid"):
            return None

        try:
            app = RemoteApp.model_validate(raw)
        except PydanticValidationError as e:
            raise ParseError(
                f"Malformed app record: {e}",
                source=self.source_name,
                endpoint=self._url,
            ) from e

        return app if app.is_usable else None

    async def stream_apps(self) -> AsyncIterator[RemoteApp]:
        """
        Yield usable records in document order.

        Raises:
            NetworkError: If the request fails or the connection drops mid-stream
            ParseError: If the document or a record is malformed
        """
        timeout = httpx.Timeout(self._timeout, read=self._stream_timeout)
        params = {"key": self._api_key} if self._api_key else None
        yielded = 0
        skipped = 0

        self._logger.info("Streaming app listing", url=self._url)

        async with self._stream_request("GET", self._url, params=params, timeout=timeout) as response:
            events = ijson.sendable_list()
            parser = ijson.items_coro(events, self._records_path)
            try:
                async for chunk in response.aiter_bytes():
                    parser.send(chunk)
                    for raw in events:
                        app = self._parse_record(raw)
                        if app is None:
                            skipped += 1
                            continue
                        yielded += 1
                        yield app
                    del events[:]
                parser.close()
            except ijson.JSONError as e:
                raise ParseError(
                    f"Malformed app listing: {e}",
                    source=self.source_name,
                    endpoint=self._url,
                    original_error=e,
                ) from e

            # Items completed by the final close()
            for raw in events:
                app = self._parse_record(raw)
                if app is None:
                    skipped += 1
                    continue
                yielded += 1
                yield app

        self._logger.info(
            "App listing streamed",
            records=yielded,
            skipped=skipped,
        )
