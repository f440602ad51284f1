"""Integration tests for Steam extractors with mocked HTTP responses."""

import json
from pathlib import Path
from typing import Any, cast

import httpx
import pytest
import respx

from game_resolver.config import RetryConfig
from game_resolver.ingestion.extractors import (
    AppListExtractor,
    NetworkError,
    ParseError,
    SteamPlayerStatsExtractor,
    SteamReviewsExtractor,
    SteamStoreExtractor,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

APP_LIST_URL = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"
STORE_URL = "https://store.steampowered.com/api/appdetails"
REVIEWS_URL = "https://store.steampowered.com/appreviews/1245620"
PLAYERS_URL = "https://api.steampowered.com/ISteamUserStats/GetNumberOfCurrentPlayers/v1/"

NO_RETRY = RetryConfig(max_attempts=1)


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


@pytest.fixture
def store_response() -> dict[str, Any]:
    return load_fixture("steam_store_response.json")


@pytest.fixture
def reviews_response() -> dict[str, Any]:
    return load_fixture("steam_reviews_response.json")


@pytest.fixture
def player_count_response() -> dict[str, Any]:
    return load_fixture("steam_player_count_response.json")


class TestAppListExtractor:
    """Integration tests for the streaming app listing."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_streams_usable_records(self) -> None:
        """Zero ids and blank names are skipped, order is preserved."""
        route = respx.get(APP_LIST_URL).mock(
            return_value=httpx.Response(200, content=(FIXTURES_DIR / "app_list.json").read_bytes())
        )

        async with AppListExtractor() as extractor:
            apps = [app async for app in extractor.stream_apps()]

        assert [app.appid for app in apps] == [10, 570, 620, 400, 271590, 2344520, 1245620]
        assert apps[5].name == "Diablo® IV"
        assert route.calls.last.request.url.params["key"] == "test_api_key_123"

    @respx.mock
    @pytest.mark.asyncio
    async def test_custom_records_path(self) -> None:
        respx.get("https://mirror.example/apps.json").mock(
            return_value=httpx.Response(200, json=[{"appid": 1001, "name": "Diablo IV"}])
        )

        async with AppListExtractor(
            url="https://mirror.example/apps.json", records_path="item"
        ) as extractor:
            apps = [app async for app in extractor.stream_apps()]

        assert [(app.appid, app.name) for app in apps] == [(1001, "Diablo IV")]

    @respx.mock
    @pytest.mark.asyncio
    async def test_truncated_document_raises_parse_error(self) -> None:
        respx.get(APP_LIST_URL).mock(
            return_value=httpx.Response(
                200,
                content=b'{"applist": {"apps": [{"appid": 10, "name": "Counter-Strike"}, {"appid": ',
            )
        )

        received = []
        async with AppListExtractor() as extractor:
            with pytest.raises(ParseError):
                async for app in extractor.stream_apps():
                    received.append(app.appid)

        assert received in ([], [10])

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_object_record_raises_parse_error(self) -> None:
        respx.get(APP_LIST_URL).mock(
            return_value=httpx.Response(200, json={"applist": {"apps": [5]}})
        )

        async with AppListExtractor() as extractor:
            with pytest.raises(ParseError, match="Expected an object"):
                _ = [app async for app in extractor.stream_apps()]

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_integer_appid_raises_parse_error(self) -> None:
        respx.get(APP_LIST_URL).mock(
            return_value=httpx.Response(
                200, json={"applist": {"apps": [{"appid": "ten", "name": "Counter-Strike"}]}}
            )
        )

        async with AppListExtractor() as extractor:
            with pytest.raises(ParseError, match="Malformed app record"):
                _ = [app async for app in extractor.stream_apps()]

    @respx.mock
    @pytest.mark.asyncio
    async def test_error_status_raises_network_error(self) -> None:
        respx.get(APP_LIST_URL).mock(return_value=httpx.Response(500))

        async with AppListExtractor() as extractor:
            with pytest.raises(NetworkError) as exc_info:
                _ = [app async for app in extractor.stream_apps()]

        assert exc_info.value.status_code == 500

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_failure_raises_network_error(self) -> None:
        respx.get(APP_LIST_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        async with AppListExtractor() as extractor:
            with pytest.raises(NetworkError, match="Stream failed"):
                _ = [app async for app in extractor.stream_apps()]


class TestSteamStoreExtractor:
    """Integration tests for Steam Store extractor."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_success(self, store_response: dict[str, Any]) -> None:
        route = respx.get(STORE_URL).mock(return_value=httpx.Response(200, json=store_response))

        async with SteamStoreExtractor() as extractor:
            result = await extractor.extract(app_id=1245620)

        assert result.success is True
        assert result.data is not None
        assert result.data.name == "ELDEN RING"
        assert result.data.developers == ["FromSoftware, Inc."]
        assert result.data.price_overview is not None
        assert result.data.price_overview.final_formatted == "$59.99"
        assert result.source == "steam_store_api"
        assert result.duration_ms is not None
        assert route.calls.last.request.url.params["appids"] == "1245620"

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_not_found(self) -> None:
        """Steam answers success=false for unknown ids."""
        respx.get(STORE_URL).mock(
            return_value=httpx.Response(200, json={"999999999": {"success": False}})
        )

        async with SteamStoreExtractor() as extractor:
            result = await extractor.extract(app_id=999999999)

        assert result.success is False
        assert result.error_message is not None
        assert "success=false" in result.error_message

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_api_error(self) -> None:
        route = respx.get(STORE_URL).mock(return_value=httpx.Response(500))

        async with SteamStoreExtractor(retry_config=NO_RETRY) as extractor:
            result = await extractor.extract(app_id=1245620)

        assert result.success is False
        assert result.error_message == "API error: 500"
        assert route.call_count == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_invalid_json(self) -> None:
        respx.get(STORE_URL).mock(return_value=httpx.Response(200, content=b"<html>"))

        async with SteamStoreExtractor() as extractor:
            result = await extractor.extract(app_id=1245620)

        assert result.success is False
        assert result.error_message is not None
        assert "not valid JSON" in result.error_message


class TestSteamReviewsExtractor:
    """Integration tests for Steam Reviews extractor."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_summary_success(self, reviews_response: dict[str, Any]) -> None:
        route = respx.get(REVIEWS_URL).mock(
            return_value=httpx.Response(200, json=reviews_response)
        )

        async with SteamReviewsExtractor() as extractor:
            result = await extractor.extract_summary(app_id=1245620)

        assert result.success is True
        assert result.data is not None
        assert result.data.total_reviews == 1000
        assert result.data.rating_text == "Very Positive (92.3% positive)"
        assert result.source == "steam_reviews_api"
        params = route.calls.last.request.url.params
        assert params["json"] == "1"
        assert params["filter"] == "all"
        assert params["language"] == "all"

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_summary_unsuccessful(self) -> None:
        respx.get(REVIEWS_URL).mock(return_value=httpx.Response(200, json={"success": 0}))

        async with SteamReviewsExtractor() as extractor:
            result = await extractor.extract_summary(app_id=1245620)

        assert result.success is False
        assert result.error_message is not None
        assert "success=0" in result.error_message

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_summary_rate_limited(self) -> None:
        respx.get(REVIEWS_URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )

        async with SteamReviewsExtractor(retry_config=NO_RETRY) as extractor:
            result = await extractor.extract_summary(app_id=1245620)

        assert result.success is False
        assert result.error_message == "Rate limit exceeded. Retry after 30s"


class TestSteamPlayerStatsExtractor:
    """Integration tests for Steam Player Stats extractor."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_success(self, player_count_response: dict[str, Any]) -> None:
        route = respx.get(PLAYERS_URL).mock(
            return_value=httpx.Response(200, json=player_count_response)
        )

        async with SteamPlayerStatsExtractor() as extractor:
            result = await extractor.extract(app_id=1245620)

        assert result.success is True
        assert result.data is not None
        assert result.data.player_count == 48213
        assert result.data.is_successful is True
        assert result.source == "steam_player_stats_api"
        assert route.calls.last.request.url.params["appid"] == "1245620"

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_unsuccessful_result(self) -> None:
        respx.get(PLAYERS_URL).mock(
            return_value=httpx.Response(200, json={"response": {"result": 42}})
        )

        async with SteamPlayerStatsExtractor() as extractor:
            result = await extractor.extract(app_id=1)

        assert result.success is False
        assert result.error_message is not None
        assert "result=42" in result.error_message

    @respx.mock
    @pytest.mark.asyncio
    async def test_extract_retries_transient_errors(
        self, player_count_response: dict[str, Any]
    ) -> None:
        route = respx.get(PLAYERS_URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=player_count_response),
            ]
        )
        retry = RetryConfig(max_attempts=2, base_delay_seconds=0.1, max_delay_seconds=1.0)

        async with SteamPlayerStatsExtractor(retry_config=retry) as extractor:
            result = await extractor.extract(app_id=1245620)

        assert result.success is True
        assert route.call_count == 2
