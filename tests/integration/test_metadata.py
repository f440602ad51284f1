"""Integration tests for cached title metadata lookups."""

import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, cast

import httpx
import pytest
import respx

from game_resolver.cache.resolution import CachedGameResolver
from game_resolver.catalog.store import CatalogStore
from game_resolver.config import CacheConfig, ResolverConfig
from game_resolver.metadata import TitleMetadataService
from game_resolver.resolution.resolver import GameResolver

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

STORE_URL = "https://store.steampowered.com/api/appdetails"
REVIEWS_URL_PATTERN = r"https://store\.steampowered\.com/appreviews/\d+"
PLAYERS_URL = "https://api.steampowered.com/ISteamUserStats/GetNumberOfCurrentPlayers/v1/"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file."""
    with (FIXTURES_DIR / name).open(encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


@pytest.fixture
def metadata(store: CatalogStore) -> TitleMetadataService:
    resolver = CachedGameResolver(GameResolver(store, config=ResolverConfig()))
    return TitleMetadataService(resolver, config=CacheConfig())


@pytest.fixture
def steam_routes(respx_mock: respx.MockRouter) -> dict[str, respx.Route]:
    return {
        "players": respx_mock.get(PLAYERS_URL).mock(
            return_value=httpx.Response(
                200, json=load_fixture("steam_player_count_response.json")
            )
        ),
        "reviews": respx_mock.get(url__regex=REVIEWS_URL_PATTERN).mock(
            return_value=httpx.Response(200, json=load_fixture("steam_reviews_response.json"))
        ),
        "details": respx_mock.get(STORE_URL).mock(
            return_value=httpx.Response(200, json=load_fixture("steam_store_response.json"))
        ),
    }


class TestTitleMetadataService:
    """Tests for TitleMetadataService."""

    @pytest.mark.asyncio
    async def test_lookup_confident_title(
        self,
        metadata: TitleMetadataService,
        steam_routes: dict[str, respx.Route],
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1245620: "ELDEN RING", 570: "Dota 2"})

        async with metadata:
            lookup = await metadata.lookup("Elden Ring")

        result = lookup.to_dict()
        assert result["status"] == "confident"
        assert result["id"] == 1245620
        assert result["player_count"] == 48213
        assert result["reviews"] == "Very Positive (92.3% positive)"
        assert result["details"]["developers"] == ["FromSoftware, Inc."]
        assert result["details"]["release_date"] == "24 Feb, 2022"

    @pytest.mark.asyncio
    async def test_repeat_lookup_served_from_caches(
        self,
        metadata: TitleMetadataService,
        steam_routes: dict[str, respx.Route],
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1245620: "ELDEN RING"})

        async with metadata:
            first = await metadata.lookup("elden ring")
            second = await metadata.lookup("ELDEN RING!")

        assert second.to_dict() == first.to_dict()
        assert all(route.call_count == 1 for route in steam_routes.values())
        assert [cache.stats().hits for cache in metadata.caches] == [1, 1, 1]

    @pytest.mark.asyncio
    async def test_numeric_query_looked_up_as_app_id(
        self,
        metadata: TitleMetadataService,
        steam_routes: dict[str, respx.Route],
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({1245620: "ELDEN RING"})

        async with metadata:
            lookup = await metadata.lookup(" 1245620 ")

        assert lookup.to_dict()["name"] == "ELDEN RING"
        assert lookup.player_count == 48213

    @pytest.mark.asyncio
    async def test_unknown_numeric_query_resolved_as_title(
        self,
        metadata: TitleMetadataService,
        steam_routes: dict[str, respx.Route],
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({111: "2048"})

        async with metadata:
            lookup = await metadata.lookup("2048")

        assert lookup.to_dict()["id"] == 111
        assert steam_routes["players"].calls.last.request.url.params["appid"] == "111"

    @pytest.mark.respx(assert_all_called=False)
    @pytest.mark.asyncio
    async def test_ambiguous_lookup_fetches_nothing(
        self,
        metadata: TitleMetadataService,
        steam_routes: dict[str, respx.Route],
        seed: Callable[[dict[int, str]], Awaitable[None]],
    ) -> None:
        await seed({224960: "Tomb Raider I", 224961: "Tomb Raider II"})

        async with metadata:
            lookup = await metadata.lookup("tomb raider")

        assert lookup.to_dict()["status"] == "ambiguous"
        assert "player_count" not in lookup.to_dict()
        assert all(not route.called for route in steam_routes.values())

    @pytest.mark.asyncio
    async def test_failed_metadata_not_cached(
        self,
        metadata: TitleMetadataService,
        respx_mock: respx.MockRouter,
    ) -> None:
        route = respx_mock.get(PLAYERS_URL).mock(
            side_effect=[
                httpx.Response(200, json={"response": {"result": 42}}),
                httpx.Response(200, json={"response": {"player_count": 7, "result": 1}}),
            ]
        )

        async with metadata:
            first = await metadata.player_count(1245620)
            second = await metadata.player_count(1245620)

        assert first is None
        assert second == 7
        assert route.call_count == 2
        assert len(metadata.player_counts) == 1

    @pytest.mark.asyncio
    async def test_lookup_without_resolver(self) -> None:
        async with TitleMetadataService(config=CacheConfig()) as service:
            with pytest.raises(RuntimeError):
                await service.lookup("elden ring")
