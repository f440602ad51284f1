"""
Data contracts for Steam API responses.

This module provides Pydantic models that define the expected
structure of data from the Steam APIs, ensuring type safety
and validation for the catalog feed and metadata lookups.
"""

from game_resolver.ingestion.contracts.app_list import RemoteApp
from game_resolver.ingestion.contracts.steam_player_stats import (
    PlayerCountAPIResponse,
    PlayerCountResponse,
)
from game_resolver.ingestion.contracts.steam_reviews import (
    ReviewQuerySummary,
    SteamReviewsResponse,
)
from game_resolver.ingestion.contracts.steam_store import (
    AppId,
    PriceOverview,
    ReleaseDate,
    SteamStoreAPIResponse,
    SteamStoreGame,
)

__all__ = [
    "AppId",
    "PlayerCountAPIResponse",
    "PlayerCountResponse",
    "PriceOverview",
    "ReleaseDate",
    "RemoteApp",
    "ReviewQuerySummary",
    "SteamReviewsResponse",
    "SteamStoreAPIResponse",
    "SteamStoreGame",
]
