"""
Data extractors for Steam APIs.

This module provides the streaming app list source and the per-title
metadata extractors, all built on a common base with retry logic,
rate limiting, and structured logging.
"""

from game_resolver.ingestion.extractors.app_list import AppListExtractor
from game_resolver.ingestion.extractors.base import (
    APIError,
    BaseExtractor,
    ExtractionError,
    ExtractionResult,
    NetworkError,
    ParseError,
    RateLimitError,
)
from game_resolver.ingestion.extractors.steam_player_stats import SteamPlayerStatsExtractor
from game_resolver.ingestion.extractors.steam_reviews import SteamReviewsExtractor
from game_resolver.ingestion.extractors.steam_store import SteamStoreExtractor

__all__ = [
    # Base classes and errors
    "APIError",
    "BaseExtractor",
    "ExtractionError",
    "ExtractionResult",
    "NetworkError",
    "ParseError",
    "RateLimitError",
    # Extractors
    "AppListExtractor",
    "SteamPlayerStatsExtractor",
    "SteamReviewsExtractor",
    "SteamStoreExtractor",
]
