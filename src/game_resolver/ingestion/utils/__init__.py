"""
Utility modules for ingestion.

Provides rate limiting for the per-title Steam lookups.
"""

from game_resolver.ingestion.utils.rate_limiter import RateLimiter, RateLimiterConfig

__all__ = [
    "RateLimiter",
    "RateLimiterConfig",
]
