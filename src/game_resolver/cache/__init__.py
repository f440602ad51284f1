"""
In-process caches: the bounded TTL cache, its periodic sweeper and the
resolution cache in front of the fuzzy resolver.
"""

from game_resolver.cache.resolution import CachedGameResolver
from game_resolver.cache.sweeper import CacheSweeper
from game_resolver.cache.ttl_cache import BoundedTTLCache, CacheStats

__all__ = [
    "BoundedTTLCache",
    "CacheStats",
    "CacheSweeper",
    "CachedGameResolver",
]
