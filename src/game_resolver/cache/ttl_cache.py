"""
Bounded TTL cache.

An insertion-ordered map with a per-cache time-to-live. Reads past the TTL
are misses but leave the entry in place for the periodic sweep; once the
cache is full the oldest-inserted entry is evicted.
"""

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for one cache."""

    name: str
    size: int
    max_entries: int
    ttl_seconds: float
    hits: int
    misses: int
    evictions: int
    expirations: int

    @property
    def hit_ratio(self) -> float | None:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_ratio": self.hit_ratio,
        }


@dataclass
class _Entry(Generic[V]):
    value: V
    inserted_at: float


class BoundedTTLCache(Generic[K, V]):
    """
    Size-bounded cache with lazy expiry.

    Example:
        >>> cache: BoundedTTLCache[int, int] = BoundedTTLCache("player_counts", ttl_seconds=300)
        >>> cache.set(730, 812_345)
        >>> cache.get(730)
        812345
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[K, _Entry[V]] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[call-overload]
        return entry is not None and not self._is_expired(entry, self._clock())

    def _is_expired(self, entry: _Entry[V], now: float) -> bool:
        return now - entry.inserted_at >= self.ttl_seconds

    def get(self, key: K) -> V | None:
        """Return the live value for ``key`` or None."""
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry, self._clock()):
            self._misses += 1
            return None
        self._hits += 1
        return entry.value

    def set(self, key: K, value: V) -> None:
        """Insert or replace ``key``; replacing moves it to the newest position."""
        self._entries.pop(key, None)
        self._entries[key] = _Entry(value=value, inserted_at=self._clock())
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self._evictions += 1

    def delete(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        self._expirations += len(expired)
        return len(expired)

    def stats(self) -> CacheStats:
        return CacheStats(
            name=self.name,
            size=len(self._entries),
            max_entries=self.max_entries,
            ttl_seconds=self.ttl_seconds,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            expirations=self._expirations,
        )
