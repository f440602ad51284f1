"""
Rate limiter for API requests.

Implements a token bucket algorithm so per-title lookups stay
within Steam's rate limits (~200 requests per 5 minutes).
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from game_resolver.logger import get_logger


@dataclass
class RateLimiterConfig:
    """Configuration for rate limiter."""

    requests_per_minute: int = 40
    burst_size: int = 10


@dataclass
class RateLimiter:
    """
    Token bucket rate limiter for API requests.

    Allows burst traffic up to burst_size, then throttles
    to requests_per_minute sustained rate.

    Example:
        >>> limiter = RateLimiter(RateLimiterConfig(requests_per_minute=40))
        >>> async with limiter:
        ...     await make_request()
    """

    config: RateLimiterConfig = field(default_factory=RateLimiterConfig)
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    _tokens: float = field(init=False)
    _last_update: float = field(init=False)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        """Initialize rate limiter state."""
        self._tokens = float(self.config.burst_size)
        self._last_update = self.clock()
        self._logger = get_logger(__name__, component="rate_limiter")

    @property
    def _refill_rate(self) -> float:
        """Tokens added per second."""
        return self.config.requests_per_minute / 60.0

    def _refill_tokens(self) -> None:
        """Refill tokens based on elapsed time."""
        now = self.clock()
        elapsed = max(0.0, now - self._last_update)
        self._tokens = min(
            self.config.burst_size,
            self._tokens + elapsed * self._refill_rate,
        )
        self._last_update = now

    async def acquire(self) -> float:
        """
        Acquire a token, waiting if necessary.

        Returns:
            Seconds spent waiting for the token
        """
        async with self._lock:
            self._refill_tokens()
            waited = 0.0

            if self._tokens < 1:
                waited = (1 - self._tokens) / self._refill_rate
                self._logger.debug(
                    "Rate limit reached, waiting",
                    wait_seconds=round(waited, 2),
                    tokens_available=round(self._tokens, 2),
                )
                await self.sleep(waited)
                self._refill_tokens()
                # an injected clock may not have advanced during the wait
                self._tokens = max(self._tokens, 1.0)

            self._tokens -= 1
            return waited

    async def __aenter__(self) -> "RateLimiter":
        """Acquire token on context entry."""
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """No-op on context exit."""

    @property
    def available_tokens(self) -> float:
        """Get current available tokens (for monitoring)."""
        self._refill_tokens()
        return self._tokens
