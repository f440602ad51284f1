"""Tests for rate limiter."""

import asyncio

import pytest

from game_resolver.ingestion.utils.rate_limiter import (
    RateLimiter,
    RateLimiterConfig,
)


class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_limiter(clock: FakeClock, *, requests_per_minute: int, burst_size: int) -> RateLimiter:
    return RateLimiter(
        RateLimiterConfig(requests_per_minute=requests_per_minute, burst_size=burst_size),
        clock=clock,
        sleep=clock.sleep,
    )


class TestRateLimiter:
    """Tests for RateLimiter."""

    @pytest.mark.asyncio
    async def test_initial_burst(self) -> None:
        """Burst requests are allowed without waiting."""
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=60, burst_size=5)

        waits = [await limiter.acquire() for _ in range(5)]

        assert waits == [0.0] * 5
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_rate_limiting_kicks_in(self) -> None:
        """Requests past the burst wait for the sustained rate."""
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=60, burst_size=2)

        await limiter.acquire()
        await limiter.acquire()
        waited = await limiter.acquire()

        assert waited == pytest.approx(1.0)
        assert clock.sleeps == [pytest.approx(1.0)]

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=60, burst_size=1)

        async with limiter:
            assert limiter.available_tokens < 1

    @pytest.mark.asyncio
    async def test_token_refill(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=60, burst_size=2)

        await limiter.acquire()
        await limiter.acquire()
        clock.now += 1.5

        assert limiter.available_tokens == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_refill_capped_at_burst(self) -> None:
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=60, burst_size=3)

        await limiter.acquire()
        clock.now += 3600

        assert limiter.available_tokens == pytest.approx(3.0)

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_serialized(self) -> None:
        """Concurrent callers past the burst each wait their turn."""
        clock = FakeClock()
        limiter = make_limiter(clock, requests_per_minute=30, burst_size=3)

        waits = await asyncio.gather(*(limiter.acquire() for _ in range(5)))

        assert sorted(waits)[:3] == [0.0, 0.0, 0.0]
        assert sum(waits) == pytest.approx(4.0)
        assert clock.now == pytest.approx(4.0)
