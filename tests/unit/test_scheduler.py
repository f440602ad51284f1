"""Tests for the periodic task timer."""

import asyncio

import pytest

from game_resolver.scheduler import PeriodicTask


class TestPeriodicTask:
    """Tests for PeriodicTask."""

    @pytest.mark.asyncio
    async def test_runs_repeatedly(self) -> None:
        calls = 0

        async def action() -> None:
            nonlocal calls
            calls += 1

        task = PeriodicTask("tick", action, interval_seconds=0.01)
        task.start()
        await asyncio.sleep(0.1)
        await task.stop()

        assert calls >= 2
        assert task.running is False

    @pytest.mark.asyncio
    async def test_delayed_first_run(self) -> None:
        calls = 0

        async def action() -> None:
            nonlocal calls
            calls += 1

        task = PeriodicTask("tick", action, interval_seconds=60, run_immediately=False)
        task.start()
        await asyncio.sleep(0.05)
        await task.stop()

        assert calls == 0

    @pytest.mark.asyncio
    async def test_exceptions_do_not_stop_loop(self) -> None:
        calls = 0

        async def action() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        task = PeriodicTask("failing", action, interval_seconds=0.01)
        task.start()
        await asyncio.sleep(0.1)

        assert task.running is True
        await task.stop()
        assert calls >= 2

    @pytest.mark.asyncio
    async def test_overlapping_trigger_dropped(self) -> None:
        release = asyncio.Event()
        calls = 0

        async def action() -> None:
            nonlocal calls
            calls += 1
            await release.wait()

        task = PeriodicTask("slow", action, interval_seconds=60)
        first = asyncio.create_task(task.run_once())
        await asyncio.sleep(0)

        assert task.in_flight is True
        assert await task.run_once() is False

        release.set()
        assert await first is True
        assert calls == 1
        assert task.in_flight is False

    def test_invalid_interval(self) -> None:
        async def action() -> None:
            return None

        with pytest.raises(ValueError):
            PeriodicTask("bad", action, interval_seconds=0)
