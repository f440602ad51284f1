"""
Fixed-delay background timers.

Each ``PeriodicTask`` runs its action, sleeps for the interval, then
repeats. The delay is measured from the end of a run, so a slow run
pushes the next one back instead of piling up behind it.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

from game_resolver.logger import get_logger


class PeriodicTask:
    """
    Self-re-arming asyncio timer guarded against overlapping runs.

    Example:
        >>> task = PeriodicTask("cache_sweep", sweeper.sweep, interval_seconds=3600)
        >>> task.start()
        >>> ...
        >>> await task.stop()
    """

    def __init__(
        self,
        name: str,
        action: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        *,
        run_immediately: bool = True,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.name = name
        self._action = action
        self._interval = interval_seconds
        self._run_immediately = run_immediately
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._in_flight = False
        self._runs = 0
        self._logger = get_logger(__name__, component="scheduler", task=name)

    @property
    def running(self) -> bool:
        """Whether the timer loop is active."""
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> bool:
        """Whether the action is executing right now."""
        return self._in_flight

    @property
    def runs(self) -> int:
        """Number of completed action runs, failed ones included."""
        return self._runs

    def start(self) -> None:
        """Start the timer loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"periodic:{self.name}")
        self._logger.info("Periodic task started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the timer loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self._logger.info("Periodic task stopped", runs=self._runs)

    async def run_once(self) -> bool:
        """
        Run the action now unless it is already running.

        Exceptions raised by the action are logged and do not propagate.

        Returns:
            False if the run was dropped because another one was in flight
        """
        if self._in_flight:
            self._logger.warning("Periodic task already running, trigger dropped")
            return False

        self._in_flight = True
        try:
            await self._action()
        except Exception:
            self._logger.exception("Periodic task failed")
        finally:
            self._in_flight = False
            self._runs += 1
        return True

    async def _loop(self) -> None:
        if not self._run_immediately:
            await self._sleep(self._interval)
        while True:
            await self.run_once()
            await self._sleep(self._interval)
