"""Background task that periodically runs the unread message email sweep."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PeriodicSweepScheduler(Generic[T]):
    """Run a blocking ``sweep`` callable every ``interval`` seconds.

    The sweep runs in a worker thread so the event loop keeps serving
    requests. At most one sweep is in flight: a tick that finds the previous
    sweep still running is skipped rather than queued. ``stop`` wakes the loop
    immediately and waits for a sweep already in progress to finish.
    """

    def __init__(
        self,
        sweep: Callable[[], T],
        *,
        interval: float,
        name: str = "sweep",
    ) -> None:
        self._sweep = sweep
        self._interval = max(0.1, float(interval))
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._stopping: asyncio.Event | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def sweep_in_progress(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background loop if it is not already running."""

        if self.is_running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(
            self._run(self._stopping), name=f"{self._name}-scheduler"
        )
        logger.info("Started %s scheduler (every %.0f seconds)", self._name, self._interval)

    async def stop(self) -> None:
        """Stop the background loop and wait for it to exit."""

        if self._task is None or self._stopping is None:
            return
        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Stopped %s scheduler", self._name)

    async def tick(self) -> T | None:
        """Run one sweep now unless another one is still in progress."""

        if self._running:
            logger.warning("Skipping %s tick: previous sweep still running", self._name)
            return None
        self._running = True
        try:
            return await asyncio.to_thread(self._sweep)
        finally:
            self._running = False

    async def _run(self, stopping: asyncio.Event) -> None:
        while not stopping.is_set():
            try:
                await self._wait(stopping, self._interval)
                if stopping.is_set():
                    break
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Unexpected error in %s scheduler", self._name)

    @staticmethod
    async def _wait(stopping: asyncio.Event, seconds: float) -> None:
        try:
            await asyncio.wait_for(stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


__all__ = ["PeriodicSweepScheduler"]
