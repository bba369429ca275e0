"""Cancellable deferred actions on the asyncio loop.

A TimerSet owns every pending wait of one component. cancel() drops all of
them synchronously; any callback that still wakes up afterwards sees the
liveness flag cleared and does nothing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Coroutine


Sleep = Callable[[float], Awaitable[None]]

log = logging.getLogger("timers")


class TimerSet:
    def __init__(self, *, sleep: Sleep = asyncio.sleep):
        self._sleep = sleep
        self._tasks: set[asyncio.Task] = set()
        self._alive = False

    @property
    def alive(self) -> bool:
        return self._alive

    def pending_count(self) -> int:
        return len(self._tasks)

    def open(self) -> None:
        self._alive = True

    async def wait_ms(self, delay_ms: float) -> None:
        await self._sleep(max(0.0, delay_ms) / 1000.0)

    def spawn(self, coro: Coroutine) -> asyncio.Task | None:
        if not self._alive:
            coro.close()
            return None
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def later(self, delay_ms: float, action: Callable[[], object]) -> asyncio.Task | None:
        """Run action once after delay_ms, unless cancelled first."""
        return self.spawn(self._later(delay_ms, action))

    def repeat(
        self,
        next_delay_ms: Callable[[], float],
        action: Callable[[], object],
    ) -> asyncio.Task | None:
        """Run action forever, drawing a fresh delay before each run."""
        return self.spawn(self._repeat(next_delay_ms, action))

    def cancel(self) -> None:
        self._alive = False
        tasks = list(self._tasks)
        self._tasks.clear()
        for task in tasks:
            if not task.done():
                task.cancel()

    async def _later(self, delay_ms: float, action: Callable[[], object]) -> None:
        await self.wait_ms(delay_ms)
        if self._alive:
            action()

    async def _repeat(
        self,
        next_delay_ms: Callable[[], float],
        action: Callable[[], object],
    ) -> None:
        while self._alive:
            await self.wait_ms(next_delay_ms())
            if not self._alive:
                return
            action()

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Scheduled task failed", exc_info=exc)
