from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from spacebook.application.ports.scheduler import ScheduledHandle, Scheduler


class _RepeatingHandle(ScheduledHandle):
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval_seconds
        self._callback = callback
        self._timer: asyncio.TimerHandle | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def arm(self) -> None:
        self._timer = self._loop.call_later(self._interval, self._fire)

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first so a slow callback does not drift the schedule.
        self.arm()
        self._callback()


class AsyncioScheduler(Scheduler):
    """Repeating timers on the running event loop (loop.call_later chain)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._logger = logging.getLogger(__name__)

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledHandle:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        loop = self._loop or asyncio.get_running_loop()
        handle = _RepeatingHandle(loop, interval_seconds, callback)
        handle.arm()
        self._logger.debug("Repeating task scheduled", extra={"interval_seconds": interval_seconds})
        return handle

    def now(self) -> float:
        return time.time()
