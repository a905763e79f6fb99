"""
Shared test doubles: a virtual clock scheduler and an availability source whose
calls stay pending until the test resolves them.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable

import pytest

from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.ports.scheduler import ScheduledHandle, Scheduler
from spacebook.domain.entities.time_interval import TimeInterval


class VirtualHandle(ScheduledHandle):
    def __init__(self, interval: float, callback: Callable[[], None], next_at: float) -> None:
        self.interval = interval
        self.callback = callback
        self.next_at = next_at
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class VirtualScheduler(Scheduler):
    def __init__(self) -> None:
        self._now = 0.0
        self.handles: list[VirtualHandle] = []

    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledHandle:
        handle = VirtualHandle(interval_seconds, callback, self._now + interval_seconds)
        self.handles.append(handle)
        return handle

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        target = self._now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.next_at <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.next_at)
            self._now = handle.next_at
            handle.next_at += handle.interval
            handle.callback()
        self._now = target

    @property
    def active_handles(self) -> list[VirtualHandle]:
        return [h for h in self.handles if not h.cancelled]


@dataclass
class PendingCall:
    space_id: str
    date: str
    event: asyncio.Event = field(default_factory=asyncio.Event)
    result: set[TimeInterval] = field(default_factory=set)
    error: Exception | None = None


class ControlledSource(AvailabilitySource):
    def __init__(self, ignore_cancellation: bool = False) -> None:
        self.calls: list[PendingCall] = []
        self._ignore_cancellation = ignore_cancellation

    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        call = PendingCall(space_id=space_id, date=date)
        self.calls.append(call)
        try:
            await call.event.wait()
        except asyncio.CancelledError:
            if not self._ignore_cancellation:
                raise
            # Behaves like a backend call that cannot be aborted.
            await call.event.wait()
        if call.error is not None:
            raise call.error
        return set(call.result)

    def resolve(self, index: int, intervals: set[TimeInterval] | None = None) -> None:
        call = self.calls[index]
        call.result = set(intervals or set())
        call.event.set()

    def fail(self, index: int, error: Exception) -> None:
        call = self.calls[index]
        call.error = error
        call.event.set()


async def settle(rounds: int = 20) -> None:
    """Let the event loop run pending callbacks and task steps."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()
