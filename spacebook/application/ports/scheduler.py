from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class ScheduledHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Stop the task. Calling it more than once is a no-op."""
        raise NotImplementedError

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        raise NotImplementedError


class Scheduler(ABC):
    @abstractmethod
    def call_repeating(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledHandle:
        """Run `callback` every `interval_seconds` (first run after one interval)."""
        raise NotImplementedError

    @abstractmethod
    def now(self) -> float:
        """Current timestamp in seconds."""
        raise NotImplementedError
