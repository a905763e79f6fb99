from __future__ import annotations

from dataclasses import dataclass

from spacebook.domain.entities.time_interval import TimeInterval


@dataclass(frozen=True)
class BookingRequest:
    space_id: str
    date: str  # YYYY-MM-DD, the calendar day the interval starts on
    interval: TimeInterval
