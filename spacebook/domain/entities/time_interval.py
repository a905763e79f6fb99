from __future__ import annotations

from dataclasses import dataclass

from spacebook.application.exceptions import InvalidRequest

MINUTES_PER_DAY = 1440
MAX_END_MINUTES = 2 * MINUTES_PER_DAY


def format_minutes(minutes: int) -> str:
    """Render minutes-from-midnight as HH:MM, wrapping values past midnight."""
    hours, mins = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hours:02d}:{mins:02d}"


def format_closing_minutes(minutes: int) -> str:
    """Like format_minutes, but an end of exactly midnight reads "24:00"."""
    if minutes == MINUTES_PER_DAY:
        return "24:00"
    return format_minutes(minutes)


@dataclass(frozen=True, order=True)
class TimeInterval:
    """
    Half-open interval [start_minutes, end_minutes) measured from midnight.

    end_minutes may exceed 1440 when the interval spills into the next day;
    it is never wrapped back.
    """

    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.start_minutes < MINUTES_PER_DAY:
            raise InvalidRequest(f"start_minutes out of range: {self.start_minutes}")
        if not 0 < self.end_minutes <= MAX_END_MINUTES:
            raise InvalidRequest(f"end_minutes out of range: {self.end_minutes}")
        if self.end_minutes <= self.start_minutes:
            raise InvalidRequest(
                f"interval must end after it starts ({self.start_minutes} >= {self.end_minutes})"
            )

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def spans_midnight(self) -> bool:
        return self.end_minutes > MINUTES_PER_DAY

    def overlaps(self, other: TimeInterval) -> bool:
        # Touching intervals (a.end == b.start) do not overlap.
        return self.start_minutes < other.end_minutes and other.start_minutes < self.end_minutes

    def contains(self, other: TimeInterval) -> bool:
        return self.start_minutes <= other.start_minutes and other.end_minutes <= self.end_minutes

    def label(self) -> str:
        return f"{format_minutes(self.start_minutes)}-{format_minutes(self.end_minutes)}"


@dataclass(frozen=True)
class OperatingWindow:
    """Bookable part of a calendar day. Defaults to the whole day."""

    open_minutes: int = 0
    close_minutes: int = MINUTES_PER_DAY

    def __post_init__(self) -> None:
        if not 0 <= self.open_minutes < self.close_minutes <= MINUTES_PER_DAY:
            raise InvalidRequest(
                f"invalid operating window {self.open_minutes}-{self.close_minutes}"
            )

    @property
    def is_full_day(self) -> bool:
        return self.open_minutes == 0 and self.close_minutes == MINUTES_PER_DAY

    def admits(self, interval: TimeInterval) -> bool:
        return self.open_minutes <= interval.start_minutes and interval.end_minutes <= self.close_minutes
