from __future__ import annotations

from collections.abc import Iterable

from spacebook.application.exceptions import InvalidRequest
from spacebook.domain.entities.booking_request import BookingRequest
from spacebook.domain.entities.time_interval import MINUTES_PER_DAY, OperatingWindow, TimeInterval
from spacebook.domain.entities.verdict import (
    ConflictVerdict,
    FullConflict,
    NoConflict,
    PartialConflict,
    SlotUnavailable,
)

DEFAULT_MAX_ALTERNATIVES = 6

Span = tuple[int, int]


def _merge_spans(spans: Iterable[Span]) -> list[Span]:
    merged: list[Span] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            if end > merged[-1][1]:
                merged[-1] = (merged[-1][0], end)
            continue
        merged.append((start, end))
    return merged


def merge_intervals(intervals: Iterable[TimeInterval]) -> list[TimeInterval]:
    """Union of intervals as sorted, disjoint blocks. Touching intervals are joined."""
    return [
        TimeInterval(start, end)
        for start, end in _merge_spans((i.start_minutes, i.end_minutes) for i in intervals)
    ]


class AvailabilityOracle:
    """
    Decides whether a requested slot is free, given the bookings already known
    for that space and day.

    Pure: the verdict depends only on the arguments and the oracle's window/cap,
    so evaluating the same inputs twice yields equal verdicts.
    """

    def __init__(
        self,
        operating_window: OperatingWindow | None = None,
        max_alternatives: int = DEFAULT_MAX_ALTERNATIVES,
    ) -> None:
        if max_alternatives < 0:
            raise ValueError("max_alternatives must be >= 0")
        self._window = operating_window or OperatingWindow()
        self._max_alternatives = max_alternatives

    @property
    def operating_window(self) -> OperatingWindow:
        return self._window

    def evaluate(
        self,
        request: BookingRequest,
        known_bookings: Iterable[TimeInterval],
        next_day_bookings: Iterable[TimeInterval] = (),
    ) -> ConflictVerdict:
        """
        Classify `request` against the bookings of its day.

        `next_day_bookings` are the following day's bookings; they only matter
        for requests that run past midnight and are matched 1440 minutes later.
        """
        requested = request.interval
        if requested.duration_minutes <= 0:
            raise InvalidRequest("Requested interval has no duration")

        bookings = sorted(set(known_bookings))

        # Outside a configured window the start time can never be booked.
        if not self._window.is_full_day and not self._window.admits(requested):
            return SlotUnavailable(alternatives=self._alternatives(bookings))

        busy = [(b.start_minutes, b.end_minutes) for b in bookings]
        if requested.spans_midnight:
            busy.extend(
                (b.start_minutes + MINUTES_PER_DAY, b.end_minutes + MINUTES_PER_DAY)
                for b in next_day_bookings
            )

        start, end = requested.start_minutes, requested.end_minutes
        overlapping = [(s, e) for s, e in busy if s < end and start < e]
        if not overlapping:
            return NoConflict()

        alternatives = self._alternatives(bookings)

        covering = next(
            ((s, e) for s, e in _merge_spans(busy) if s <= start and end <= e),
            None,
        )
        if covering is None:
            return PartialConflict(alternatives=alternatives)

        # Fully taken. It is a plain clash only if the busy block leaves free
        # time on both sides within the day; otherwise the whole stretch around
        # the requested start is gone.
        block_start, block_end = covering
        close_at = self._window.close_minutes
        if requested.spans_midnight:
            # Only a full-day window admits these; the next day counts too.
            close_at += MINUTES_PER_DAY
        if self._window.open_minutes < block_start and block_end < close_at:
            return FullConflict(alternatives=alternatives)
        return SlotUnavailable(alternatives=alternatives)

    def free_intervals(self, known_bookings: Iterable[TimeInterval]) -> list[TimeInterval]:
        """Complement of the bookings inside the operating window, ascending."""
        open_at = self._window.open_minutes
        close_at = self._window.close_minutes

        free: list[TimeInterval] = []
        cursor = open_at
        for block in merge_intervals(known_bookings):
            if block.end_minutes <= cursor:
                continue
            if block.start_minutes >= close_at:
                break
            if block.start_minutes > cursor:
                free.append(TimeInterval(cursor, block.start_minutes))
            cursor = block.end_minutes
            if cursor >= close_at:
                break

        if cursor < close_at:
            free.append(TimeInterval(cursor, close_at))
        return free

    def _alternatives(self, bookings: list[TimeInterval]) -> tuple[TimeInterval, ...]:
        return tuple(self.free_intervals(bookings)[: self._max_alternatives])
