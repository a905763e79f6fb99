from __future__ import annotations

import re
from datetime import date, timedelta

from spacebook.application.exceptions import InvalidRequest, InvalidTimeFormat
from spacebook.domain.entities.booking_request import BookingRequest
from spacebook.domain.entities.time_interval import (
    MAX_END_MINUTES,
    MINUTES_PER_DAY,
    TimeInterval,
    format_minutes,
)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(text: str) -> int:
    """Parse "HH:MM" (24h) into minutes from midnight."""
    if not isinstance(text, str):
        raise InvalidTimeFormat(f"Expected HH:MM string, got {text!r}")
    match = _TIME_RE.match(text.strip())
    if not match:
        raise InvalidTimeFormat(f"Expected HH:MM, got {text!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise InvalidTimeFormat(f"Time out of range: {text!r}")
    return hour * 60 + minute


def parse_closing_time(text: str) -> int:
    """Like parse_time_of_day, but also accepts "24:00" as end of day."""
    if isinstance(text, str) and text.strip() == "24:00":
        return MINUTES_PER_DAY
    return parse_time_of_day(text)


def parse_date(text: str) -> date:
    if not isinstance(text, str):
        raise InvalidRequest(f"Expected YYYY-MM-DD date, got {text!r}")
    try:
        return date.fromisoformat(text.strip())
    except ValueError as e:
        raise InvalidRequest(f"Expected YYYY-MM-DD date, got {text!r}") from e


def build_interval(start_time: str, duration_hours: float) -> TimeInterval:
    start = parse_time_of_day(start_time)
    if duration_hours is None or duration_hours <= 0:
        raise InvalidRequest(f"Duration must be positive, got {duration_hours!r}")

    duration_minutes = int(round(duration_hours * 60))
    if duration_minutes <= 0:
        raise InvalidRequest(f"Duration rounds to zero minutes: {duration_hours!r}")

    end = start + duration_minutes
    if end > MAX_END_MINUTES:
        raise InvalidRequest(f"Duration {duration_hours}h runs past the following day")
    # Past 1440 the interval spans midnight; kept as-is.
    return TimeInterval(start, end)


def normalize_booking_request(
    space_id: str,
    date: str,
    start_time: str,
    duration_hours: float,
) -> BookingRequest:
    """Turn raw booking form input into a canonical BookingRequest."""
    if not space_id or not str(space_id).strip():
        raise InvalidRequest("space_id is required")
    booking_date = parse_date(date)
    interval = build_interval(start_time, duration_hours)
    return BookingRequest(
        space_id=str(space_id).strip(),
        date=booking_date.isoformat(),
        interval=interval,
    )


def end_date_for(request: BookingRequest) -> date:
    """Calendar day on which the requested interval ends."""
    start_day = parse_date(request.date)
    # An end of exactly 24:00 still belongs to the start day.
    days_over = (request.interval.end_minutes - 1) // MINUTES_PER_DAY
    return start_day + timedelta(days=days_over)
