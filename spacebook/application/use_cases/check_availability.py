from __future__ import annotations

import asyncio
import logging

from spacebook.application.exceptions import CheckTimeout
from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.use_cases.availability_oracle import AvailabilityOracle
from spacebook.application.utils.time_parser import end_date_for, normalize_booking_request
from spacebook.domain.entities.booking_request import BookingRequest
from spacebook.domain.entities.time_interval import TimeInterval
from spacebook.domain.entities.verdict import ConflictVerdict


async def fetch_bookings(
    source: AvailabilitySource,
    request: BookingRequest,
) -> tuple[set[TimeInterval], set[TimeInterval]]:
    """Bookings of the request's day, plus the next day's when the request runs past midnight."""
    if not request.interval.spans_midnight:
        return await source.query_booked_intervals(request.space_id, request.date), set()

    next_date = end_date_for(request).isoformat()
    same_day, next_day = await asyncio.gather(
        source.query_booked_intervals(request.space_id, request.date),
        source.query_booked_intervals(request.space_id, next_date),
    )
    return same_day, next_day


class CheckAvailabilityUseCase:
    """One-shot availability check: fetch bookings, then ask the oracle."""

    def __init__(
        self,
        oracle: AvailabilityOracle,
        source: AvailabilitySource,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._oracle = oracle
        self._source = source
        self._timeout = timeout_seconds
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        space_id: str,
        date: str,
        start_time: str,
        duration_hours: float,
    ) -> tuple[BookingRequest, ConflictVerdict]:
        # Input errors surface here, before any I/O.
        request = normalize_booking_request(space_id, date, start_time, duration_hours)
        try:
            booked, next_day = await asyncio.wait_for(
                fetch_bookings(self._source, request),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise CheckTimeout(f"Availability check timed out after {self._timeout:g}s") from e

        verdict = self._oracle.evaluate(request, booked, next_day)
        self._logger.info(
            "Availability checked",
            extra={
                "space_id": request.space_id,
                "date": request.date,
                "interval": request.interval.label(),
                "conflict_type": verdict.kind.value,
            },
        )
        return request, verdict
