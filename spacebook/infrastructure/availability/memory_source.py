from __future__ import annotations

import asyncio
import logging

from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.domain.entities.time_interval import TimeInterval


class InMemoryAvailabilitySource(AvailabilitySource):
    """
    Bookings held in process memory, with optional artificial latency to stand
    in for a network round trip.
    """

    def __init__(self, latency_seconds: float = 0.0) -> None:
        self._bookings: dict[tuple[str, str], set[TimeInterval]] = {}
        self._latency = latency_seconds
        self._logger = logging.getLogger(__name__)

    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        return set(self._bookings.get((space_id, date), set()))

    def add_booking(self, space_id: str, date: str, interval: TimeInterval) -> None:
        self._bookings.setdefault((space_id, date), set()).add(interval)
        self._logger.info(
            "Mock booking added",
            extra={"space_id": space_id, "date": date, "interval": interval.label()},
        )

    def remove_booking(self, space_id: str, date: str, interval: TimeInterval) -> bool:
        booked = self._bookings.get((space_id, date))
        if not booked or interval not in booked:
            return False
        booked.discard(interval)
        self._logger.info(
            "Mock booking removed",
            extra={"space_id": space_id, "date": date, "interval": interval.label()},
        )
        return True

    def clear(self) -> None:
        self._bookings.clear()
