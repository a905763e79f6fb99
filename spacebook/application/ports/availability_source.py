from __future__ import annotations

from abc import ABC, abstractmethod

from spacebook.domain.entities.time_interval import TimeInterval


class AvailabilitySource(ABC):
    @abstractmethod
    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        """
        Return every booked interval for a space on a calendar day.

        Requirements:
        - Intervals spilling past midnight use end_minutes > 1440, never wrapped
        - Must raise DataSourceError on network/backend failure, never return an empty
          set in its place

        Args:
            space_id: Identifier of the bookable space
            date: Calendar day as YYYY-MM-DD

        Returns:
            Set of booked TimeInterval objects (may be empty)
        """
        raise NotImplementedError
