from __future__ import annotations

import logging
from typing import Any

import httpx

from spacebook.application.exceptions import DataSourceError, InvalidRequest
from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.utils.time_parser import parse_closing_time, parse_time_of_day
from spacebook.core.config import settings
from spacebook.domain.entities.time_interval import MINUTES_PER_DAY, TimeInterval


class HttpAvailabilitySource(AvailabilitySource):
    """
    Reads booked intervals from the bookings backend.

    GET {base_url}/spaces/{space_id}/bookings?date=YYYY-MM-DD
    -> {"bookings": [{"start": "HH:MM", "end": "HH:MM"}, ...]}

    An end at or before the start means the booking runs past midnight.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.AVAILABILITY_API_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.AVAILABILITY_API_KEY
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.AVAILABILITY_HTTP_TIMEOUT_SECONDS
        )
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("AVAILABILITY_API_BASE_URL is required for the HTTP availability source")

    async def query_booked_intervals(self, space_id: str, date: str) -> set[TimeInterval]:
        url = f"{self._base_url}/spaces/{space_id}/bookings"
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            response = await self._client.get(url, params={"date": date}, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Availability backend returned an error",
                extra={"space_id": space_id, "date": date, "status_code": e.response.status_code},
            )
            raise DataSourceError(f"Availability backend returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            self._logger.error(
                "Availability backend unreachable",
                extra={"space_id": space_id, "date": date, "error": str(e)},
            )
            raise DataSourceError(f"Availability backend unreachable: {e}") from e
        except ValueError as e:
            raise DataSourceError("Availability backend returned invalid JSON") from e

        return self._parse_bookings(data)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _parse_bookings(self, data: Any) -> set[TimeInterval]:
        if not isinstance(data, dict) or not isinstance(data.get("bookings"), list):
            raise DataSourceError("Availability payload is missing a 'bookings' list")

        intervals: set[TimeInterval] = set()
        for item in data["bookings"]:
            try:
                start = parse_time_of_day(item["start"])
                end = parse_closing_time(item["end"])
                if end <= start:
                    end += MINUTES_PER_DAY
                intervals.add(TimeInterval(start, end))
            except (KeyError, TypeError, InvalidRequest) as e:
                raise DataSourceError(f"Malformed booking entry: {item!r}") from e
        return intervals
