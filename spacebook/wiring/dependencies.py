from functools import lru_cache
import logging

from spacebook.core.config import settings
from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.ports.scheduler import Scheduler
from spacebook.application.use_cases.availability_oracle import AvailabilityOracle
from spacebook.application.use_cases.check_availability import CheckAvailabilityUseCase
from spacebook.application.use_cases.conflict_monitor import ConflictMonitor
from spacebook.application.utils.time_parser import parse_closing_time, parse_time_of_day
from spacebook.domain.entities.time_interval import OperatingWindow
from spacebook.infrastructure.availability.http_source import HttpAvailabilitySource
from spacebook.infrastructure.availability.memory_source import InMemoryAvailabilitySource
from spacebook.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler


_availability_source: AvailabilitySource | None = None


def get_operating_window() -> OperatingWindow:
    return OperatingWindow(
        open_minutes=parse_time_of_day(settings.OPERATING_OPEN),
        close_minutes=parse_closing_time(settings.OPERATING_CLOSE),
    )


@lru_cache
def get_oracle() -> AvailabilityOracle:
    return AvailabilityOracle(
        operating_window=get_operating_window(),
        max_alternatives=settings.MAX_ALTERNATIVES,
    )


def get_availability_source() -> AvailabilitySource:
    global _availability_source
    if _availability_source is None:
        logger = logging.getLogger(__name__)
        if settings.AVAILABILITY_SOURCE.lower() == "http":
            if not settings.AVAILABILITY_API_BASE_URL and settings.ENV.lower() in {"dev", "local"}:
                logger.info("Using InMemoryAvailabilitySource (base URL missing, ENV=dev/local)")
                _availability_source = InMemoryAvailabilitySource(
                    latency_seconds=settings.MOCK_LATENCY_MS / 1000.0
                )
            else:
                logger.info("Using HttpAvailabilitySource")
                _availability_source = HttpAvailabilitySource()
        else:
            logger.info("Using InMemoryAvailabilitySource")
            _availability_source = InMemoryAvailabilitySource(
                latency_seconds=settings.MOCK_LATENCY_MS / 1000.0
            )
    return _availability_source


def create_conflict_monitor(
    oracle: AvailabilityOracle,
    source: AvailabilitySource,
    scheduler: Scheduler | None = None,
    check_timeout_seconds: float | None = None,
) -> ConflictMonitor:
    return ConflictMonitor(
        oracle=oracle,
        source=source,
        scheduler=scheduler or AsyncioScheduler(),
        check_timeout_seconds=(
            check_timeout_seconds if check_timeout_seconds is not None else settings.CHECK_TIMEOUT_SECONDS
        ),
    )


def get_conflict_monitor() -> ConflictMonitor:
    return create_conflict_monitor(get_oracle(), get_availability_source())


def get_check_availability_use_case() -> CheckAvailabilityUseCase:
    return CheckAvailabilityUseCase(
        oracle=get_oracle(),
        source=get_availability_source(),
        timeout_seconds=settings.CHECK_TIMEOUT_SECONDS,
    )


async def close_availability_source() -> None:
    """Release the source's connections (HTTP client) and forget the singleton."""
    global _availability_source
    source, _availability_source = _availability_source, None
    if isinstance(source, HttpAvailabilitySource):
        await source.aclose()
        logging.getLogger(__name__).info("Availability source closed")
