from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from functools import partial
from typing import Callable

from spacebook.application.exceptions import DataSourceError
from spacebook.application.ports.availability_source import AvailabilitySource
from spacebook.application.ports.scheduler import ScheduledHandle, Scheduler
from spacebook.application.use_cases.availability_oracle import AvailabilityOracle
from spacebook.application.use_cases.check_availability import fetch_bookings
from spacebook.domain.entities.booking_request import BookingRequest
from spacebook.domain.entities.monitor_state import MonitorState, MonitorStatus
from spacebook.domain.entities.verdict import CheckFailed, ConflictVerdict

DEFAULT_POLL_INTERVAL_MS = 10_000
DEFAULT_CHECK_TIMEOUT_SECONDS = 5.0

Observer = Callable[[MonitorState], None]
CheckOutcome = ConflictVerdict | CheckFailed


class ConflictMonitor:
    """
    Keeps the conflict verdict for one booking request fresh while the user
    is deciding, re-checking on a timer and on demand.

    Every check is tagged with a generation number. Starting a new check cancels
    the one in flight and bumps the generation; a completed check whose tag is
    behind the current generation is dropped, so a slow check can never overwrite
    the result of a newer one. Observers only hear about completed, current checks.
    """

    def __init__(
        self,
        oracle: AvailabilityOracle,
        source: AvailabilitySource,
        scheduler: Scheduler,
        check_timeout_seconds: float = DEFAULT_CHECK_TIMEOUT_SECONDS,
    ) -> None:
        self._oracle = oracle
        self._source = source
        self._scheduler = scheduler
        self._check_timeout = check_timeout_seconds
        self._logger = logging.getLogger(__name__)

        self._request: BookingRequest | None = None
        self._on_update: Observer | None = None
        self._poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
        self._timer: ScheduledHandle | None = None
        self._task: asyncio.Task[CheckOutcome] | None = None
        self._generation = 0
        self._running = False
        self._state = MonitorState()

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def request(self) -> BookingRequest | None:
        return self._request

    def start(
        self,
        request: BookingRequest,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        on_update: Observer | None = None,
    ) -> None:
        """Check `request` now, then every `poll_interval_ms` until stop()."""
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if self._running:
            self.stop()

        self._request = request
        self._on_update = on_update
        self._poll_interval_ms = poll_interval_ms
        self._running = True
        self._state = MonitorState()

        self._logger.info(
            "Conflict monitor started",
            extra={
                "space_id": request.space_id,
                "date": request.date,
                "interval": request.interval.label(),
                "poll_interval_ms": poll_interval_ms,
            },
        )
        self._schedule_timer()
        self._launch_check("start")

    def stop(self) -> None:
        """Cancel the timer and any in-flight check. Safe to call repeatedly."""
        if not self._running:
            return
        self._running = False

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._cancel_in_flight()
        # Anything still completing now belongs to a dead generation.
        self._generation += 1

        status = MonitorStatus.idle if self._state.status == MonitorStatus.checking else self._state.status
        self._state = replace(self._state, status=status, is_checking=False)
        self._logger.info("Conflict monitor stopped", extra={"generation": self._generation})

    def refetch(self) -> None:
        """Check immediately without touching the polling schedule."""
        if not self._running:
            self._logger.debug("Refetch ignored, monitor is not running")
            return
        self._launch_check("refetch")

    def update_request(self, request: BookingRequest) -> None:
        """Switch to a new request (date/time/duration changed) and re-check right away."""
        self._request = request
        if not self._running:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._schedule_timer()
        self._launch_check("request_changed")

    def _schedule_timer(self) -> None:
        self._timer = self._scheduler.call_repeating(self._poll_interval_ms / 1000.0, self._on_tick)

    def _on_tick(self) -> None:
        self._launch_check("tick")

    def _cancel_in_flight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self._logger.debug("Superseded in-flight check", extra={"generation": self._generation})
        self._task = None

    def _launch_check(self, reason: str) -> None:
        if not self._running or self._request is None:
            return

        self._cancel_in_flight()
        self._generation += 1
        generation = self._generation
        self._state = replace(
            self._state,
            status=MonitorStatus.checking,
            is_checking=True,
            generation=generation,
        )

        self._logger.debug(
            "Availability check started",
            extra={"generation": generation, "reason": reason, "space_id": self._request.space_id},
        )
        task = asyncio.get_running_loop().create_task(self._run_check(self._request))
        task.add_done_callback(partial(self._on_check_done, generation))
        self._task = task

    async def _run_check(self, request: BookingRequest) -> CheckOutcome:
        try:
            booked, next_day = await asyncio.wait_for(
                fetch_bookings(self._source, request),
                timeout=self._check_timeout,
            )
        except asyncio.TimeoutError:
            return CheckFailed(
                reason=f"Availability check timed out after {self._check_timeout:g}s",
                error_type="CheckTimeout",
            )
        except DataSourceError as e:
            return CheckFailed(reason=str(e), error_type=type(e).__name__)
        return self._oracle.evaluate(request, booked, next_day)

    def _on_check_done(self, generation: int, task: asyncio.Task[CheckOutcome]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if generation != self._generation or not self._running:
            # Stale result: a newer check (or stop) superseded this one.
            self._logger.debug(
                "Discarding stale availability result",
                extra={"generation": generation, "current_generation": self._generation},
            )
            return
        self._task = None

        if error is not None:
            self._logger.error(
                "Availability check crashed",
                exc_info=error,
                extra={"generation": generation, "error": str(error)},
            )
            outcome: CheckOutcome = CheckFailed(reason=str(error), error_type=type(error).__name__)
        else:
            outcome = task.result()

        if isinstance(outcome, CheckFailed):
            status = MonitorStatus.check_failed
            self._logger.warning(
                "Availability check failed",
                extra={"generation": generation, "error": outcome.reason, "error_type": outcome.error_type},
            )
        else:
            status = MonitorStatus.idle
            self._logger.info(
                "Availability check completed",
                extra={"generation": generation, "conflict_type": outcome.kind.value},
            )

        self._state = MonitorState(
            status=status,
            verdict=outcome,
            is_checking=False,
            last_checked_at=self._scheduler.now(),
            generation=generation,
        )
        if self._on_update is not None:
            self._on_update(self._state)
