#!/usr/bin/env python3
"""
Local conflict-monitor harness (no HTTP).

Usage:
  python3 scripts/watch_slot.py --date 2024-12-27 --start 09:00 --hours 3 --book 11:00-13:00

What it does:
- Seeds an in-memory availability source with the --book intervals
- Starts a ConflictMonitor for the requested slot and prints every update
- Optionally books the requested slot part-way through (--steal-after) to show
  the next poll picking up the conflict
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from spacebook.application.utils.time_parser import (  # noqa: E402
    normalize_booking_request,
    parse_closing_time,
    parse_time_of_day,
)
from spacebook.domain.entities.monitor_state import MonitorState  # noqa: E402
from spacebook.domain.entities.time_interval import MINUTES_PER_DAY, TimeInterval  # noqa: E402
from spacebook.domain.entities.verdict import CheckFailed  # noqa: E402
from spacebook.infrastructure.availability.memory_source import InMemoryAvailabilitySource  # noqa: E402
from spacebook.wiring.dependencies import create_conflict_monitor, get_oracle  # noqa: E402


def _parse_span(text: str) -> TimeInterval:
    start_text, _, end_text = text.partition("-")
    start = parse_time_of_day(start_text)
    end = parse_closing_time(end_text)
    if end <= start:
        end += MINUTES_PER_DAY
    return TimeInterval(start, end)


def _print_state(state: MonitorState) -> None:
    verdict = state.verdict
    print("-" * 60)
    print(f"generation: {state.generation}  status: {state.status.value}")
    if isinstance(verdict, CheckFailed):
        print(f"check failed ({verdict.error_type}): {verdict.reason}")
        return
    if verdict is None:
        return
    print(f"conflict: {verdict.kind.value}")
    if verdict.message:
        print(f"message:  {verdict.message}")
    for slot in verdict.alternatives:
        print(f"  alternative {slot.label()}")


async def _run(args: argparse.Namespace) -> None:
    source = InMemoryAvailabilitySource(latency_seconds=args.latency_ms / 1000.0)
    for span in args.book or []:
        source.add_booking(args.space, args.date, _parse_span(span))

    request = normalize_booking_request(args.space, args.date, args.start, args.hours)
    monitor = create_conflict_monitor(get_oracle(), source)
    monitor.start(request, poll_interval_ms=args.poll_ms, on_update=_print_state)
    try:
        if args.steal_after is not None:
            await asyncio.sleep(args.steal_after)
            print(f"\n>> another user books {request.interval.label()}")
            source.add_booking(args.space, args.date, request.interval)
        await asyncio.sleep(args.duration)
    finally:
        monitor.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch a booking slot for conflicts")
    parser.add_argument("--space", default="1")
    parser.add_argument("--date", required=True, help="YYYY-MM-DD")
    parser.add_argument("--start", required=True, help="HH:MM")
    parser.add_argument("--hours", type=float, required=True)
    parser.add_argument("--book", action="append", help="existing booking HH:MM-HH:MM (repeatable)")
    parser.add_argument("--poll-ms", type=int, default=2000)
    parser.add_argument("--latency-ms", type=int, default=500)
    parser.add_argument("--steal-after", type=float, default=None, help="seconds before the slot gets taken")
    parser.add_argument("--duration", type=float, default=7.0, help="seconds to keep watching")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
