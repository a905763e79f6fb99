from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from spacebook.domain.entities.time_interval import TimeInterval

FULL_CONFLICT_MESSAGE = "This space was just booked for your selected time."
PARTIAL_CONFLICT_MESSAGE = "This space was just booked for part of your selected time."
SLOT_UNAVAILABLE_MESSAGE = "This time slot is no longer available."


class ConflictKind(str, Enum):
    none = "none"
    full = "full"
    partial = "partial"
    unavailable = "unavailable"


@dataclass(frozen=True)
class NoConflict:
    kind: ClassVar[ConflictKind] = ConflictKind.none
    has_conflict: ClassVar[bool] = False
    message: ClassVar[str | None] = None
    alternatives: ClassVar[tuple[TimeInterval, ...]] = ()


@dataclass(frozen=True)
class FullConflict:
    message: str = FULL_CONFLICT_MESSAGE
    alternatives: tuple[TimeInterval, ...] = ()

    kind: ClassVar[ConflictKind] = ConflictKind.full
    has_conflict: ClassVar[bool] = True


@dataclass(frozen=True)
class PartialConflict:
    message: str = PARTIAL_CONFLICT_MESSAGE
    alternatives: tuple[TimeInterval, ...] = ()

    kind: ClassVar[ConflictKind] = ConflictKind.partial
    has_conflict: ClassVar[bool] = True


@dataclass(frozen=True)
class SlotUnavailable:
    message: str = SLOT_UNAVAILABLE_MESSAGE
    alternatives: tuple[TimeInterval, ...] = ()

    kind: ClassVar[ConflictKind] = ConflictKind.unavailable
    has_conflict: ClassVar[bool] = True


ConflictVerdict = Union[NoConflict, FullConflict, PartialConflict, SlotUnavailable]


@dataclass(frozen=True)
class CheckFailed:
    """Outcome of a check whose data source failed or timed out. Not a verdict."""

    reason: str
    error_type: str = "DataSourceError"

    has_conflict: ClassVar[bool | None] = None
