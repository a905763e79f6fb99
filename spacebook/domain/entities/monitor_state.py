from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from spacebook.domain.entities.verdict import CheckFailed, ConflictVerdict


class MonitorStatus(str, Enum):
    idle = "idle"
    checking = "checking"
    check_failed = "check_failed"


@dataclass(frozen=True)
class MonitorState:
    status: MonitorStatus = MonitorStatus.idle
    verdict: ConflictVerdict | CheckFailed | None = None  # None until the first check completes
    is_checking: bool = False
    last_checked_at: float | None = None
    generation: int = 0
