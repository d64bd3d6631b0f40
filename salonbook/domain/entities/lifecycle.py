from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RejectionReason(str, Enum):
    DATE_PASSED = "date passed"
    TIME_PASSED = "time passed"
    OVERDUE = "no response within 48h"

    @property
    def key(self) -> str:
        """Summary key: datePassed, timePassed, overdue."""
        head, *rest = self.name.lower().split("_")
        return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class Classification:
    should_reject: bool
    reason: RejectionReason | None = None


@dataclass(frozen=True)
class LifecyclePolicy:
    pending_response_hours: int = 48
    expire_soon_hours: int = 24
    critical_hours: int = 6
    cancellation_notice_hours: int = 24


@dataclass(frozen=True)
class Countdown:
    time_remaining_seconds: int
    days: int
    hours: int
    minutes: int
    expired: bool
    will_expire_soon: bool


@dataclass(frozen=True)
class CountdownStats:
    total: int = 0
    expiring_soon: int = 0
    critical: int = 0
    average_time_remaining: int = 0  # seconds


@dataclass(frozen=True)
class SweepResult:
    rejected: int
    total: int
    reasons: dict[str, int] = field(default_factory=dict)
    failed: int = 0


@dataclass(frozen=True)
class CheckResult:
    rejected: bool
    reason: RejectionReason | None = None
