from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BusyInterval:
    start_minute: int
    end_minute: int
    booking_id: str | None = None


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    working_days: list[str] = field(default_factory=list)
    slots: list[str] = field(default_factory=list)  # HH:MM start times
