from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TimeWindow:
    start: str  # HH:MM
    end: str  # HH:MM


@dataclass(frozen=True)
class StylistWorkingHours:
    # days[i] is paired with time_slots[i]
    days: list[str] = field(default_factory=list)
    time_slots: list[TimeWindow] = field(default_factory=list)


@dataclass(frozen=True)
class SalonHours:
    day: int  # date.weekday(): 0 = Monday
    start: str
    end: str


@dataclass(frozen=True)
class DaySchedule:
    """Resolved working window for one calendar day, in minutes from midnight."""

    start_minute: int
    end_minute: int
