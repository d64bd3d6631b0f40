from __future__ import annotations

import logging
from datetime import date

from salonbook.application.use_cases.calendar_resolver import CalendarResolver
from salonbook.application.use_cases.conflict_index import BookingConflictIndex
from salonbook.application.utils.clock_math import format_minutes
from salonbook.domain.entities.availability import AvailabilityResult, BusyInterval
from salonbook.domain.entities.booking import ProviderKind
from salonbook.domain.entities.schedule import DaySchedule


def overlaps(start: int, end: int, busy: BusyInterval) -> bool:
    # half-open: touching intervals do not conflict
    return start < busy.end_minute and end > busy.start_minute


def generate_slots(
    window: DaySchedule,
    busy: list[BusyInterval],
    duration_minutes: int,
    step_minutes: int = 60,
) -> list[int]:
    """
    Bookable start times (minutes from midnight) inside `window`.

    Candidates sit on a fixed grid of `step_minutes` from the window start,
    independent of the service duration. A candidate is kept when
    [start, start + duration) fits before closing and overlaps no busy interval.
    """
    if duration_minutes <= 0:
        raise ValueError("duration must be a positive number of minutes")
    if step_minutes <= 0:
        raise ValueError("step must be a positive number of minutes")

    slots: list[int] = []
    cursor = window.start_minute
    while cursor < window.end_minute:
        candidate_end = cursor + duration_minutes
        if candidate_end > window.end_minute:
            break
        if not any(overlaps(cursor, candidate_end, interval) for interval in busy):
            slots.append(cursor)
        cursor += step_minutes
    return slots


class AvailabilityUseCase:
    def __init__(
        self,
        resolver: CalendarResolver,
        conflicts: BookingConflictIndex,
        step_minutes: int = 60,
    ) -> None:
        self._resolver = resolver
        self._conflicts = conflicts
        self._step_minutes = step_minutes
        self._logger = logging.getLogger(__name__)

    def available_slots(
        self,
        provider_kind: ProviderKind,
        provider_id: str,
        on_date: date,
        duration_minutes: int,
    ) -> AvailabilityResult:
        if duration_minutes <= 0:
            raise ValueError("duration must be a positive number of minutes")

        window = self._resolver.resolve_schedule(provider_kind, provider_id, on_date)
        working_days = self._resolver.working_days(provider_kind, provider_id)
        if window is None:
            return AvailabilityResult(available=False, working_days=working_days, slots=[])

        busy = self._conflicts.busy_intervals(provider_kind, provider_id, on_date)
        slots = generate_slots(window, busy, duration_minutes, self._step_minutes)

        self._logger.debug(
            "Slots computed",
            extra={"provider_id": provider_id, "total": len(slots)},
        )
        return AvailabilityResult(
            available=True,
            working_days=working_days,
            slots=[format_minutes(s) for s in slots],
        )
