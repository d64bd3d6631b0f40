from __future__ import annotations

import logging
from datetime import date

from salonbook.application.exceptions import NotFoundError
from salonbook.application.ports.provider_directory import ProviderDirectoryPort
from salonbook.application.utils.clock_math import WEEKDAY_NAMES, parse_hhmm, weekday_index, weekday_name
from salonbook.domain.entities.booking import ProviderKind
from salonbook.domain.entities.schedule import DaySchedule, TimeWindow


class CalendarResolver:
    """Resolves the working window a provider has configured for a calendar day."""

    def __init__(self, directory: ProviderDirectoryPort) -> None:
        self._directory = directory
        self._logger = logging.getLogger(__name__)

    def resolve_schedule(self, provider_kind: ProviderKind, provider_id: str, on_date: date) -> DaySchedule | None:
        """
        Return the day's window, or None when the provider is closed that day.

        Raises NotFoundError when the provider itself is unknown.
        """
        if provider_kind == ProviderKind.STYLIST:
            window = self._stylist_window(provider_id, on_date)
        else:
            window = self._salon_window(provider_id, on_date)

        if window is None:
            self._logger.info(
                "No working hours configured for day",
                extra={"provider_id": provider_id, "reason": weekday_name(on_date)},
            )
            return None
        return DaySchedule(start_minute=parse_hhmm(window.start), end_minute=parse_hhmm(window.end))

    def working_days(self, provider_kind: ProviderKind, provider_id: str) -> list[str]:
        """Configured day names in calendar order, for client-side calendar rendering."""
        if provider_kind == ProviderKind.STYLIST:
            hours = self._directory.get_stylist_schedule(provider_id)
            if hours is None:
                raise NotFoundError(f"Stylist {provider_id} not found")
            configured = {weekday_index(d) for d in hours.days}
            return [name for i, name in enumerate(WEEKDAY_NAMES) if i in configured]

        salon_hours = self._directory.get_salon_hours(provider_id)
        if salon_hours is None:
            raise NotFoundError(f"Salon {provider_id} not found")
        days = {h.day for h in salon_hours}
        return [name for i, name in enumerate(WEEKDAY_NAMES) if i in days]

    def _stylist_window(self, provider_id: str, on_date: date) -> TimeWindow | None:
        hours = self._directory.get_stylist_schedule(provider_id)
        if hours is None:
            raise NotFoundError(f"Stylist {provider_id} not found")

        # days may be stored in English or French
        normalized = [weekday_index(d) for d in hours.days]
        if on_date.weekday() not in normalized:
            return None
        index = normalized.index(on_date.weekday())
        if index >= len(hours.time_slots):
            return None
        return hours.time_slots[index]

    def _salon_window(self, provider_id: str, on_date: date) -> TimeWindow | None:
        salon_hours = self._directory.get_salon_hours(provider_id)
        if salon_hours is None:
            raise NotFoundError(f"Salon {provider_id} not found")

        weekday = on_date.weekday()
        for entry in salon_hours:
            if entry.day == weekday:
                return TimeWindow(start=entry.start, end=entry.end)
        return None
