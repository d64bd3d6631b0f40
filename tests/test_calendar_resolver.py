from __future__ import annotations

from datetime import date

import pytest

from salonbook.application.exceptions import NotFoundError
from salonbook.application.use_cases.calendar_resolver import CalendarResolver
from salonbook.domain.entities.booking import ProviderKind
from salonbook.domain.entities.schedule import DaySchedule, StylistWorkingHours, TimeWindow
from salonbook.infrastructure.directory.memory_directory import MemoryProviderDirectory


def test_stylist_day_matches_by_name(directory):
    resolver = CalendarResolver(directory)

    assert resolver.resolve_schedule(ProviderKind.STYLIST, "stylist-1", date(2026, 10, 19)) == DaySchedule(540, 1020)
    # configured as "thursday"
    assert resolver.resolve_schedule(ProviderKind.STYLIST, "stylist-1", date(2026, 10, 22)) == DaySchedule(720, 1200)


def test_unconfigured_day_resolves_to_none(directory):
    resolver = CalendarResolver(directory)

    assert resolver.resolve_schedule(ProviderKind.STYLIST, "stylist-1", date(2026, 10, 20)) is None
    assert resolver.resolve_schedule(ProviderKind.SALON, "salon-1", date(2026, 10, 25)) is None


def test_salon_day_matches_by_weekday_number(directory):
    resolver = CalendarResolver(directory)

    assert resolver.resolve_schedule(ProviderKind.SALON, "salon-1", date(2026, 10, 24)) == DaySchedule(600, 840)


def test_working_days_in_calendar_order():
    directory = MemoryProviderDirectory(
        stylists={
            "s": StylistWorkingHours(
                days=["Friday", "monday"],
                time_slots=[TimeWindow("09:00", "12:00"), TimeWindow("14:00", "18:00")],
            )
        }
    )

    assert CalendarResolver(directory).working_days(ProviderKind.STYLIST, "s") == ["Monday", "Friday"]


def test_missing_time_slot_for_day_is_closed():
    directory = MemoryProviderDirectory(
        stylists={"s": StylistWorkingHours(days=["Monday", "Tuesday"], time_slots=[TimeWindow("09:00", "12:00")])}
    )

    assert CalendarResolver(directory).resolve_schedule(ProviderKind.STYLIST, "s", date(2026, 10, 20)) is None


def test_end_of_day_is_accepted():
    directory = MemoryProviderDirectory(
        stylists={"s": StylistWorkingHours(days=["Monday"], time_slots=[TimeWindow("20h", "24:00")])}
    )

    window = CalendarResolver(directory).resolve_schedule(ProviderKind.STYLIST, "s", date(2026, 10, 19))

    assert window == DaySchedule(1200, 1440)


def test_unknown_providers_raise(directory):
    resolver = CalendarResolver(directory)

    with pytest.raises(NotFoundError):
        resolver.resolve_schedule(ProviderKind.STYLIST, "ghost", date(2026, 10, 19))
    with pytest.raises(NotFoundError):
        resolver.working_days(ProviderKind.SALON, "ghost")


def test_french_day_names():
    """Stored schedules name their days in French ("Lundi".."Dimanche")."""
    directory = MemoryProviderDirectory(
        stylists={
            "s": StylistWorkingHours(
                days=["Lundi", "vendredi"],
                time_slots=[TimeWindow("09:00", "12:00"), TimeWindow("14:00", "18:00")],
            )
        }
    )
    resolver = CalendarResolver(directory)

    assert resolver.resolve_schedule(ProviderKind.STYLIST, "s", date(2026, 10, 19)) == DaySchedule(540, 720)
    assert resolver.resolve_schedule(ProviderKind.STYLIST, "s", date(2026, 10, 23)) == DaySchedule(840, 1080)
    assert resolver.resolve_schedule(ProviderKind.STYLIST, "s", date(2026, 10, 20)) is None
    assert resolver.working_days(ProviderKind.STYLIST, "s") == ["Monday", "Friday"]
