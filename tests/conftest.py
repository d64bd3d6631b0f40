from __future__ import annotations

from datetime import date, datetime

import pytest

from salonbook.application.use_cases.availability import AvailabilityUseCase
from salonbook.application.use_cases.bookings import BookingService
from salonbook.application.use_cases.calendar_resolver import CalendarResolver
from salonbook.application.use_cases.conflict_index import BookingConflictIndex
from salonbook.application.use_cases.rejection_scheduler import RejectionScheduler
from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind
from salonbook.domain.entities.schedule import SalonHours, StylistWorkingHours, TimeWindow
from salonbook.domain.entities.service_catalog import ServiceEntry
from salonbook.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from salonbook.infrastructure.clock import FixedClock
from salonbook.infrastructure.directory.memory_directory import MemoryProviderDirectory
from salonbook.infrastructure.store.memory_store import MemoryBookingStore

# Sunday noon; the next day is a Monday.
NOW = datetime(2026, 10, 18, 12, 0)
MONDAY = date(2026, 10, 19)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def directory() -> MemoryProviderDirectory:
    return MemoryProviderDirectory(
        stylists={
            "stylist-1": StylistWorkingHours(
                days=["Monday", "thursday"],
                time_slots=[TimeWindow("09:00", "17:00"), TimeWindow("12:00", "20:00")],
            ),
            "stylist-2": StylistWorkingHours(days=["Monday"], time_slots=[TimeWindow("09:00", "10:00")]),
        },
        salons={
            "salon-1": [SalonHours(day=0, start="09:00", end="19:00"), SalonHours(day=5, start="10:00", end="14:00")],
        },
    )


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore(
        {
            "cut": ServiceEntry("cut", "Haircut", 60, provider_id="stylist-1", price=35.0),
            "color": ServiceEntry("color", "Colour", 90, provider_id="stylist-1", price=80.0),
            "braids": ServiceEntry("braids", "Box braids", 180, provider_id="salon-1", price=120.0),
        }
    )


@pytest.fixture
def availability(store, directory) -> AvailabilityUseCase:
    return AvailabilityUseCase(CalendarResolver(directory), BookingConflictIndex(store))


@pytest.fixture
def scheduler(store, clock) -> RejectionScheduler:
    return RejectionScheduler(store, clock)


@pytest.fixture
def booking_service(store, catalog, availability, scheduler, clock) -> BookingService:
    return BookingService(store, catalog, availability, scheduler, clock)


@pytest.fixture
def make_booking():
    """Factory for bookings; defaults to a fresh PENDING stylist-1 booking on Monday 10:00."""
    counter = {"n": 0}

    def _make(**overrides) -> Booking:
        counter["n"] += 1
        values = dict(
            id=f"b{counter['n']}",
            client_id="client-1",
            provider_kind=ProviderKind.STYLIST,
            provider_id="stylist-1",
            service_id="cut",
            date=MONDAY,
            start_time="10:00",
            end_time="11:00",
            status=BookingStatus.PENDING,
            created_at=NOW,
        )
        values.update(overrides)
        return Booking(**values)

    return _make
