from __future__ import annotations

from datetime import date

from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.application.utils.clock_math import parse_hhmm
from salonbook.domain.entities.availability import BusyInterval
from salonbook.domain.entities.booking import ACTIVE_STATUSES, ProviderKind


class BookingConflictIndex:
    def __init__(self, store: BookingStorePort) -> None:
        self._store = store

    def busy_intervals(self, provider_kind: ProviderKind, provider_id: str, on_date: date) -> list[BusyInterval]:
        """
        Busy intervals of the provider's PENDING/CONFIRMED bookings on `on_date`.

        Store errors propagate: availability is never computed from partial data.
        """
        bookings = self._store.query_by_provider(provider_kind, provider_id, on_date=on_date, statuses=ACTIVE_STATUSES)
        intervals: list[BusyInterval] = []
        for booking in bookings:
            if booking.status not in ACTIVE_STATUSES or booking.date != on_date:
                continue
            intervals.append(
                BusyInterval(
                    start_minute=parse_hhmm(booking.start_time),
                    end_minute=parse_hhmm(booking.end_time),
                    booking_id=booking.id,
                )
            )
        return intervals
