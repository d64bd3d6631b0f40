from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from typing import Any

from salonbook.application.exceptions import ConditionFailed, NotFoundError
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind
from salonbook.infrastructure.store.booking_codec import FIELD_KEYS


class MemoryBookingStore(BookingStorePort):
    def __init__(self, bookings: Iterable[Booking] | None = None) -> None:
        self._bookings: dict[str, Booking] = {b.id: b for b in bookings or []}
        self._lock = threading.Lock()

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def put(self, booking: Booking) -> None:
        with self._lock:
            self._bookings[booking.id] = booking

    def update_fields(
        self,
        booking_id: str,
        fields: dict[str, Any],
        expected_statuses: Iterable[BookingStatus] | None = None,
    ) -> Booking:
        changes = _validated(fields)
        with self._lock:
            current = self._bookings.get(booking_id)
            if current is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            if expected_statuses is not None and current.status not in set(expected_statuses):
                raise ConditionFailed(f"Booking {booking_id} is {current.status.value}")
            updated = replace(current, **changes)
            self._bookings[booking_id] = updated
            return updated

    def delete(self, booking_id: str) -> None:
        with self._lock:
            self._bookings.pop(booking_id, None)

    def query_by_provider(
        self,
        provider_kind: ProviderKind,
        provider_id: str,
        on_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        wanted = set(statuses) if statuses is not None else None
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.provider_kind == provider_kind
                and b.provider_id == provider_id
                and (on_date is None or b.date == on_date)
                and (wanted is None or b.status in wanted)
            ]

    def query_by_client(self, client_id: str) -> list[Booking]:
        with self._lock:
            return [b for b in self._bookings.values() if b.client_id == client_id]

    def scan_by_status(self, statuses: Iterable[BookingStatus]) -> list[Booking]:
        wanted = set(statuses)
        with self._lock:
            return [b for b in self._bookings.values() if b.status in wanted]


def _validated(fields: dict[str, Any]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for name, value in fields.items():
        if name not in FIELD_KEYS:
            raise ValueError(f"Field {name!r} is not updatable")
        if name == "status":
            value = BookingStatus.parse(value)
        changes[name] = value
    return changes
