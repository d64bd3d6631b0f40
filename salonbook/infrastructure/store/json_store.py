from __future__ import annotations

import json
import threading
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from salonbook.application.exceptions import ConditionFailed, NotFoundError, StoreFailure
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind
from salonbook.infrastructure.store.booking_codec import booking_to_record, fields_to_record, record_to_booking


class JsonBookingStore(BookingStorePort):
    """One JSON document per booking, written atomically. Meant for local development."""

    def __init__(self, data_dir: str = "./data/bookings", timezone: str = "Europe/Paris") -> None:
        self._data_dir = Path(data_dir)
        self._tz = ZoneInfo(timezone)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, booking_id: str) -> threading.Lock:
        """Get or create a lock for a booking_id."""
        with self._lock_lock:
            if booking_id not in self._locks:
                self._locks[booking_id] = threading.Lock()
            return self._locks[booking_id]

    def _get_file_path(self, booking_id: str) -> Path:
        return self._data_dir / f"{booking_id}.json"

    def _load_record(self, file_path: Path) -> dict[str, Any] | None:
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreFailure(f"Cannot read {file_path.name}: {e}") from e

    def _save_record(self, booking_id: str, data: dict[str, Any]) -> None:
        """Save booking document to JSON file atomically."""
        file_path = self._get_file_path(booking_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StoreFailure(f"Cannot write {file_path.name}: {e}") from e

    def _all(self) -> list[Booking]:
        bookings: list[Booking] = []
        for file_path in sorted(self._data_dir.glob("*.json")):
            data = self._load_record(file_path)
            if data is not None:
                bookings.append(record_to_booking(data, self._tz))
        return bookings

    def get(self, booking_id: str) -> Booking | None:
        with self._get_lock(booking_id):
            data = self._load_record(self._get_file_path(booking_id))
        return record_to_booking(data, self._tz) if data is not None else None

    def put(self, booking: Booking) -> None:
        with self._get_lock(booking.id):
            self._save_record(booking.id, booking_to_record(booking))

    def update_fields(
        self,
        booking_id: str,
        fields: dict[str, Any],
        expected_statuses: Iterable[BookingStatus] | None = None,
    ) -> Booking:
        changes = fields_to_record(fields)
        with self._get_lock(booking_id):
            data = self._load_record(self._get_file_path(booking_id))
            if data is None:
                raise NotFoundError(f"Booking {booking_id} not found")
            current = BookingStatus.parse(data.get("status") or BookingStatus.PENDING)
            if expected_statuses is not None and current not in set(expected_statuses):
                raise ConditionFailed(f"Booking {booking_id} is {current.value}")
            data.update(changes)
            self._save_record(booking_id, data)
        return record_to_booking(data, self._tz)

    def delete(self, booking_id: str) -> None:
        with self._get_lock(booking_id):
            try:
                self._get_file_path(booking_id).unlink(missing_ok=True)
            except OSError as e:
                raise StoreFailure(f"Cannot delete booking {booking_id}: {e}") from e

    def query_by_provider(
        self,
        provider_kind: ProviderKind,
        provider_id: str,
        on_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        wanted = set(statuses) if statuses is not None else None
        return [
            b
            for b in self._all()
            if b.provider_kind == provider_kind
            and b.provider_id == provider_id
            and (on_date is None or b.date == on_date)
            and (wanted is None or b.status in wanted)
        ]

    def query_by_client(self, client_id: str) -> list[Booking]:
        return [b for b in self._all() if b.client_id == client_id]

    def scan_by_status(self, statuses: Iterable[BookingStatus]) -> list[Booking]:
        wanted = set(statuses)
        return [b for b in self._all() if b.status in wanted]
