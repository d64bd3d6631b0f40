from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: "str | BookingStatus") -> "BookingStatus":
        """Accept any casing ("pending", "Pending", "PENDING")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown booking status: {value!r}") from None

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED})
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class ProviderKind(str, Enum):
    STYLIST = "STYLIST"
    SALON = "SALON"

    @classmethod
    def parse(cls, value: "str | ProviderKind") -> "ProviderKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown provider kind: {value!r}") from None


@dataclass(frozen=True)
class Booking:
    id: str
    client_id: str
    provider_kind: ProviderKind
    provider_id: str
    service_id: str
    date: date
    start_time: str  # HH:MM
    end_time: str  # HH:MM, start_time + service duration
    status: BookingStatus
    created_at: datetime
    updated_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    # payment metadata, opaque here
    amount: float | None = None
    currency: str = "eur"
    payment_status: str = "pending"
    notes: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
