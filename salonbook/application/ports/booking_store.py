from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from typing import Any

from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind


class BookingStorePort(ABC):
    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_fields(
        self,
        booking_id: str,
        fields: dict[str, Any],
        expected_statuses: Iterable[BookingStatus] | None = None,
    ) -> Booking:
        """
        Apply a field-scoped update and return the updated booking.

        When `expected_statuses` is given the write only happens if the stored
        status is one of them; otherwise ConditionFailed is raised.
        Raises NotFoundError if the booking does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, booking_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def query_by_provider(
        self,
        provider_kind: ProviderKind,
        provider_id: str,
        on_date: date | None = None,
        statuses: Iterable[BookingStatus] | None = None,
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def query_by_client(self, client_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def scan_by_status(self, statuses: Iterable[BookingStatus]) -> list[Booking]:
        raise NotImplementedError
