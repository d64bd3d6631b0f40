from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from salonbook.application.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    SlotUnavailableError,
    UnauthorizedError,
)
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.application.ports.clock import ClockPort
from salonbook.application.ports.service_catalog import ServiceCatalogPort
from salonbook.application.use_cases import lifecycle
from salonbook.application.use_cases.availability import AvailabilityUseCase
from salonbook.application.use_cases.rejection_scheduler import RejectionScheduler
from salonbook.application.utils.clock_math import combine, format_minutes, parse_hhmm
from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind
from salonbook.domain.entities.caller import Caller, CallerRole
from salonbook.domain.entities.lifecycle import CheckResult, Countdown, CountdownStats, LifecyclePolicy

# Fields each role may write through a generic update. Anything else is refused.
UPDATABLE_FIELDS: dict[CallerRole, frozenset[str]] = {
    CallerRole.CLIENT: frozenset({"status", "notes"}),
    CallerRole.ADMIN: frozenset({"status", "notes", "payment_status"}),
}

# Transitions a provider may request explicitly.
PROVIDER_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.REJECTED}),
}

# Transitions an administrator may apply through a generic update.
ADMIN_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
}


@dataclass(frozen=True)
class BookingView:
    booking: Booking
    countdown: Countdown | None


class BookingService:
    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        availability: AvailabilityUseCase,
        scheduler: RejectionScheduler,
        clock: ClockPort,
        policy: LifecyclePolicy = lifecycle.DEFAULT_POLICY,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._availability = availability
        self._scheduler = scheduler
        self._clock = clock
        self._policy = policy
        self._logger = logging.getLogger(__name__)

    def create(
        self,
        caller: Caller,
        provider_kind: ProviderKind,
        provider_id: str,
        service_id: str,
        on_date: date,
        start_time: str,
        notes: str | None = None,
    ) -> Booking:
        if caller.role not in (CallerRole.CLIENT, CallerRole.ADMIN):
            raise UnauthorizedError("Only clients can book appointments")

        service = self._catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service {service_id} not found")
        if service.provider_id is not None and service.provider_id != provider_id:
            raise NotFoundError(f"Service {service_id} is not offered by {provider_id}")

        now = self._clock.now()
        if on_date < now.date():
            raise ValueError("Cannot book an appointment in the past")

        start_minute = parse_hhmm(start_time)
        start = format_minutes(start_minute)
        if combine(on_date, start) <= now:
            raise ValueError("Cannot book an appointment in the past")
        offered = self._availability.available_slots(provider_kind, provider_id, on_date, service.duration_minutes)
        if not offered.available or start not in offered.slots:
            raise SlotUnavailableError(f"{on_date.isoformat()} {start} is not an available slot")

        booking = Booking(
            id=str(uuid.uuid4()),
            client_id=caller.user_id,
            provider_kind=provider_kind,
            provider_id=provider_id,
            service_id=service_id,
            date=on_date,
            start_time=start,
            end_time=format_minutes(start_minute + service.duration_minutes),
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
            amount=service.price,
            notes=notes,
        )
        self._store.put(booking)
        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.id, "provider_id": provider_id},
        )
        return booking

    def get(self, booking_id: str, caller: Caller) -> BookingView:
        """Reject the booking first if it is stale, then return it with its countdown."""
        now = self._clock.now()
        self._authorize_view(self._require(booking_id), caller)
        self._scheduler.check_one(booking_id, now)
        booking = self._require(booking_id)
        return BookingView(booking=booking, countdown=lifecycle.countdown(booking, now, self._policy))

    def check_rejection(self, booking_id: str, caller: Caller) -> CheckResult:
        booking = self._require(booking_id)
        self._authorize_view(booking, caller)
        return self._scheduler.check_one(booking_id)

    def list_for_client(self, caller: Caller) -> list[BookingView]:
        now = self._clock.now()
        self._scheduler.sweep(now)
        return self._views(self._store.query_by_client(caller.user_id), now)

    def list_for_provider(self, caller: Caller) -> list[BookingView]:
        kind = caller.provider_kind
        if kind is None:
            raise UnauthorizedError("Only stylists and salons have provider bookings")
        now = self._clock.now()
        self._scheduler.sweep(now)
        return self._views(self._store.query_by_provider(kind, caller.user_id), now)

    def countdown_stats(self, caller: Caller) -> CountdownStats:
        views = self.list_for_provider(caller) if caller.provider_kind else self.list_for_client(caller)
        return lifecycle.countdown_stats((v.booking for v in views), self._clock.now(), self._policy)

    def provider_update_status(self, booking_id: str, caller: Caller, status: BookingStatus) -> Booking:
        """
        Explicit provider decision on a booking.

        A stale booking is expired first; a provider can never confirm a booking
        that has just been rejected automatically.
        """
        booking = self._store.get(booking_id)
        if booking is None or not caller.is_provider_of(booking):
            raise NotFoundError(f"Booking {booking_id} not found")

        check = self._scheduler.check_one(booking_id)
        if check.rejected:
            raise InvalidTransitionError(
                "Booking was automatically rejected and can no longer be modified",
                reason=check.reason.value if check.reason else None,
            )
        booking = self._require(booking_id)
        if booking.status == BookingStatus.REJECTED:
            raise InvalidTransitionError(
                "Booking was rejected and can no longer be modified",
                reason=booking.rejection_reason,
            )

        allowed = PROVIDER_TRANSITIONS.get(booking.status, frozenset())
        if status not in allowed:
            raise InvalidTransitionError(f"Cannot move a {booking.status.value} booking to {status.value}")

        now = self._clock.now()
        fields: dict[str, Any] = {"status": status, "updated_at": now}
        if status == BookingStatus.REJECTED:
            fields.update(rejected_at=now, rejection_reason="rejected by provider")
        updated = self._store.update_fields(booking_id, fields, expected_statuses=[booking.status])
        self._logger.info(
            "Booking status updated by provider",
            extra={"booking_id": booking_id, "provider_id": caller.user_id, "reason": status.value},
        )
        return updated

    def update(self, booking_id: str, caller: Caller, changes: dict[str, Any]) -> Booking:
        allowed = UPDATABLE_FIELDS.get(caller.role)
        if allowed is None:
            raise UnauthorizedError("Not authorized to update this appointment")
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        booking = self._require(booking_id)
        if not caller.is_admin and not caller.is_client_of(booking):
            raise UnauthorizedError("Not authorized to update this appointment")
        if booking.status == BookingStatus.REJECTED:
            raise InvalidTransitionError(
                "Booking was rejected and can no longer be modified",
                reason=booking.rejection_reason,
            )

        now = self._clock.now()
        fields: dict[str, Any] = dict(changes)
        if "status" in fields:
            status = BookingStatus.parse(fields["status"])
            fields["status"] = status
            if booking.status.is_terminal:
                raise InvalidTransitionError(f"Booking is {booking.status.value} and its status can no longer change")
            if not caller.is_admin:
                if status != BookingStatus.CANCELLED:
                    raise UnauthorizedError("Clients can only cancel appointments")
                if not lifecycle.can_be_cancelled(booking, now, self._policy):
                    raise InvalidTransitionError("Booking can no longer be cancelled")
            elif status not in ADMIN_TRANSITIONS.get(booking.status, frozenset()):
                raise InvalidTransitionError(f"Cannot move a {booking.status.value} booking to {status.value}")
            if status == BookingStatus.REJECTED:
                fields.update(rejected_at=now, rejection_reason="rejected by admin")
        fields["updated_at"] = now
        return self._store.update_fields(booking_id, fields, expected_statuses=[booking.status])

    def delete(self, booking_id: str, caller: Caller) -> None:
        if not caller.is_admin:
            raise UnauthorizedError("Only administrators can delete appointments")
        self._require(booking_id)
        self._store.delete(booking_id)
        self._logger.info("Booking deleted", extra={"booking_id": booking_id})

    def _require(self, booking_id: str) -> Booking:
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def _authorize_view(self, booking: Booking, caller: Caller) -> None:
        if caller.is_admin or caller.is_client_of(booking) or caller.is_provider_of(booking):
            return
        raise UnauthorizedError("Not authorized to view this appointment")

    def _views(self, bookings: list[Booking], now: datetime) -> list[BookingView]:
        ordered = sorted(bookings, key=lambda b: (b.date, b.start_time))
        return [BookingView(booking=b, countdown=lifecycle.countdown(b, now, self._policy)) for b in ordered]
