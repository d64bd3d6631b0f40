from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from salonbook.application.use_cases.bookings import BookingView
from salonbook.domain.entities.booking import Booking
from salonbook.domain.entities.lifecycle import Countdown


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CountdownSchema(CamelModel):
    time_remaining: int  # seconds
    days: int
    hours: int
    minutes: int
    expired: bool
    will_expire_soon: bool

    @classmethod
    def from_domain(cls, countdown: Countdown | None) -> "CountdownSchema | None":
        if countdown is None:
            return None
        return cls(
            time_remaining=countdown.time_remaining_seconds,
            days=countdown.days,
            hours=countdown.hours,
            minutes=countdown.minutes,
            expired=countdown.expired,
            will_expire_soon=countdown.will_expire_soon,
        )


class AppointmentSchema(CamelModel):
    id: str
    client_id: str
    provider_kind: str
    provider_id: str
    service_id: str
    date: date
    start_time: str
    end_time: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    amount: float | None = None
    currency: str = "eur"
    payment_status: str = "pending"
    notes: str | None = None
    countdown: CountdownSchema | None = None

    @classmethod
    def from_domain(cls, booking: Booking, countdown: Countdown | None = None) -> "AppointmentSchema":
        return cls(
            id=booking.id,
            client_id=booking.client_id,
            provider_kind=booking.provider_kind.value,
            provider_id=booking.provider_id,
            service_id=booking.service_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status.value,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            rejected_at=booking.rejected_at,
            rejection_reason=booking.rejection_reason,
            amount=booking.amount,
            currency=booking.currency,
            payment_status=booking.payment_status,
            notes=booking.notes,
            countdown=CountdownSchema.from_domain(countdown),
        )

    @classmethod
    def from_view(cls, view: BookingView) -> "AppointmentSchema":
        return cls.from_domain(view.booking, view.countdown)


class AvailabilityResponseSchema(CamelModel):
    available: bool
    working_days: list[str] = Field(default_factory=list)
    slots: list[str] = Field(default_factory=list)


class CreateAppointmentSchema(CamelModel):
    provider_kind: str
    provider_id: str
    service_id: str
    date: date
    start_time: str
    notes: str | None = None


class UpdateAppointmentSchema(CamelModel):
    # unknown keys are kept so the service can refuse them explicitly
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    status: str | None = None
    notes: str | None = None
    payment_status: str | None = None


class ProviderStatusUpdateSchema(CamelModel):
    status: str


class CountdownResponseSchema(CamelModel):
    appointment: AppointmentSchema
    countdown: CountdownSchema | None = None


class CheckRejectionResponseSchema(CamelModel):
    rejected: bool
    reason: str | None = None


class SweepResponseSchema(CamelModel):
    rejected: int
    total: int
    reasons: dict[str, int] = Field(default_factory=dict)
    failed: int = 0


class CountdownStatsSchema(CamelModel):
    total: int
    expiring_soon: int
    critical: int
    average_time_remaining: int
