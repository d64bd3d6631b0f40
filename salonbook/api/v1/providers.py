from __future__ import annotations

from fastapi import APIRouter, Depends

from salonbook.api.v1.deps import DOMAIN_ERRORS, get_caller, to_http_error
from salonbook.api.v1.schemas import AppointmentSchema, CountdownStatsSchema, ProviderStatusUpdateSchema
from salonbook.application.use_cases.bookings import BookingService
from salonbook.domain.entities.booking import BookingStatus
from salonbook.domain.entities.caller import Caller
from salonbook.wiring.dependencies import get_booking_service

router = APIRouter(prefix="/providers/me")


@router.get("/appointments", response_model=list[AppointmentSchema])
def list_provider_appointments(
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        views = service.list_for_provider(caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return [AppointmentSchema.from_view(v) for v in views]


@router.get("/appointments/countdown/stats", response_model=CountdownStatsSchema)
def provider_countdown_stats(
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        stats = service.countdown_stats(caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return CountdownStatsSchema(
        total=stats.total,
        expiring_soon=stats.expiring_soon,
        critical=stats.critical,
        average_time_remaining=stats.average_time_remaining,
    )


@router.put("/appointments/{booking_id}/status", response_model=AppointmentSchema)
def update_appointment_status(
    booking_id: str,
    req: ProviderStatusUpdateSchema,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        booking = service.provider_update_status(booking_id, caller, BookingStatus.parse(req.status))
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AppointmentSchema.from_domain(booking)
