from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from salonbook.api.v1.deps import DOMAIN_ERRORS, get_caller, to_http_error
from salonbook.api.v1.schemas import (
    AppointmentSchema,
    AvailabilityResponseSchema,
    CheckRejectionResponseSchema,
    CountdownResponseSchema,
    CountdownStatsSchema,
    CreateAppointmentSchema,
    SweepResponseSchema,
    UpdateAppointmentSchema,
)
from salonbook.application.use_cases.availability import AvailabilityUseCase
from salonbook.application.use_cases.bookings import BookingService
from salonbook.application.use_cases.rejection_scheduler import RejectionScheduler
from salonbook.domain.entities.booking import ProviderKind
from salonbook.domain.entities.caller import Caller
from salonbook.wiring.dependencies import (
    get_availability_use_case,
    get_booking_service,
    get_rejection_scheduler,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/available-slots", response_model=AvailabilityResponseSchema)
def available_slots(
    provider_kind: str = Query(..., alias="providerKind"),
    provider_id: str = Query(..., alias="providerId"),
    on_date: date = Query(..., alias="date"),
    duration: int = Query(..., gt=0),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        result = uc.available_slots(ProviderKind.parse(provider_kind), provider_id, on_date, duration)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AvailabilityResponseSchema(
        available=result.available,
        working_days=result.working_days,
        slots=result.slots,
    )


@router.post("/appointments", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: CreateAppointmentSchema,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        booking = service.create(
            caller,
            provider_kind=ProviderKind.parse(req.provider_kind),
            provider_id=req.provider_id,
            service_id=req.service_id,
            on_date=req.date,
            start_time=req.start_time,
            notes=req.notes,
        )
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AppointmentSchema.from_domain(booking)


@router.get("/appointments", response_model=list[AppointmentSchema])
def list_my_appointments(
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        views = service.list_for_client(caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return [AppointmentSchema.from_view(v) for v in views]


@router.get("/appointments/countdown/stats", response_model=CountdownStatsSchema)
def client_countdown_stats(
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


@router.post("/appointments/reject-past", response_model=SweepResponseSchema)
def reject_past(
    caller: Caller = Depends(get_caller),
    scheduler: RejectionScheduler = Depends(get_rejection_scheduler),
):
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Only administrators can trigger a rejection sweep")
    logger.info("Manual rejection sweep requested", extra={"provider_id": caller.user_id})
    try:
        result = scheduler.sweep()
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return SweepResponseSchema(
        rejected=result.rejected,
        total=result.total,
        reasons=result.reasons,
        failed=result.failed,
    )


@router.get("/appointments/{booking_id}", response_model=AppointmentSchema)
def get_appointment(
    booking_id: str,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        view = service.get(booking_id, caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AppointmentSchema.from_view(view)


@router.get("/appointments/{booking_id}/countdown", response_model=CountdownResponseSchema)
def get_countdown(
    booking_id: str,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        view = service.get(booking_id, caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    appointment = AppointmentSchema.from_view(view)
    return CountdownResponseSchema(appointment=appointment, countdown=appointment.countdown)


@router.get("/appointments/{booking_id}/check-rejection", response_model=CheckRejectionResponseSchema)
def check_rejection(
    booking_id: str,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    try:
        result = service.check_rejection(booking_id, caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return CheckRejectionResponseSchema(
        rejected=result.rejected,
        reason=result.reason.value if result.reason else None,
    )


@router.patch("/appointments/{booking_id}", response_model=AppointmentSchema)
def update_appointment(
    booking_id: str,
    req: UpdateAppointmentSchema,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
):
    changes = req.model_dump(exclude_unset=True)
    try:
        booking = service.update(booking_id, caller, changes)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return AppointmentSchema.from_domain(booking)


@router.delete("/appointments/{booking_id}", status_code=204)
def delete_appointment(
    booking_id: str,
    caller: Caller = Depends(get_caller),
    service: BookingService = Depends(get_booking_service),
) -> Response:
    try:
        service.delete(booking_id, caller)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e)
    return Response(status_code=204)
