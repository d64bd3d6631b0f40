from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from salonbook.domain.entities.booking import Booking, BookingStatus, ProviderKind

DEFAULT_TIMEZONE = ZoneInfo("Europe/Paris")


def booking_to_record(booking: Booking) -> dict[str, Any]:
    """Serialize Booking to a flat camelCase document with ISO strings."""
    return {
        "id": booking.id,
        "userId": booking.client_id,
        "providerKind": booking.provider_kind.value,
        "providerId": booking.provider_id,
        "stylistId": booking.provider_id if booking.provider_kind == ProviderKind.STYLIST else None,
        "salonId": booking.provider_id if booking.provider_kind == ProviderKind.SALON else None,
        "serviceId": booking.service_id,
        "date": booking.date.isoformat(),
        "startTime": booking.start_time,
        "endTime": booking.end_time,
        "status": booking.status.value,
        "createdAt": booking.created_at.isoformat(),
        "updatedAt": _iso(booking.updated_at),
        "rejectedAt": _iso(booking.rejected_at),
        "rejectionReason": booking.rejection_reason,
        "amount": booking.amount,
        "currency": booking.currency,
        "paymentStatus": booking.payment_status,
        "notes": booking.notes,
    }


def record_to_booking(data: dict[str, Any], tz: tzinfo = DEFAULT_TIMEZONE) -> Booking:
    """
    Deserialize a stored document, normalizing status and provider kind casing.

    Timestamps carrying an offset (the UTC "Z" strings of older records) are
    converted to wall clock in `tz`; naive ones are already wall clock.
    """
    if data.get("providerKind"):
        kind = ProviderKind.parse(data["providerKind"])
        provider_id = data.get("providerId") or data.get("stylistId") or data.get("salonId")
    elif data.get("stylistId"):
        kind, provider_id = ProviderKind.STYLIST, data["stylistId"]
    else:
        kind, provider_id = ProviderKind.SALON, data.get("salonId")

    amount = data.get("amount")
    return Booking(
        id=str(data["id"]),
        client_id=str(data.get("userId") or ""),
        provider_kind=kind,
        provider_id=str(provider_id or ""),
        service_id=str(data.get("serviceId") or ""),
        date=date.fromisoformat(str(data["date"])[:10]),
        start_time=str(data.get("startTime") or data.get("timeSlot") or "00:00"),
        end_time=str(data.get("endTime") or data.get("startTime") or data.get("timeSlot") or "00:00"),
        status=BookingStatus.parse(data.get("status") or BookingStatus.PENDING),
        created_at=_parse_dt(data.get("createdAt"), tz) or datetime.min,
        updated_at=_parse_dt(data.get("updatedAt"), tz),
        rejected_at=_parse_dt(data.get("rejectedAt"), tz),
        rejection_reason=data.get("rejectionReason"),
        amount=float(amount) if amount is not None else None,
        currency=data.get("currency") or "eur",
        payment_status=data.get("paymentStatus") or "pending",
        notes=data.get("notes"),
    )


# Booking attribute name -> stored document key
FIELD_KEYS: dict[str, str] = {
    "status": "status",
    "updated_at": "updatedAt",
    "rejected_at": "rejectedAt",
    "rejection_reason": "rejectionReason",
    "payment_status": "paymentStatus",
    "notes": "notes",
}


def fields_to_record(fields: dict[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {}
    for name, value in fields.items():
        key = FIELD_KEYS.get(name)
        if key is None:
            raise ValueError(f"Field {name!r} is not updatable")
        if isinstance(value, BookingStatus):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        record[key] = value
    return record


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_dt(value: Any, tz: tzinfo) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.replace(tzinfo=None)
