"""
Booking lifecycle decisions.

Everything here is a pure function of (booking, now, policy): nothing touches
the store and nothing raises. Persisting a transition is the scheduler's job.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

from salonbook.application.utils.clock_math import combine
from salonbook.domain.entities.booking import ACTIVE_STATUSES, Booking, BookingStatus
from salonbook.domain.entities.lifecycle import (
    Classification,
    Countdown,
    CountdownStats,
    LifecyclePolicy,
    RejectionReason,
)

DEFAULT_POLICY = LifecyclePolicy()

_NO_REJECTION = Classification(should_reject=False)


def classify(booking: Booking, now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY) -> Classification:
    """First match wins: date passed, then time passed, then overdue."""
    if booking.status not in ACTIVE_STATUSES:
        return _NO_REJECTION

    if booking.date < now.date():
        return Classification(should_reject=True, reason=RejectionReason.DATE_PASSED)

    try:
        starts_at = combine(booking.date, booking.start_time)
    except ValueError:
        starts_at = None
    if starts_at is not None and starts_at < now:
        return Classification(should_reject=True, reason=RejectionReason.TIME_PASSED)

    if booking.status == BookingStatus.PENDING and is_overdue(booking, now, policy):
        return Classification(should_reject=True, reason=RejectionReason.OVERDUE)

    return _NO_REJECTION


def is_overdue(booking: Booking, now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY) -> bool:
    return now - booking.created_at > timedelta(hours=policy.pending_response_hours)


def rejection_fields(reason: RejectionReason, now: datetime) -> dict[str, Any]:
    """Field-scoped delta for the transition to REJECTED."""
    return {
        "status": BookingStatus.REJECTED,
        "rejected_at": now,
        "rejection_reason": reason.value,
        "updated_at": now,
    }


def time_until_auto_rejection(
    booking: Booking, now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY
) -> timedelta:
    remaining = timedelta(hours=policy.pending_response_hours) - (now - booking.created_at)
    return max(timedelta(0), remaining)


def countdown(booking: Booking, now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY) -> Countdown | None:
    if booking.status != BookingStatus.PENDING:
        return None

    remaining = time_until_auto_rejection(booking, now, policy)
    total_seconds = int(remaining.total_seconds())
    if total_seconds <= 0:
        return Countdown(
            time_remaining_seconds=0,
            days=0,
            hours=0,
            minutes=0,
            expired=True,
            will_expire_soon=True,
        )

    days, rest = divmod(total_seconds, 86400)
    hours, rest = divmod(rest, 3600)
    return Countdown(
        time_remaining_seconds=total_seconds,
        days=days,
        hours=hours,
        minutes=rest // 60,
        expired=False,
        will_expire_soon=remaining < timedelta(hours=policy.expire_soon_hours),
    )


def countdown_stats(
    bookings: Iterable[Booking], now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY
) -> CountdownStats:
    pending = [b for b in bookings if b.status == BookingStatus.PENDING]
    if not pending:
        return CountdownStats()

    critical_after = timedelta(hours=policy.critical_hours)
    expiring_soon = 0
    critical = 0
    total_remaining = 0
    for booking in pending:
        view = countdown(booking, now, policy)
        if view is None:
            continue
        if view.will_expire_soon:
            expiring_soon += 1
        if timedelta(seconds=view.time_remaining_seconds) < critical_after:
            critical += 1
        total_remaining += view.time_remaining_seconds

    return CountdownStats(
        total=len(pending),
        expiring_soon=expiring_soon,
        critical=critical,
        average_time_remaining=total_remaining // len(pending),
    )


def can_be_cancelled(booking: Booking, now: datetime, policy: LifecyclePolicy = DEFAULT_POLICY) -> bool:
    if booking.status not in ACTIVE_STATUSES:
        return False
    try:
        starts_at = combine(booking.date, booking.start_time)
    except ValueError:
        return False
    return starts_at - now > timedelta(hours=policy.cancellation_notice_hours)
