"""
Tests for the auto-rejection sweep and the single-booking check.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta

import pytest

from salonbook.application.exceptions import ConditionFailed, NotFoundError, StoreFailure
from salonbook.application.use_cases.rejection_scheduler import PeriodicSweeper, RejectionScheduler
from salonbook.domain.entities.booking import BookingStatus
from salonbook.domain.entities.lifecycle import RejectionReason
from salonbook.infrastructure.clock import FixedClock
from salonbook.infrastructure.store.memory_store import MemoryBookingStore

NOW = datetime(2026, 10, 18, 12, 0)


class FlakyStore(MemoryBookingStore):
    """Memory store whose conditional update fails for chosen ids."""

    def __init__(self, failures: dict[str, Exception]) -> None:
        super().__init__()
        self._failures = failures

    def update_fields(self, booking_id, fields, expected_statuses=None):
        if booking_id in self._failures:
            raise self._failures[booking_id]
        return super().update_fields(booking_id, fields, expected_statuses)


class UnreachableStore(MemoryBookingStore):
    def scan_by_status(self, statuses):
        raise StoreFailure("table unreachable")


def _seed_mixed(store, make_booking):
    store.put(make_booking(id="overdue", created_at=NOW - timedelta(hours=49)))
    store.put(make_booking(id="yesterday", status=BookingStatus.CONFIRMED, date=date(2026, 10, 17)))
    store.put(make_booking(id="this-morning", date=NOW.date(), start_time="09:00", end_time="10:00"))
    store.put(make_booking(id="fresh"))
    store.put(make_booking(id="done", status=BookingStatus.COMPLETED, date=date(2026, 10, 1)))


def test_sweep_rejects_stale_bookings(store, clock, make_booking):
    _seed_mixed(store, make_booking)

    result = RejectionScheduler(store, clock).sweep()

    assert result.rejected == 3
    assert result.total == 4
    assert result.failed == 0
    assert result.reasons == {"datePassed": 1, "timePassed": 1, "overdue": 1}

    overdue = store.get("overdue")
    assert overdue.status == BookingStatus.REJECTED
    assert overdue.rejection_reason == "no response within 48h"
    assert overdue.rejected_at == NOW
    assert store.get("yesterday").rejection_reason == "date passed"
    assert store.get("fresh").status == BookingStatus.PENDING
    assert store.get("done").status == BookingStatus.COMPLETED


def test_second_sweep_is_a_no_op(store, clock, make_booking):
    _seed_mixed(store, make_booking)
    scheduler = RejectionScheduler(store, clock)
    scheduler.sweep()

    result = scheduler.sweep()

    assert result.rejected == 0
    assert result.total == 1
    assert result.reasons == {"datePassed": 0, "timePassed": 0, "overdue": 0}


def test_one_failed_update_does_not_stop_the_sweep(clock, make_booking):
    store = FlakyStore({"overdue": StoreFailure("throttled")})
    _seed_mixed(store, make_booking)

    result = RejectionScheduler(store, clock).sweep()

    assert result.failed == 1
    assert result.rejected == 2
    assert store.get("overdue").status == BookingStatus.PENDING
    assert store.get("yesterday").status == BookingStatus.REJECTED


def test_lost_race_is_not_counted(clock, make_booking):
    store = FlakyStore({"overdue": ConditionFailed("confirmed meanwhile")})
    _seed_mixed(store, make_booking)

    result = RejectionScheduler(store, clock).sweep()

    assert result.rejected == 2
    assert result.failed == 0
    assert result.reasons["overdue"] == 0


def test_unreadable_store_fails_the_sweep(clock):
    with pytest.raises(StoreFailure):
        RejectionScheduler(UnreachableStore(), clock).sweep()


def test_check_one(store, clock, make_booking):
    store.put(make_booking(id="overdue", created_at=NOW - timedelta(hours=49)))
    store.put(make_booking(id="fresh"))
    scheduler = RejectionScheduler(store, clock)

    assert scheduler.check_one("fresh").rejected is False

    result = scheduler.check_one("overdue")
    assert result.rejected is True
    assert result.reason == RejectionReason.OVERDUE

    # already rejected: nothing left to do
    assert scheduler.check_one("overdue").rejected is False


def test_check_one_unknown_booking(store, clock):
    with pytest.raises(NotFoundError):
        RejectionScheduler(store, clock).check_one("missing")


def test_check_one_follows_the_clock(store, make_booking):
    clock = FixedClock(NOW)
    store.put(make_booking(id="b", created_at=NOW))
    scheduler = RejectionScheduler(store, clock)

    assert scheduler.check_one("b").rejected is False
    clock.set(NOW + timedelta(hours=20))
    assert scheduler.check_one("b").rejected is False
    # Monday 10:00 has started
    clock.set(datetime(2026, 10, 19, 10, 5))
    assert scheduler.check_one("b").reason == RejectionReason.TIME_PASSED


def test_periodic_sweeper_runs_on_start_and_stops(store, clock, make_booking):
    store.put(make_booking(id="overdue", created_at=NOW - timedelta(hours=49)))
    sweeper = PeriodicSweeper(RejectionScheduler(store, clock), interval_seconds=3600, run_on_start=True)

    async def scenario():
        sweeper.start()
        assert sweeper.running
        await sweeper.stop()

    asyncio.run(scenario())

    assert sweeper.running is False
    assert store.get("overdue").status == BookingStatus.REJECTED


def test_periodic_sweeper_survives_a_failed_run(clock):
    sweeper = PeriodicSweeper(RejectionScheduler(UnreachableStore(), clock), interval_seconds=3600)

    assert asyncio.run(sweeper.run_once()) is None
