from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from salonbook.application.exceptions import ConditionFailed, NotFoundError
from salonbook.application.ports.booking_store import BookingStorePort
from salonbook.application.ports.clock import ClockPort
from salonbook.application.use_cases.lifecycle import DEFAULT_POLICY, classify, rejection_fields
from salonbook.domain.entities.booking import ACTIVE_STATUSES, Booking
from salonbook.domain.entities.lifecycle import CheckResult, LifecyclePolicy, RejectionReason, SweepResult


class RejectionScheduler:
    """Applies the lifecycle classification to stored bookings and persists rejections."""

    def __init__(
        self,
        store: BookingStorePort,
        clock: ClockPort,
        policy: LifecyclePolicy = DEFAULT_POLICY,
    ) -> None:
        self._store = store
        self._clock = clock
        self._policy = policy
        self._logger = logging.getLogger(__name__)

    def sweep(self, now: datetime | None = None) -> SweepResult:
        """
        One pass over every PENDING/CONFIRMED booking.

        A failed update on one booking is logged and counted, never fatal.
        A failure to load the booking set propagates.
        """
        now = now or self._clock.now()
        bookings = self._store.scan_by_status(ACTIVE_STATUSES)

        reasons = {reason.key: 0 for reason in RejectionReason}
        rejected = 0
        failed = 0
        for booking in bookings:
            try:
                reason = self._reject_if_due(booking, now)
            except (ConditionFailed, NotFoundError):
                # moved or deleted by another writer since the scan
                continue
            except Exception as e:
                failed += 1
                self._logger.exception(
                    "Auto-rejection update failed",
                    extra={"booking_id": booking.id, "error": str(e)},
                )
                continue
            if reason is not None:
                rejected += 1
                reasons[reason.key] += 1

        self._logger.info(
            "Rejection sweep finished",
            extra={"rejected": rejected, "total": len(bookings), "failed": failed},
        )
        return SweepResult(rejected=rejected, total=len(bookings), reasons=reasons, failed=failed)

    def check_one(self, booking_id: str, now: datetime | None = None) -> CheckResult:
        now = now or self._clock.now()
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")

        try:
            reason = self._reject_if_due(booking, now)
        except ConditionFailed:
            # a concurrent writer moved it first
            return CheckResult(rejected=False)
        if reason is None:
            return CheckResult(rejected=False)
        return CheckResult(rejected=True, reason=reason)

    def _reject_if_due(self, booking: Booking, now: datetime) -> RejectionReason | None:
        decision = classify(booking, now, self._policy)
        if not decision.should_reject or decision.reason is None:
            return None

        self._store.update_fields(
            booking.id,
            rejection_fields(decision.reason, now),
            expected_statuses=ACTIVE_STATUSES,
        )
        self._logger.info(
            "Booking automatically rejected",
            extra={"booking_id": booking.id, "provider_id": booking.provider_id, "reason": decision.reason.value},
        )
        return decision.reason


class PeriodicSweeper:
    """Supervised background loop running RejectionScheduler.sweep on a fixed interval."""

    def __init__(
        self,
        scheduler: RejectionScheduler,
        interval_seconds: float = 3600.0,
        run_on_start: bool = True,
    ) -> None:
        self._scheduler = scheduler
        self._interval_seconds = interval_seconds
        self._run_on_start = run_on_start
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._logger = logging.getLogger(__name__)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="rejection-sweeper")
        self._logger.info("Rejection sweeper started (interval=%ss)", self._interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stopping.set()
        try:
            await self._task
        finally:
            self._task = None
        self._logger.info("Rejection sweeper stopped")

    async def run_once(self) -> SweepResult | None:
        try:
            return await asyncio.to_thread(self._scheduler.sweep)
        except Exception as e:
            self._logger.exception("Rejection sweep failed", extra={"error": str(e)})
            return None

    async def _run(self) -> None:
        if self._run_on_start:
            await self.run_once()
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval_seconds)
            except asyncio.TimeoutError:
                await self.run_once()
