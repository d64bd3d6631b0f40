from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from salonbook.application.ports.clock import ClockPort


class SystemClock(ClockPort):
    def __init__(self, timezone: str = "Europe/Paris") -> None:
        self._tz = _safe_timezone(timezone)

    def now(self) -> datetime:
        # naive wall clock in the business timezone
        return datetime.now(self._tz).replace(tzinfo=None, microsecond=0)


class FixedClock(ClockPort):
    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")
