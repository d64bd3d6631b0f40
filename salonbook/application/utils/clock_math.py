from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
# day names found in stored working hours, indexed like date.weekday()
_DAY_ALIASES = {
    **{name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)},
    **{name: i for i, name in enumerate(("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"))},
}

_HHMM_RE = re.compile(r"^\s*(\d{1,2})[:hH](\d{2})?\s*$")


def parse_hhmm(value: str) -> int:
    """
    Parse a wall-clock time into minutes from midnight.

    Accepts "09:00", "9:00", "9h00" and "9h". "24:00" is allowed as end of day.
    """
    match = _HHMM_RE.match(str(value or ""))
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    if minutes > 59 or hours > 24 or (hours == 24 and minutes):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def weekday_name(on_date: date) -> str:
    return WEEKDAY_NAMES[on_date.weekday()]


def weekday_index(name: str) -> int | None:
    """Weekday number (0 = Monday) of an English or French day name, any casing."""
    return _DAY_ALIASES.get(str(name or "").strip().lower())


def combine(on_date: date, hhmm: str) -> datetime:
    # "24:00" rolls over to the next midnight
    return datetime.combine(on_date, time()) + timedelta(minutes=parse_hhmm(hhmm))
