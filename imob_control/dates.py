"""Date parsing and range overlap helpers.

The application's canonical date representation is ``DD/MM/YYYY``. Parsing
never raises: anything that does not look like three numeric parts yields
``None`` and the caller decides what to skip.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

ONE_DAY = timedelta(days=1)

_DAY_END = time(23, 59, 59, 999000)


def parse_date(value: str | None) -> date | None:
    """Parse a ``DD/MM/YYYY`` string.

    Day and month overflow roll over into the following month/year
    (``31/02/2025`` becomes 3 March 2025, day ``0`` is the last day of the
    previous month). Results outside the supported calendar give ``None``.
    """
    if not value:
        return None
    parts = value.strip().split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
    except ValueError:
        return None

    year_offset, month_index = divmod(month - 1, 12)
    try:
        first_of_month = date(year + year_offset, month_index + 1, 1)
        return first_of_month + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def format_date(value: date) -> str:
    """Format a date as ``DD/MM/YYYY``."""
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def from_iso(value: str | None) -> str:
    """Convert a form's ``YYYY-MM-DD`` value into ``DD/MM/YYYY``."""
    if not value:
        return ""
    year, month, day = value.split("-")
    return f"{day}/{month}/{year}"


def as_day(value: date | None) -> date | None:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def normalize_day_start(value: date) -> datetime:
    """Clamp to 00:00:00.000 of the given day."""
    return datetime.combine(as_day(value), time.min)


def normalize_day_end(value: date) -> datetime:
    """Clamp to 23:59:59.999 of the given day."""
    return datetime.combine(as_day(value), _DAY_END)


def overlap_days(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> int:
    """Whole days shared by two closed intervals.

    Partial days round up, so an interval spanning any fraction of a day
    counts as one. Disjoint intervals give 0.
    """
    overlap_start = max(a_start, b_start)
    overlap_end = min(a_end, b_end)
    if overlap_start > overlap_end:
        return 0
    return math.ceil((overlap_end - overlap_start) / ONE_DAY)


def month_bounds(value: date) -> tuple[date, date]:
    """First and last day of the month containing ``value``."""
    first = value.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return first, next_first - ONE_DAY


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
