"""Pure utilities for calendar-date handling.

All timeline arithmetic happens on naive calendar dates. Time-of-day and
timezone information is dropped at the boundary by :func:`to_date`.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

ONE_DAY = timedelta(days=1)


def to_date(value: Any) -> date:
    """Coerce a date-like value (date, datetime, Timestamp or ISO string) to a date."""

    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValueError("Empty date string")
        try:
            return pd.Timestamp(stripped).date()
        except (ValueError, TypeError) as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    raise TypeError(f"Cannot convert {type(value).__name__} to date")


def parse_optional_date(value: Any) -> date | None:
    """Convert an optional date-like value, mapping None/NaN/blank to ``None``."""

    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_date(value)


def format_date_key(day: date) -> str:
    """Return the ``YYYY-MM-DD`` key used for override maps and lookups."""

    return day.isoformat()


def day_offset(origin: date, day: date) -> int:
    """Signed number of days from *origin* to *day*."""

    return (day - origin).days


def date_span(start: date, end: date) -> int:
    """Inclusive day count between *start* and *end* (0 when end < start)."""

    return max(0, (end - start).days + 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from *start* to *end* inclusive."""

    current = start
    while current <= end:
        yield current
        current += ONE_DAY
