"""Calendar-date utilities shared across adapters and core."""

from .dates import (
    ONE_DAY,
    date_span,
    day_offset,
    format_date_key,
    iter_days,
    parse_optional_date,
    to_date,
)

__all__ = [
    "ONE_DAY",
    "to_date",
    "parse_optional_date",
    "format_date_key",
    "day_offset",
    "date_span",
    "iter_days",
]
