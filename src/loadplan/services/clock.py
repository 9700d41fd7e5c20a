"""Caller-side clock helpers.

The engine never reads the clock; these helpers resolve "today" in the
configured zone so callers can pass it to :func:`core.algorithms.generate_day_cells`.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app_config import get_settings
from loadplan.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_zone(tz: str | None = None) -> ZoneInfo:
    name = tz or get_settings().timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            f"Unknown timezone {name!r}",
            details={"timezone": name},
        ) from exc


def today(tz: str | None = None, *, now: datetime | None = None) -> date:
    """
    Return the calendar date in *tz* (default: ``Settings.timezone``).

    ``now`` may be given as an aware datetime for reproducible results; a
    naive value is taken to be UTC.
    """
    zone = resolve_zone(tz)
    if now is None:
        return datetime.now(zone).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    return now.astimezone(zone).date()
