"""Day-by-day workload maps and grouping of consecutive days into periods."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date

from core.domain import AbsenceKind, AbsencePeriod, DateRange, Loading
from core.time import ONE_DAY, to_date


def is_active_on(loading: Loading, day: date) -> bool:
    """True when *day* lies inside the loading's inclusive range."""

    return loading.date_range.normalized().contains(to_date(day))


def daily_workloads(
    loadings: Iterable[Loading],
    window: DateRange | None = None,
) -> dict[date, float]:
    """
    Sum loading rates per calendar day.

    Negative rates are ignored. With a *window* only days inside it are
    reported. Days without any active loading are absent from the result.
    """
    contributions: dict[date, list[float]] = defaultdict(list)
    for loading in loadings:
        if loading.rate < 0:
            continue
        date_range = loading.date_range.normalized()
        if window is not None:
            clipped = date_range.intersection(window)
            if clipped is None:
                continue
            date_range = clipped
        for day in date_range.iter_days():
            contributions[day].append(float(loading.rate))

    return {day: math.fsum(values) for day, values in sorted(contributions.items())}


def group_daily_periods(
    daily_map: Mapping[date, float] | Mapping[str, float],
    kind: AbsenceKind | str,
) -> list[AbsencePeriod]:
    """
    Merge consecutive dates with a positive value into periods.

    Keys may be dates or ``YYYY-MM-DD`` strings. A gap of one or more days,
    or a day whose value is zero or negative, closes the current period.
    """
    kind = AbsenceKind(kind)
    days = sorted(
        (to_date(key), float(value)) for key, value in daily_map.items() if value and value > 0
    )

    periods: list[AbsencePeriod] = []
    start: date | None = None
    previous: date | None = None
    total = 0.0

    for day, value in days:
        if start is not None and previous is not None and day - previous == ONE_DAY:
            previous = day
            total += value
            continue
        if start is not None and previous is not None:
            periods.append(AbsencePeriod(kind, DateRange(start, previous), total))
        start, previous, total = day, day, value

    if start is not None and previous is not None:
        periods.append(AbsencePeriod(kind, DateRange(start, previous), total))

    return periods
