"""Per-day load aggregation against section capacity.

Handles the computations behind the utilization histogram:
- Summing the rates of loadings active on each day
- Resolving per-day capacity from a single override snapshot
- Classifying every day into a band and a histogram level
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

import numpy as np
import pandas as pd

from core.domain import AggregatedDayValue, Band, Capacity, DayCell, Loading, LoadLevel

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "date",
    "total_rate",
    "capacity",
    "ratio",
    "percentage",
    "band",
    "level",
]

# Lower bounds (in percent) of the histogram levels below "overloaded".
LEVEL_THRESHOLDS: tuple[tuple[float, LoadLevel], ...] = (
    (95.0, LoadLevel.FULL),
    (70.0, LoadLevel.HIGH),
    (40.0, LoadLevel.MEDIUM),
)


def compute_ratio(total_rate: float, capacity: float) -> float:
    """Load-to-capacity ratio; 0 for an empty day and +inf for load on zero capacity."""

    if total_rate == 0:
        return 0.0
    if capacity > 0:
        return total_rate / capacity
    return math.inf


def classify_band(total_rate: float, capacity: float) -> Band:
    if total_rate == 0:
        return Band.EMPTY
    if total_rate > capacity:
        return Band.OVER
    if compute_ratio(total_rate, capacity) >= 1:
        return Band.MET
    return Band.UNDER


def classify_level(total_rate: float, capacity: float) -> LoadLevel:
    """Histogram intensity for one day."""

    band = classify_band(total_rate, capacity)
    if band is Band.EMPTY:
        return LoadLevel.EMPTY
    if band is Band.OVER:
        return LoadLevel.OVERLOADED

    percentage = compute_ratio(total_rate, capacity) * 100
    for lower_bound, level in LEVEL_THRESHOLDS:
        if percentage >= lower_bound:
            return level
    return LoadLevel.LOW


def _daily_contributions(
    cells: Sequence[DayCell], loadings: Iterable[Loading]
) -> list[list[float]]:
    origin = cells[0].date
    last = len(cells) - 1
    contributions: list[list[float]] = [[] for _ in cells]

    for loading in sorted(loadings, key=lambda item: item.id):
        if loading.rate < 0:
            logger.debug(f"Skipping loading {loading.id} with negative rate {loading.rate}")
            continue
        date_range = loading.date_range.normalized()
        first = max(0, (date_range.start - origin).days)
        final = min(last, (date_range.end - origin).days)
        for idx in range(first, final + 1):
            contributions[idx].append(float(loading.rate))

    return contributions


def aggregate(
    cells: Sequence[DayCell],
    loadings: Iterable[Loading],
    capacity: Capacity,
) -> list[AggregatedDayValue]:
    """
    Aggregate loadings per day-cell and classify each day against capacity.

    Every day is evaluated on its own: the total is the exact sum of the rates
    of loadings whose inclusive range contains the day, and the capacity is
    the day's override or the default. The override map is read once, so a
    concurrent edit produces a new Capacity snapshot instead of a torn read.

    Args:
        cells: Day cells of the row's visible window.
        loadings: Loadings of the row; order does not matter.
        capacity: Capacity snapshot of the row's section.

    Returns:
        One AggregatedDayValue per cell, in cell order.
    """
    if not cells:
        return []

    overrides = dict(capacity.date_overrides)
    contributions = _daily_contributions(cells, loadings)

    totals = np.array([math.fsum(values) for values in contributions], dtype=float)
    capacities = np.array(
        [overrides.get(cell.date, capacity.default_capacity) for cell in cells],
        dtype=float,
    )

    ratios = np.zeros_like(totals)
    positive = capacities > 0
    np.divide(totals, capacities, out=ratios, where=positive)
    ratios[(~positive) & (totals > 0)] = np.inf

    return [
        AggregatedDayValue(
            date=cell.date,
            total_rate=float(total),
            capacity=float(cap),
            ratio=float(ratio),
            band=classify_band(float(total), float(cap)),
            level=classify_level(float(total), float(cap)),
        )
        for cell, total, cap, ratio in zip(cells, totals, capacities, ratios)
    ]


def aggregation_frame(
    values: Sequence[AggregatedDayValue],
    cells: Sequence[DayCell] | None = None,
    *,
    working_days_only: bool = False,
) -> pd.DataFrame:
    """
    Return aggregated values as a DataFrame for histogram rendering or reports.

    When *cells* are given an ``is_working_day`` column is added, and
    ``working_days_only`` drops weekend and holiday rows.
    """
    columns = FRAME_COLUMNS + (["is_working_day"] if cells is not None else [])
    if not values:
        return pd.DataFrame(columns=columns)

    rows = [
        {
            "date": value.date,
            "total_rate": value.total_rate,
            "capacity": value.capacity,
            "ratio": value.ratio,
            "percentage": value.percentage,
            "band": value.band.value,
            "level": value.level.value,
        }
        for value in values
    ]
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)

    if cells is not None:
        working = {cell.date: cell.is_working_day for cell in cells}
        frame["is_working_day"] = frame["date"].map(working).fillna(True).astype(bool)
        if working_days_only:
            frame = frame[frame["is_working_day"]].reset_index(drop=True)

    return frame
