"""Date-range to pixel mapping relative to the visible window."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import date, timedelta

from core.domain import BarGeometry, DateRange, DayCell, MapMode

from .calendar import generate_day_cells, index_of, is_weekend

logger = logging.getLogger(__name__)


def pixels_to_days(delta_px: float, cell_width: float) -> int:
    """Convert a horizontal pixel delta into a whole number of days (half rounds up)."""

    if cell_width <= 0:
        return 0
    return math.floor(delta_px / cell_width + 0.5)


def range_offsets(entity: DateRange, window: DateRange) -> tuple[int, int]:
    """Signed day offsets of *entity* bounds from the window start (unclamped)."""

    normalized = entity.normalized()
    return (
        (normalized.start - window.start).days,
        (normalized.end - window.start).days,
    )


def _working_lookup(cells: Sequence[DayCell]):
    def is_working(day: date) -> bool:
        idx = index_of(cells, day)
        if idx is not None:
            return cells[idx].is_working_day
        return not is_weekend(day)

    return is_working


def snap_to_working_days(entity: DateRange, cells: Sequence[DayCell]) -> DateRange | None:
    """
    Shrink *entity* to its first and last working day.

    Days inside the window use the cell flags; days outside fall back to the
    plain weekend rule. Returns None when the range holds no working day.
    """
    is_working = _working_lookup(cells)
    normalized = entity.normalized()
    start, end = normalized.start, normalized.end

    while start <= end and not is_working(start):
        start += timedelta(days=1)
    while end >= start and not is_working(end):
        end -= timedelta(days=1)

    if start > end:
        return None
    return DateRange(start, end)


def map_to_pixels(
    entity: DateRange,
    window: DateRange,
    *,
    cell_width: float,
    mode: MapMode = MapMode.RAW,
    cells: Sequence[DayCell] | None = None,
) -> BarGeometry | None:
    """
    Compute bar geometry for *entity* inside *window*.

    Args:
        entity: Date range of the bar. Reversed ranges are treated as a
            single day at the later bound.
        window: Visible window.
        cell_width: Pixel width of one day cell.
        mode: ``RAW`` maps the range as is; ``SNAPPED`` first trims it to
            working-day boundaries.
        cells: Day cells of the window, used for working-day flags in
            ``SNAPPED`` mode. Generated with weekend-only flags when omitted.

    Returns:
        BarGeometry, or None when the range does not intersect the window
        (or snapping leaves no working day).
    """
    if not window.is_valid:
        return None

    target: DateRange | None = entity.normalized()
    if mode is MapMode.SNAPPED:
        if cells is None:
            cells = generate_day_cells(window)
        target = snap_to_working_days(target, cells)
        if target is None:
            logger.debug(f"Range {entity} has no working day after snapping")
            return None

    visible = target.intersection(window)
    if visible is None:
        return None

    left_days = (visible.start - window.start).days
    return BarGeometry(
        left=cell_width * left_days,
        width=cell_width * max(1, visible.days),
        clipped_left=target.start < window.start,
        clipped_right=target.end > window.end,
    )
