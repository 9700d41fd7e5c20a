"""Render-ready bar layout for a single timeline row.

Composes lane assignment, pixel mapping and non-working-day detection into a
flat description of every visible bar. Nothing here draws.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from core.domain import BarGeometry, DateRange, DayCell, Interval, Loading

from .calendar import non_working_runs, window_from_cells
from .geometry import map_to_pixels, range_offsets, snap_to_working_days
from .lanes import assign_lanes

logger = logging.getLogger(__name__)


class LabelMode(str, Enum):
    FULL = "full"
    COMPACT = "compact"
    MINIMAL = "minimal"
    ICON_ONLY = "icon_only"


@dataclass(frozen=True)
class BarLayout:
    """Pixel constants for bar placement; defaults match ``app_config`` defaults."""

    cell_width: float = 32
    bar_height: float = 32
    bar_gap: float = 4
    top_padding: float = 8
    bottom_padding: float = 8
    comment_height: float = 18
    comment_gap: float = 4
    base_row_height: float = 44
    label_full_width: float = 120
    label_compact_width: float = 70
    label_minimal_width: float = 35

    @classmethod
    def from_settings(cls, settings) -> BarLayout:
        return cls(
            cell_width=settings.day_cell_width,
            bar_height=settings.bar_height,
            bar_gap=settings.bar_gap,
            top_padding=settings.bar_top_padding,
            bottom_padding=settings.bar_bottom_padding,
            comment_height=settings.comment_height,
            comment_gap=settings.comment_gap,
            base_row_height=settings.base_row_height,
            label_full_width=settings.label_full_width,
            label_compact_width=settings.label_compact_width,
            label_minimal_width=settings.label_minimal_width,
        )

    @property
    def lane_pitch(self) -> float:
        return self.bar_height + self.bar_gap

    @property
    def comment_block(self) -> float:
        return self.comment_gap + self.comment_height


@dataclass(frozen=True)
class NonWorkingSegment:
    """Run of contiguous non-working day cells under a bar (inclusive indices)."""

    start_index: int
    end_index: int


@dataclass(frozen=True)
class BarPlan:
    loading: Loading
    geometry: BarGeometry
    lane: int
    top: float
    start_index: int
    end_index: int
    height: float
    non_working_segments: tuple[NonWorkingSegment, ...] = ()
    label_mode: LabelMode = LabelMode.FULL
    comment_top: float | None = None
    comment_height: float = 0.0

    @property
    def bottom(self) -> float:
        """Lowest pixel used by the bar, including its comment sub-row."""
        if self.comment_top is None:
            return self.top + self.height
        return self.comment_top + self.comment_height


@dataclass(frozen=True)
class RowPlan:
    bars: tuple[BarPlan, ...]
    lane_count: int
    row_height: float


def label_mode_for(width: float, layout: BarLayout = BarLayout()) -> LabelMode:
    """Pick how much of a bar label fits into *width* pixels."""

    if width >= layout.label_full_width:
        return LabelMode.FULL
    if width >= layout.label_compact_width:
        return LabelMode.COMPACT
    if width >= layout.label_minimal_width:
        return LabelMode.MINIMAL
    return LabelMode.ICON_ONLY


def non_working_segments(
    date_range: DateRange, cells: Sequence[DayCell]
) -> tuple[NonWorkingSegment, ...]:
    """Merged non-working runs of *cells* covered by *date_range*."""

    window = window_from_cells(cells)
    if window is None:
        return ()
    visible = date_range.normalized().intersection(window)
    if visible is None:
        return ()

    first = (visible.start - window.start).days
    last = (visible.end - window.start).days
    return tuple(NonWorkingSegment(s, e) for s, e in non_working_runs(cells, first, last))


def _display_range(loading: Loading, cells: Sequence[DayCell]) -> DateRange | None:
    if loading.is_planned:
        return snap_to_working_days(loading.date_range, cells)
    return loading.date_range.normalized()


def _lane_tops(
    lanes_with_comment: set[int], lane_count: int, layout: BarLayout
) -> list[float]:
    tops: list[float] = []
    offset = layout.top_padding
    for lane in range(lane_count):
        tops.append(offset)
        offset += layout.lane_pitch
        if lane in lanes_with_comment:
            offset += layout.comment_block
    return tops


def plan_row(
    loadings: Iterable[Loading],
    cells: Sequence[DayCell],
    window: DateRange | None = None,
    *,
    layout: BarLayout = BarLayout(),
) -> RowPlan:
    """
    Lay out every loading of a row.

    Actual loadings are mapped as is; planned ones are snapped to working-day
    boundaries first. Lanes come from :func:`assign_lanes` over the day
    offsets of the visible bars. A lane holding at least one commented bar
    reserves a comment sub-row beneath it, pushing lower lanes down.
    """
    window = window or window_from_cells(cells)
    if window is None:
        return RowPlan(bars=(), lane_count=0, row_height=layout.base_row_height)

    visible: list[tuple[Loading, DateRange, DateRange, BarGeometry]] = []
    for loading in loadings:
        display = _display_range(loading, cells)
        if display is None:
            continue
        clipped = display.intersection(window)
        geometry = map_to_pixels(display, window, cell_width=layout.cell_width)
        if clipped is None or geometry is None:
            continue
        visible.append((loading, display, clipped, geometry))

    intervals = []
    for loading, display, _, _ in visible:
        start_offset, end_offset = range_offsets(display, window)
        intervals.append(Interval(loading.id, start_offset, end_offset))
    assignment = assign_lanes(intervals)

    lanes_with_comment = {
        assignment.by_position[pos]
        for pos, (loading, _, _, _) in enumerate(visible)
        if loading.has_comment
    }
    tops = _lane_tops(lanes_with_comment, assignment.lane_count, layout)

    bars: list[BarPlan] = []
    for pos, (loading, display, clipped, geometry) in enumerate(visible):
        lane = assignment.by_position[pos]
        top = tops[lane]
        comment_top = None
        if loading.has_comment:
            comment_top = top + layout.bar_height + layout.comment_gap
        bars.append(
            BarPlan(
                loading=loading,
                geometry=geometry,
                lane=lane,
                top=top,
                start_index=(clipped.start - window.start).days,
                end_index=(clipped.end - window.start).days,
                height=layout.bar_height,
                non_working_segments=non_working_segments(display, cells),
                label_mode=label_mode_for(geometry.width, layout),
                comment_top=comment_top,
                comment_height=layout.comment_height if loading.has_comment else 0.0,
            )
        )

    max_bottom = max((bar.bottom for bar in bars), default=0.0)
    row_height = max(layout.base_row_height, max_bottom + layout.bottom_padding)
    logger.debug(f"Planned {len(bars)} bars on {assignment.lane_count} lanes")
    return RowPlan(bars=tuple(bars), lane_count=assignment.lane_count, row_height=row_height)


def plan_bars(
    loadings: Iterable[Loading],
    cells: Sequence[DayCell],
    window: DateRange | None = None,
    *,
    layout: BarLayout = BarLayout(),
) -> list[BarPlan]:
    """Flat list of bar plans for a row; see :func:`plan_row`."""

    return list(plan_row(loadings, cells, window, layout=layout).bars)
