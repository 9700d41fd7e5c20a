"""Timeline layout and aggregation algorithms."""

from .aggregation import (
    FRAME_COLUMNS,
    aggregate,
    aggregation_frame,
    classify_band,
    classify_level,
    compute_ratio,
)
from .bar_plan import (
    BarLayout,
    BarPlan,
    LabelMode,
    NonWorkingSegment,
    RowPlan,
    label_mode_for,
    non_working_segments,
    plan_bars,
    plan_row,
)
from .calendar import (
    DayInfo,
    build_calendar_map,
    create_window,
    generate_day_cells,
    index_of,
    is_weekend,
    non_working_runs,
    window_from_cells,
)
from .geometry import map_to_pixels, pixels_to_days, range_offsets, snap_to_working_days
from .lanes import LaneAssignment, assign_lanes, intervals_overlap
from .resize import (
    ApplyOptimistic,
    Cancel,
    CaptureLost,
    DiscardPreview,
    PointerDown,
    PointerMove,
    PointerUp,
    PreviewChanged,
    RequestUpdate,
    ResizeContext,
    Settle,
    SuppressClicks,
    Transition,
    preview_geometry,
    resize_range,
    transition,
)

__all__ = [
    "FRAME_COLUMNS",
    "aggregate",
    "aggregation_frame",
    "classify_band",
    "classify_level",
    "compute_ratio",
    "BarLayout",
    "BarPlan",
    "LabelMode",
    "NonWorkingSegment",
    "RowPlan",
    "label_mode_for",
    "non_working_segments",
    "plan_bars",
    "plan_row",
    "DayInfo",
    "build_calendar_map",
    "create_window",
    "generate_day_cells",
    "index_of",
    "is_weekend",
    "non_working_runs",
    "window_from_cells",
    "map_to_pixels",
    "pixels_to_days",
    "range_offsets",
    "snap_to_working_days",
    "LaneAssignment",
    "assign_lanes",
    "intervals_overlap",
    "ApplyOptimistic",
    "Cancel",
    "CaptureLost",
    "DiscardPreview",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "PreviewChanged",
    "RequestUpdate",
    "ResizeContext",
    "Settle",
    "SuppressClicks",
    "Transition",
    "preview_geometry",
    "resize_range",
    "transition",
]
