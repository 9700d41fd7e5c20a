"""Domain entities for the loading timeline.

Every entity is an immutable dataclass. Layout and aggregation results are
recomputed on each call and never stored back on the inputs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from types import MappingProxyType

from core.time import date_span, iter_days, to_date

MAX_CAPACITY_OVERRIDE = 99.0


class ExceptionKind(str, Enum):
    """Kind of a company calendar exception."""

    HOLIDAY = "holiday"
    TRANSFERRED_WORKDAY = "transferred_workday"
    TRANSFERRED_DAY_OFF = "transferred_day_off"


class MapMode(str, Enum):
    """Geometry mode for :func:`core.algorithms.map_to_pixels`."""

    RAW = "raw"
    SNAPPED = "snapped"


class Band(str, Enum):
    """Qualitative classification of a day's load against its capacity."""

    EMPTY = "empty"
    UNDER = "under"
    MET = "met"
    OVER = "over"


class LoadLevel(str, Enum):
    """Histogram intensity derived from the utilization percentage."""

    EMPTY = "empty"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    FULL = "full"
    OVERLOADED = "overloaded"


class Anchor(str, Enum):
    """Handle grabbed by a resize gesture."""

    START = "start"
    END = "end"


class AbsenceKind(str, Enum):
    """Kind of a grouped employee absence."""

    VACATION = "vacation"
    SICK_LEAVE = "sick_leave"
    TIME_OFF = "time_off"


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    @classmethod
    def of(cls, start: object, end: object) -> DateRange:
        """Build a range from date-like values without normalizing it."""
        return cls(to_date(start), to_date(end))

    @classmethod
    def single(cls, day: date) -> DateRange:
        return cls(day, day)

    @property
    def is_valid(self) -> bool:
        return self.start <= self.end

    @property
    def days(self) -> int:
        """Inclusive day count; a reversed range counts as a single day."""
        return max(1, date_span(self.start, self.end))

    def normalized(self) -> DateRange:
        """Return a valid range; reversed bounds collapse to the later bound."""
        if self.is_valid:
            return self
        later = max(self.start, self.end)
        return DateRange(later, later)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, other: DateRange) -> bool:
        return not (other.end < self.start or other.start > self.end)

    def intersection(self, other: DateRange) -> DateRange | None:
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start > end:
            return None
        return DateRange(start, end)

    def iter_days(self):
        return iter_days(self.start, self.end)


@dataclass(frozen=True)
class CalendarException:
    """A holiday or workday transfer, optionally spanning several days."""

    date: date
    kind: ExceptionKind
    end_date: date | None = None
    name: str | None = None

    @property
    def range(self) -> DateRange:
        return DateRange(self.date, self.end_date or self.date).normalized()


@dataclass(frozen=True)
class DayCell:
    """One calendar day of the visible window."""

    date: date
    index: int
    is_weekend: bool
    is_holiday: bool = False
    is_transferred_workday: bool = False
    is_transferred_day_off: bool = False
    is_today: bool = False
    holiday_name: str | None = None

    @property
    def is_working_day(self) -> bool:
        if self.is_transferred_workday:
            return True
        return not (self.is_weekend or self.is_holiday or self.is_transferred_day_off)

    @property
    def day_of_month(self) -> int:
        return self.date.day

    @property
    def is_month_start(self) -> bool:
        return self.date.day == 1


@dataclass(frozen=True)
class Loading:
    """An employee's fractional assignment to a section over a date range."""

    id: str
    employee_id: str
    date_range: DateRange
    rate: float
    section_id: str
    comment: str | None = None
    stage_id: str | None = None
    project_id: str | None = None
    is_planned: bool = False

    @property
    def start(self) -> date:
        return self.date_range.start

    @property
    def end(self) -> date:
        return self.date_range.end

    @property
    def has_comment(self) -> bool:
        return isinstance(self.comment, str) and bool(self.comment.strip())

    def with_range(self, date_range: DateRange) -> Loading:
        return replace(self, date_range=date_range)


@dataclass(frozen=True)
class Capacity:
    """
    Planned per-day capacity of a section.

    ``date_overrides`` is frozen into a read-only mapping on construction, so
    each instance is a consistent snapshot. Editing helpers return new
    instances instead of mutating the current one.
    """

    section_id: str
    default_capacity: float
    date_overrides: Mapping[date, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.default_capacity < 0:
            raise ValueError("default_capacity must be non-negative")
        frozen = MappingProxyType({to_date(k): float(v) for k, v in self.date_overrides.items()})
        object.__setattr__(self, "date_overrides", frozen)

    def capacity_on(self, day: date) -> float:
        return self.date_overrides.get(day, self.default_capacity)

    def with_override(self, day: date, value: float) -> Capacity:
        _check_override(value)
        overrides = dict(self.date_overrides)
        overrides[to_date(day)] = float(value)
        return replace(self, date_overrides=overrides)

    def with_override_range(self, start: date, end: date, value: float) -> Capacity:
        """Set the same override on every day between *start* and *end* inclusive (either order)."""
        _check_override(value)
        overrides = dict(self.date_overrides)
        first, last = sorted((to_date(start), to_date(end)))
        for day in DateRange(first, last).iter_days():
            overrides[day] = float(value)
        return replace(self, date_overrides=overrides)

    def without_override(self, day: date) -> Capacity:
        day = to_date(day)
        if day not in self.date_overrides:
            return self
        overrides = {k: v for k, v in self.date_overrides.items() if k != day}
        return replace(self, date_overrides=overrides)


def _check_override(value: float) -> None:
    if not 0 <= value <= MAX_CAPACITY_OVERRIDE:
        raise ValueError(
            f"Capacity override must be between 0 and {MAX_CAPACITY_OVERRIDE:g}, got {value}"
        )


@dataclass(frozen=True)
class Interval:
    """Day-cell index interval fed to the lane assigner."""

    id: str
    start_index: int
    end_index: int


@dataclass(frozen=True)
class LanePlacement:
    interval_id: str
    lane: int


@dataclass(frozen=True)
class AggregatedDayValue:
    """Aggregate load of one day compared with that day's capacity."""

    date: date
    total_rate: float
    capacity: float
    ratio: float
    band: Band
    level: LoadLevel

    @property
    def percentage(self) -> int | None:
        """Rounded utilization percentage, ``None`` when the ratio is infinite."""
        if self.ratio == float("inf"):
            return None
        return round(self.ratio * 100)


@dataclass(frozen=True)
class BarGeometry:
    """Pixel geometry of a bar relative to the left edge of the window."""

    left: float
    width: float
    clipped_left: bool = False
    clipped_right: bool = False

    @property
    def right(self) -> float:
        return self.left + self.width


@dataclass(frozen=True)
class DragState:
    """State of a resize gesture for one entity."""

    phase: DragPhase = DragPhase.IDLE
    loading_id: str | None = None
    anchor: Anchor | None = None
    original_range: DateRange | None = None
    preview_range: DateRange | None = None
    origin_x: float = 0.0
    max_distance: float = 0.0

    @property
    def is_active(self) -> bool:
        return self.phase is DragPhase.DRAGGING


@dataclass(frozen=True)
class AbsencePeriod:
    """Consecutive days of one absence kind, with the summed daily value."""

    kind: AbsenceKind
    date_range: DateRange
    total: float = 0.0

    @property
    def days(self) -> int:
        return self.date_range.days
