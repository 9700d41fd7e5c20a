"""Domain entities for loading timeline computations."""

from .models import (
    MAX_CAPACITY_OVERRIDE,
    AbsenceKind,
    AbsencePeriod,
    AggregatedDayValue,
    Anchor,
    Band,
    BarGeometry,
    CalendarException,
    Capacity,
    DateRange,
    DayCell,
    DragPhase,
    DragState,
    ExceptionKind,
    Interval,
    LanePlacement,
    Loading,
    LoadLevel,
    MapMode,
)

__all__ = [
    "MAX_CAPACITY_OVERRIDE",
    "AbsenceKind",
    "AbsencePeriod",
    "AggregatedDayValue",
    "Anchor",
    "Band",
    "BarGeometry",
    "CalendarException",
    "Capacity",
    "DateRange",
    "DayCell",
    "DragPhase",
    "DragState",
    "ExceptionKind",
    "Interval",
    "LanePlacement",
    "Loading",
    "LoadLevel",
    "MapMode",
]
