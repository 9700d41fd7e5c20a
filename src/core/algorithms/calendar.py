"""Day-cell generation for the visible timeline window."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from core.domain import CalendarException, DateRange, DayCell, ExceptionKind

SATURDAY = 5


@dataclass(frozen=True)
class DayInfo:
    """Calendar flags of a single date after applying exceptions."""

    is_holiday: bool = False
    is_transferred_workday: bool = False
    is_transferred_day_off: bool = False
    holiday_name: str | None = None


def create_window(start: date, days: int) -> DateRange | None:
    """Return a window of *days* days starting at *start*, or None when empty."""

    if days <= 0:
        return None
    return DateRange(start, start + timedelta(days=days - 1))


def window_from_cells(cells: Sequence[DayCell]) -> DateRange | None:
    if not cells:
        return None
    return DateRange(cells[0].date, cells[-1].date)


def build_calendar_map(exceptions: Iterable[CalendarException]) -> dict[date, DayInfo]:
    """
    Expand calendar exceptions into per-date flags.

    Multi-day exceptions are expanded day by day. Several exceptions may hit
    the same date; their flags accumulate.
    """
    flags: dict[date, dict[str, object]] = {}

    for exception in exceptions:
        for day in exception.range.iter_days():
            entry = flags.setdefault(day, {})
            if exception.kind is ExceptionKind.HOLIDAY:
                entry["is_holiday"] = True
                if exception.name:
                    entry["holiday_name"] = exception.name
            elif exception.kind is ExceptionKind.TRANSFERRED_WORKDAY:
                entry["is_transferred_workday"] = True
            elif exception.kind is ExceptionKind.TRANSFERRED_DAY_OFF:
                entry["is_transferred_day_off"] = True

    return {day: DayInfo(**entry) for day, entry in flags.items()}  # type: ignore[arg-type]


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def generate_day_cells(
    window: DateRange | None,
    exceptions: Iterable[CalendarException] = (),
    *,
    today: date | None = None,
) -> list[DayCell]:
    """
    Build the ordered, contiguous day-cell sequence for *window*.

    A day is non-working on Saturday/Sunday or when flagged as a holiday or a
    transferred day off; a transferred workday is always working. ``today``
    must be supplied by the caller; no clock is read here.

    Args:
        window: Visible date window (inclusive). ``None`` or a reversed window
            yields an empty list.
        exceptions: Holidays and workday transfers.
        today: Current date used for the ``is_today`` flag.

    Returns:
        One DayCell per calendar day of the window, indexed from 0.
    """
    if window is None or not window.is_valid:
        return []

    calendar_map = build_calendar_map(exceptions)
    default_info = DayInfo()

    cells: list[DayCell] = []
    for index, day in enumerate(window.iter_days()):
        info = calendar_map.get(day, default_info)
        cells.append(
            DayCell(
                date=day,
                index=index,
                is_weekend=is_weekend(day),
                is_holiday=info.is_holiday,
                is_transferred_workday=info.is_transferred_workday,
                is_transferred_day_off=info.is_transferred_day_off,
                is_today=today is not None and day == today,
                holiday_name=info.holiday_name,
            )
        )
    return cells


def index_of(cells: Sequence[DayCell], day: date) -> int | None:
    """Index of *day* in a contiguous cell sequence, or None when outside."""

    if not cells:
        return None
    offset = (day - cells[0].date).days
    if 0 <= offset < len(cells):
        return offset
    return None


def non_working_runs(
    cells: Sequence[DayCell], start_index: int, end_index: int
) -> list[tuple[int, int]]:
    """Merge contiguous non-working cells within [start_index, end_index] into runs."""

    runs: list[tuple[int, int]] = []
    run_start: int | None = None
    lo = max(0, start_index)
    hi = min(len(cells) - 1, end_index)

    for idx in range(lo, hi + 1):
        if not cells[idx].is_working_day:
            if run_start is None:
                run_start = idx
        elif run_start is not None:
            runs.append((run_start, idx - 1))
            run_start = None

    if run_start is not None:
        runs.append((run_start, hi))
    return runs
