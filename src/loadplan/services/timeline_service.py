"""Row-level facade combining bar layout and load aggregation."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

from app_config import Settings, get_settings
from core.algorithms import (
    BarLayout,
    BarPlan,
    aggregate,
    aggregation_frame,
    generate_day_cells,
    plan_row,
    window_from_cells,
)
from core.domain import AggregatedDayValue, CalendarException, Capacity, DateRange, DayCell, Loading
from core.transformations import filter_loadings, validate_loadings

from .resize_controller import ResizeController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowView:
    """Everything the presentation layer needs to draw one timeline row."""

    key: str | None
    cells: tuple[DayCell, ...]
    bars: tuple[BarPlan, ...]
    lane_count: int
    row_height: float
    days: tuple[AggregatedDayValue, ...]
    issues: tuple[str, ...] = ()

    @property
    def window(self) -> DateRange | None:
        return window_from_cells(self.cells)

    @property
    def overloaded_days(self) -> list[date]:
        return [value.date for value in self.days if value.total_rate > value.capacity]

    def histogram(self, *, working_days_only: bool = False) -> pd.DataFrame:
        return aggregation_frame(self.days, self.cells, working_days_only=working_days_only)


class TimelineService:
    """
    Build render-ready rows from loadings, capacity and a day-cell window.

    Data-integrity problems in the input are logged as warnings and returned
    on the row; they never abort a build.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        resize_controller: ResizeController | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.layout = BarLayout.from_settings(self.settings)
        self.resize_controller = resize_controller

    def build_cells(
        self,
        window: DateRange,
        exceptions: Iterable[CalendarException] = (),
        *,
        today: date | None = None,
    ) -> list[DayCell]:
        cells = generate_day_cells(window, exceptions, today=today)
        if not cells:
            logger.warning(f"Window {window} produced no day cells")
        return cells

    def build_row(
        self,
        loadings: Iterable[Loading],
        capacity: Capacity,
        cells: Sequence[DayCell],
        *,
        key: str | None = None,
    ) -> RowView:
        """
        Lay out and aggregate one row.

        When a resize controller is attached, each loading is drawn and
        aggregated with its effective range (live preview or optimistic
        update) instead of the persisted one.
        """
        loadings = list(loadings)
        _, issues = validate_loadings(loadings)
        for issue in issues:
            logger.warning(f"Row {key or capacity.section_id}: {issue}")

        if self.resize_controller is not None:
            loadings = [
                loading.with_range(
                    self.resize_controller.effective_range(loading.id, loading.date_range)
                )
                for loading in loadings
            ]

        plan = plan_row(loadings, cells, layout=self.layout)
        days = aggregate(cells, loadings, capacity)
        return RowView(
            key=key,
            cells=tuple(cells),
            bars=plan.bars,
            lane_count=plan.lane_count,
            row_height=plan.row_height,
            days=tuple(days),
            issues=tuple(issues),
        )

    def build_employee_rows(
        self,
        loadings: Iterable[Loading],
        capacity: Capacity,
        cells: Sequence[DayCell],
    ) -> list[RowView]:
        """One row per employee with loadings in the window, ordered by employee id."""

        window = window_from_cells(cells)
        if window is None:
            return []

        by_employee: dict[str, list[Loading]] = defaultdict(list)
        for loading in filter_loadings(loadings, window=window):
            by_employee[loading.employee_id].append(loading)

        return [
            self.build_row(by_employee[employee_id], capacity, cells, key=employee_id)
            for employee_id in sorted(by_employee)
        ]
