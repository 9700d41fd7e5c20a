"""Unit tests for :mod:`core.domain` entities."""

from __future__ import annotations

import math
from datetime import date

import pytest

from core.domain import (
    AggregatedDayValue,
    Band,
    CalendarException,
    Capacity,
    DateRange,
    DayCell,
    ExceptionKind,
    LoadLevel,
    Loading,
)

pytestmark = pytest.mark.unit


def test_date_range__with_reversed_bounds__normalizes_to_later_day() -> None:
    """Reversed ranges collapse to a single day at the later bound."""

    # Given: a range that ends before it starts
    reversed_range = DateRange(date(2024, 3, 10), date(2024, 3, 5))

    # When
    normalized = reversed_range.normalized()

    # Then
    assert not reversed_range.is_valid
    assert normalized == DateRange.single(date(2024, 3, 10))
    assert reversed_range.days == 1


def test_date_range__intersection_and_overlap__are_inclusive() -> None:
    """Touching ranges share their boundary day."""

    a = DateRange(date(2024, 3, 1), date(2024, 3, 5))
    b = DateRange(date(2024, 3, 5), date(2024, 3, 9))
    c = DateRange(date(2024, 3, 6), date(2024, 3, 9))

    assert a.overlaps(b)
    assert a.intersection(b) == DateRange.single(date(2024, 3, 5))
    assert not a.overlaps(c)
    assert a.intersection(c) is None


def test_date_range_of__with_strings__parses_bounds() -> None:
    assert DateRange.of("2024-03-01", "2024-03-03").days == 3


def test_calendar_exception__without_end_date__covers_single_day() -> None:
    holiday = CalendarException(date(2024, 3, 8), ExceptionKind.HOLIDAY, name="Women's Day")

    assert holiday.range == DateRange.single(date(2024, 3, 8))


def test_day_cell__transferred_workday__wins_over_weekend() -> None:
    """A transferred workday on Saturday is a working day."""

    saturday = DayCell(date(2024, 3, 16), 0, is_weekend=True, is_transferred_workday=True)
    holiday = DayCell(date(2024, 3, 8), 0, is_weekend=False, is_holiday=True)
    day_off = DayCell(date(2024, 3, 11), 0, is_weekend=False, is_transferred_day_off=True)

    assert saturday.is_working_day
    assert not holiday.is_working_day
    assert not day_off.is_working_day


def test_day_cell__month_start_and_day_of_month() -> None:
    cell = DayCell(date(2024, 4, 1), 28, is_weekend=False)

    assert cell.is_month_start
    assert cell.day_of_month == 1


class TestCapacity:
    """Capacity snapshots and override editing."""

    def test_overrides_are_frozen(self):
        overrides = {date(2024, 3, 4): 4.0}
        capacity = Capacity("sec-1", 8.0, overrides)

        overrides[date(2024, 3, 5)] = 1.0

        assert date(2024, 3, 5) not in capacity.date_overrides
        with pytest.raises(TypeError):
            capacity.date_overrides[date(2024, 3, 6)] = 2.0  # type: ignore[index]

    def test_string_keys_become_dates(self):
        capacity = Capacity("sec-1", 8.0, {"2024-03-04": 4})

        assert capacity.capacity_on(date(2024, 3, 4)) == 4.0
        assert capacity.capacity_on(date(2024, 3, 5)) == 8.0

    def test_with_override_returns_new_snapshot(self):
        original = Capacity("sec-1", 8.0)

        edited = original.with_override(date(2024, 3, 4), 2)

        assert original.date_overrides == {}
        assert edited.capacity_on(date(2024, 3, 4)) == 2.0

    def test_with_override_range_sets_every_day(self):
        edited = Capacity("sec-1", 8.0).with_override_range(
            date(2024, 3, 6), date(2024, 3, 4), 0
        )

        assert sorted(edited.date_overrides) == [
            date(2024, 3, 4),
            date(2024, 3, 5),
            date(2024, 3, 6),
        ]

    def test_without_override_restores_default(self):
        capacity = Capacity("sec-1", 8.0, {date(2024, 3, 4): 4.0})

        assert capacity.without_override(date(2024, 3, 4)).capacity_on(date(2024, 3, 4)) == 8.0
        assert capacity.without_override(date(2024, 3, 5)) is capacity

    def test_without_override_accepts_iso_string(self):
        capacity = Capacity("sec-1", 8.0, {date(2024, 3, 4): 4.0}).with_override("2024-03-05", 2.0)

        cleared = capacity.without_override("2024-03-04").without_override("2024-03-05")

        assert dict(cleared.date_overrides) == {}

    @pytest.mark.parametrize("value", [-1, 99.5, 150])
    def test_override_out_of_range_rejected(self, value):
        with pytest.raises(ValueError, match="between 0 and 99"):
            Capacity("sec-1", 8.0).with_override(date(2024, 3, 4), value)

    def test_negative_default_rejected(self):
        with pytest.raises(ValueError):
            Capacity("sec-1", -1.0)


def test_aggregated_day_value__percentage__is_none_for_infinite_ratio() -> None:
    over = AggregatedDayValue(date(2024, 3, 4), 0.5, 0.0, math.inf, Band.OVER, LoadLevel.OVERLOADED)
    under = AggregatedDayValue(date(2024, 3, 4), 1.25, 8.0, 0.15625, Band.UNDER, LoadLevel.LOW)

    assert over.percentage is None
    assert under.percentage == 16


@pytest.mark.parametrize(
    ("comment", "expected"),
    [("Kick-off", True), ("  ", False), (None, False), (float("nan"), False)],
)
def test_loading_has_comment__ignores_blank_and_missing_values(comment, expected) -> None:
    loading = Loading("L1", "e1", DateRange(date(2024, 3, 4), date(2024, 3, 5)), 1.0, "s1", comment)

    assert loading.has_comment is expected
