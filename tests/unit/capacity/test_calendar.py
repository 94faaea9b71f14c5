"""
Unit tests for the work-calendar calculator.
"""

from datetime import date, datetime, timedelta

import pytest

from staffplan.capacity.calendar import (
    HOURS_PER_WORK_DAY,
    available_hours,
    round1,
    utilization_percent,
    week_end,
    week_start,
    work_days,
)

MONDAY = date(2026, 3, 2)
FRIDAY = date(2026, 3, 6)
SATURDAY = date(2026, 3, 7)
SUNDAY = date(2026, 3, 8)


def _count_by_walking(start: date, end: date) -> int:
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


class TestWorkDays:

    @pytest.mark.parametrize("offset", range(14))
    def test_single_day_counts_only_weekdays(self, offset):
        day = MONDAY + timedelta(days=offset)
        expected = 1 if day.weekday() < 5 else 0
        assert work_days(day, day) == expected

    def test_full_week(self):
        assert work_days(MONDAY, SUNDAY) == 5

    def test_two_weeks(self):
        assert work_days(MONDAY, SUNDAY + timedelta(days=7)) == 10

    def test_weekend_only(self):
        assert work_days(SATURDAY, SUNDAY) == 0

    def test_end_before_start_is_zero(self):
        assert work_days(FRIDAY, MONDAY) == 0

    def test_spans_year_boundary(self):
        assert work_days(date(2025, 12, 29), date(2026, 1, 4)) == 5

    def test_datetimes_use_their_own_calendar_date(self):
        late_friday = datetime(2026, 3, 6, 23, 30)
        assert work_days(late_friday, late_friday) == 1
        assert work_days(datetime(2026, 3, 7, 0, 15), SUNDAY) == 0

    def test_matches_day_by_day_count(self):
        for start_offset in range(7):
            start = MONDAY + timedelta(days=start_offset)
            for length in range(0, 25):
                end = start + timedelta(days=length)
                assert work_days(start, end) == _count_by_walking(start, end)


class TestWeekBoundaries:

    def test_monday_is_its_own_week_start(self):
        assert week_start(MONDAY) == MONDAY

    def test_sunday_belongs_to_previous_monday(self):
        assert week_start(SUNDAY) == MONDAY

    def test_week_start_crosses_year_boundary(self):
        assert week_start(date(2026, 1, 4)) == date(2025, 12, 29)

    @pytest.mark.parametrize("offset", range(-10, 10))
    def test_week_start_is_idempotent_monday(self, offset):
        day = MONDAY + timedelta(days=offset)
        start = week_start(day)
        assert start.weekday() == 0
        assert week_start(start) == start
        assert start <= day < start + timedelta(days=7)

    @pytest.mark.parametrize("offset", range(-10, 10))
    def test_week_end_is_six_days_after_start(self, offset):
        day = MONDAY + timedelta(days=offset)
        assert week_end(day) - week_start(day) == timedelta(days=6)

    def test_week_end_is_sunday(self):
        assert week_end(date(2026, 3, 4)) == SUNDAY


class TestHours:

    def test_full_time_week(self):
        assert available_hours(100, 5) == 40.0

    def test_part_time(self):
        assert available_hours(50, 5) == 20.0

    def test_over_allocation(self):
        assert available_hours(150, 1) == 1.5 * HOURS_PER_WORK_DAY

    def test_no_work_days(self):
        assert available_hours(100, 0) == 0

    def test_utilization(self):
        assert utilization_percent(30, 40) == 75.0

    def test_utilization_without_available_hours(self):
        assert utilization_percent(12, 0) == 0.0


class TestRound1:

    @pytest.mark.parametrize(
        "value, expected",
        [(1.25, 1.3), (0.25, 0.3), (2.75, 2.8), (0.05, 0.1), (12.345, 12.3), (7.92, 7.9), (40.0, 40.0), (0, 0.0)],
    )
    def test_halves_round_up(self, value, expected):
        assert round1(value) == expected
