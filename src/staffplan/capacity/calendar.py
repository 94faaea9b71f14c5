"""
Work-calendar arithmetic.

All values are bare calendar dates. A datetime is reduced to its own
calendar date without any time-zone conversion, so a period edge never
shifts by a day depending on where the code runs.
"""

import math
from datetime import date, datetime, timedelta
from typing import Union

HOURS_PER_WORK_DAY = 8

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Drop the time-of-day component, keeping the calendar date as given."""
    if isinstance(value, datetime):
        return value.date()
    return value


def work_days(start: DateLike, end: DateLike) -> int:
    """
    Count Monday-Friday days in [start, end], both ends inclusive.

    Returns 0 when end is before start.
    """
    start, end = as_date(start), as_date(end)
    if end < start:
        return 0

    total = (end - start).days + 1
    full_weeks, remainder = divmod(total, 7)
    count = full_weeks * 5

    first = start.weekday()
    for offset in range(remainder):
        if (first + offset) % 7 < 5:
            count += 1
    return count


def week_start(value: DateLike) -> date:
    """Monday on or before the date; Sunday closes the previous week."""
    day = as_date(value)
    return day - timedelta(days=day.weekday())


def week_end(value: DateLike) -> date:
    """Sunday ending the week that contains the date."""
    return week_start(value) + timedelta(days=6)


def available_hours(allocation_percent: float, work_day_count: int) -> float:
    return work_day_count * (allocation_percent / 100) * HOURS_PER_WORK_DAY


def utilization_percent(actual_hours: float, available: float) -> float:
    if available == 0:
        return 0.0
    return (actual_hours / available) * 100


def round1(value: float) -> float:
    """One decimal with halves rounded up: 1.25 -> 1.3, 0.25 -> 0.3."""
    return math.floor(value * 10 + 0.5) / 10
