"""
Allocation Resolver

Turns the allocation records of one person into a single weighted
allocation percentage and the total available hours for a query range.

Each allocation is clipped to the range; what remains contributes its work
days and hours. The weighted percentage is

    sum(percent * work_days) / sum(work_days)

so one allocation covering the whole range resolves to its own percent,
and periods with no work days (weekend-only clips) carry no weight.

Usage:
    resolution = resolve_overlap(allocations, date(2026, 3, 2), date(2026, 3, 8))
    resolution.weighted_allocation_percent
    resolution.total_available_hours
    resolution.periods  # per-overlap breakdown
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Iterable, List, Tuple

from .calendar import DateLike, as_date, available_hours, round1, work_days


@dataclass(frozen=True)
class OverlapPeriod:
    """The part of one allocation that falls inside the query range."""
    start_date: date
    end_date: date
    allocation_percent: int
    work_days: int
    available_hours: float


@dataclass(frozen=True)
class AllocationResolution:
    """Weighted view of a person's allocations over a range, rounded to one decimal."""
    weighted_allocation_percent: float = 0.0
    total_available_hours: float = 0.0
    periods: List[OverlapPeriod] = field(default_factory=list)


def overlap_periods(
    allocations: Iterable[Any],
    range_start: DateLike,
    range_end: DateLike,
) -> List[OverlapPeriod]:
    """
    Clip allocations to [range_start, range_end].

    Allocations are any objects exposing start_date, end_date and
    allocation_percent (ORM rows or schemas). Allocations entirely outside
    the range are dropped. Hours are left unrounded.
    """
    range_start, range_end = as_date(range_start), as_date(range_end)
    periods: List[OverlapPeriod] = []

    for allocation in allocations:
        overlap_start = max(as_date(allocation.start_date), range_start)
        overlap_end = min(as_date(allocation.end_date), range_end)
        if overlap_start > overlap_end:
            continue

        days = work_days(overlap_start, overlap_end)
        periods.append(
            OverlapPeriod(
                start_date=overlap_start,
                end_date=overlap_end,
                allocation_percent=allocation.allocation_percent,
                work_days=days,
                available_hours=available_hours(allocation.allocation_percent, days),
            )
        )

    return periods


def weighted_totals(periods: Iterable[OverlapPeriod]) -> Tuple[float, float]:
    """Unrounded (weighted allocation percent, total available hours)."""
    weighted_sum = 0.0
    total_days = 0
    total_hours = 0.0

    for period in periods:
        weighted_sum += period.allocation_percent * period.work_days
        total_days += period.work_days
        total_hours += period.available_hours

    weighted_percent = weighted_sum / total_days if total_days else 0.0
    return weighted_percent, total_hours


def resolve_overlap(
    allocations: Iterable[Any],
    range_start: DateLike,
    range_end: DateLike,
) -> AllocationResolution:
    periods = overlap_periods(allocations, range_start, range_end)
    weighted_percent, total_hours = weighted_totals(periods)

    return AllocationResolution(
        weighted_allocation_percent=round1(weighted_percent),
        total_available_hours=round1(total_hours),
        periods=[replace(p, available_hours=round1(p.available_hours)) for p in periods],
    )
