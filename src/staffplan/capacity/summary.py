"""Aggregate team figures over the rows of a capacity snapshot."""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .calendar import round1
from .classifier import CapacityStatus


@dataclass(frozen=True)
class TeamCapacitySummary:
    member_count: int = 0
    total_capacity_hours: float = 0.0
    total_actual_hours: float = 0.0
    average_utilization_percent: float = 0.0
    overloaded_count: int = 0
    at_risk_count: int = 0
    underloaded_count: int = 0
    optimal_count: int = 0


def summarize_team(rows: Iterable[Mapping[str, Any]]) -> TeamCapacitySummary:
    """
    Totals and status counts for snapshot rows.

    Average utilization is the plain mean of the per-person percentages,
    0 for an empty team.
    """
    rows = list(rows)
    if not rows:
        return TeamCapacitySummary()

    counts = {status: 0 for status in CapacityStatus}
    for row in rows:
        counts[CapacityStatus(row["status"])] += 1

    return TeamCapacitySummary(
        member_count=len(rows),
        total_capacity_hours=round1(sum(row["available_hours"] for row in rows)),
        total_actual_hours=round1(sum(row["actual_hours"] for row in rows)),
        average_utilization_percent=round1(
            sum(row["utilization_percent"] for row in rows) / len(rows)
        ),
        overloaded_count=counts[CapacityStatus.OVERLOADED],
        at_risk_count=counts[CapacityStatus.AT_RISK],
        underloaded_count=counts[CapacityStatus.UNDERLOADED],
        optimal_count=counts[CapacityStatus.OPTIMAL],
    )
