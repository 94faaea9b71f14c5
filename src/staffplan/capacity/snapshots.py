"""
Snapshot Builder

Assembles one week of team capacity for a project and stores it as a new,
immutable snapshot.

For every person with an allocation overlapping the week:
- their allocations are resolved over the week with the weighted resolver
- actual hours come from the caller's mapping (0 when absent)
- utilization = actual / available * 100 (0 when nothing is available)
- the status is classified from the unrounded figures
- numeric fields are rounded to one decimal before storage

Usage:
    builder = SnapshotBuilder(AllocationRepository(), SnapshotRepository())
    snapshot = builder.build(session, "PROJ", date(2026, 3, 2), date(2026, 3, 8), {"acc-1": 32.5})
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping
from uuid import uuid4

from sqlalchemy.orm import Session

from staffplan.storage.models import CapacitySnapshotModel, utcnow
from staffplan.storage.repositories.allocation_repository import AllocationRepository
from staffplan.storage.repositories.snapshot_repository import SnapshotRepository

from .calendar import round1, utilization_percent
from .classifier import classify
from .errors import ValidationError
from .resolver import overlap_periods, weighted_totals
from .schemas import CapacityRow


def build_capacity_rows(
    allocations: Iterable[Any],
    week_start: date,
    week_end: date,
    actual_hours: Mapping[str, float],
) -> List[CapacityRow]:
    """One row per account, in the order accounts first appear in allocations."""
    by_account: Dict[str, List[Any]] = {}
    for allocation in allocations:
        by_account.setdefault(allocation.account_id, []).append(allocation)

    rows: List[CapacityRow] = []
    for account_id, person_allocations in by_account.items():
        first = person_allocations[0]
        periods = overlap_periods(person_allocations, week_start, week_end)
        planned, available = weighted_totals(periods)

        actual = float(actual_hours.get(account_id) or 0)
        utilization = utilization_percent(actual, available)

        rows.append(
            CapacityRow(
                account_id=account_id,
                display_name=first.display_name,
                avatar_url=first.avatar_url,
                planned_allocation=round1(planned),
                actual_hours=round1(actual),
                available_hours=round1(available),
                utilization_percent=round1(utilization),
                status=classify(utilization, planned),
            )
        )

    return rows


class SnapshotBuilder:
    """Builds and persists capacity snapshots; never deduplicates by week."""

    def __init__(self, allocation_repo: AllocationRepository, snapshot_repo: SnapshotRepository):
        self.allocation_repo = allocation_repo
        self.snapshot_repo = snapshot_repo

    def build(
        self,
        session: Session,
        project_key: str,
        week_start: date,
        week_end: date,
        actual_hours: Mapping[str, float],
    ) -> CapacitySnapshotModel:
        if week_start > week_end:
            raise ValidationError("Week start must be before or equal to week end")

        allocations = self.allocation_repo.find_overlapping(session, project_key, week_start, week_end)
        rows = build_capacity_rows(allocations, week_start, week_end, actual_hours)

        # Single insert: the snapshot is stored whole or not at all
        snapshot = CapacitySnapshotModel(
            id=str(uuid4()),
            project_key=project_key,
            week_start=week_start,
            team_capacity=[row.model_dump(mode="json") for row in rows],
            created_at=utcnow(),
        )
        return self.snapshot_repo.create(session, snapshot)
