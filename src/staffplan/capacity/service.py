"""
Allocation Service - the operations exposed to controllers.

Sits between the HTTP layer and the repositories:
1. Validates allocation percent and date order before any write
2. Resolves weighted allocations and builds capacity snapshots
3. Raises ValidationError / NotFoundError; StoreError passes through untouched
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional
from uuid import uuid4
import logging

from sqlalchemy.orm import Session

from staffplan.platform.config import settings
from staffplan.storage.models import AllocationModel, CapacitySnapshotModel
from staffplan.storage.repositories.allocation_repository import AllocationRepository
from staffplan.storage.repositories.snapshot_repository import SnapshotRepository

from . import calendar, resolver
from .classifier import CapacityStatus, classify
from .errors import NotFoundError, ValidationError
from .schemas import AllocationCreate, AllocationUpdate, WorklogEntry
from .snapshots import SnapshotBuilder
from .summary import TeamCapacitySummary, summarize_team
from .worklogs import hours_by_account, merge_hours

logger = logging.getLogger(__name__)

MIN_ALLOCATION_PERCENT = 0
MAX_ALLOCATION_PERCENT = 200

# Columns that cannot be cleared with an explicit null
_REQUIRED_UPDATE_FIELDS = ("start_date", "end_date", "allocation_percent")


def validate_allocation_percent(value: int) -> None:
    if value < MIN_ALLOCATION_PERCENT or value > MAX_ALLOCATION_PERCENT:
        raise ValidationError(
            f"Allocation percent must be between {MIN_ALLOCATION_PERCENT} and {MAX_ALLOCATION_PERCENT}"
        )


def validate_date_order(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValidationError("Start date must be before or equal to end date")


@dataclass(frozen=True)
class UtilizationAssessment:
    """Weighted allocation of one person over a range, reconciled with logged hours."""
    account_id: str
    start_date: date
    end_date: date
    resolution: resolver.AllocationResolution
    actual_hours: float
    utilization_percent: float
    status: CapacityStatus


class AllocationService:
    def __init__(
        self,
        allocation_repo: AllocationRepository,
        snapshot_repo: SnapshotRepository,
        snapshot_builder: Optional[SnapshotBuilder] = None,
    ):
        self.allocation_repo = allocation_repo
        self.snapshot_repo = snapshot_repo
        self.snapshot_builder = snapshot_builder or SnapshotBuilder(allocation_repo, snapshot_repo)

    # --- Allocations ---

    def create_allocation(self, session: Session, project_key: str, data: AllocationCreate) -> AllocationModel:
        validate_allocation_percent(data.allocation_percent)
        validate_date_order(data.start_date, data.end_date)

        allocation = AllocationModel(
            id=str(uuid4()),
            project_key=project_key,
            account_id=data.account_id,
            display_name=data.display_name,
            avatar_url=data.avatar_url,
            start_date=data.start_date,
            end_date=data.end_date,
            allocation_percent=data.allocation_percent,
            notes=data.notes,
        )
        created = self.allocation_repo.create(session, allocation)
        logger.info(f"Created allocation {created.id} for {data.account_id} on {project_key}")
        return created

    def get_allocation(
        self, session: Session, allocation_id: str, project_key: Optional[str] = None
    ) -> AllocationModel:
        """With a project key, an allocation of another project counts as missing."""
        allocation = self.allocation_repo.get(session, allocation_id)
        if not allocation or (project_key is not None and allocation.project_key != project_key):
            raise NotFoundError(f"Allocation {allocation_id} not found")
        return allocation

    def update_allocation(
        self,
        session: Session,
        allocation_id: str,
        data: AllocationUpdate,
        project_key: Optional[str] = None,
    ) -> AllocationModel:
        updates = data.model_dump(exclude_unset=True)
        for key in _REQUIRED_UPDATE_FIELDS:
            if key in updates and updates[key] is None:
                raise ValidationError(f"{key} cannot be null")

        if "allocation_percent" in updates:
            validate_allocation_percent(updates["allocation_percent"])

        existing = self.get_allocation(session, allocation_id, project_key)
        if not updates:
            return existing

        validate_date_order(
            updates.get("start_date", existing.start_date),
            updates.get("end_date", existing.end_date),
        )

        updated = self.allocation_repo.update(session, allocation_id, updates)
        if not updated:
            raise NotFoundError(f"Allocation {allocation_id} not found")
        logger.info(f"Updated allocation {allocation_id}: {sorted(updates)}")
        return updated

    def delete_allocation(self, session: Session, allocation_id: str, project_key: Optional[str] = None) -> None:
        if project_key is not None:
            self.get_allocation(session, allocation_id, project_key)
        if not self.allocation_repo.delete(session, allocation_id):
            raise NotFoundError(f"Allocation {allocation_id} not found")
        logger.info(f"Deleted allocation {allocation_id}")

    def list_allocations(
        self,
        session: Session,
        project_key: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AllocationModel]:
        return self.allocation_repo.list_by_project(session, project_key, start_date, end_date)

    def get_current_allocations(
        self, session: Session, project_key: str, week_start: date, week_end: date
    ) -> List[AllocationModel]:
        """Allocations overlapping the week, ordered by display name."""
        validate_date_order(week_start, week_end)
        return self.allocation_repo.find_overlapping(session, project_key, week_start, week_end)

    # --- Resolution ---

    def resolve_overlap(
        self,
        session: Session,
        project_key: str,
        account_id: str,
        start_date: date,
        end_date: date,
    ) -> resolver.AllocationResolution:
        validate_date_order(start_date, end_date)
        allocations = self.allocation_repo.find_overlapping(
            session, project_key, start_date, end_date, account_id=account_id
        )
        return resolver.resolve_overlap(allocations, start_date, end_date)

    def assess_utilization(
        self,
        session: Session,
        project_key: str,
        account_id: str,
        start_date: date,
        end_date: date,
        actual_hours: float = 0.0,
    ) -> UtilizationAssessment:
        validate_date_order(start_date, end_date)
        allocations = self.allocation_repo.find_overlapping(
            session, project_key, start_date, end_date, account_id=account_id
        )
        periods = resolver.overlap_periods(allocations, start_date, end_date)
        planned, available = resolver.weighted_totals(periods)
        utilization = calendar.utilization_percent(actual_hours, available)

        return UtilizationAssessment(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            resolution=resolver.resolve_overlap(allocations, start_date, end_date),
            actual_hours=calendar.round1(actual_hours),
            utilization_percent=calendar.round1(utilization),
            status=classify(utilization, planned),
        )

    # --- Snapshots ---

    def build_snapshot(
        self,
        session: Session,
        project_key: str,
        week_start: date,
        week_end: Optional[date] = None,
        actual_hours: Optional[Mapping[str, float]] = None,
        worklogs: Optional[Iterable[WorklogEntry]] = None,
    ) -> CapacitySnapshotModel:
        if week_end is None:
            week_end = calendar.week_end(week_start)

        hours: Dict[str, float] = dict(actual_hours or {})
        if worklogs:
            hours = merge_hours(hours, hours_by_account(worklogs, week_start, week_end))

        snapshot = self.snapshot_builder.build(session, project_key, week_start, week_end, hours)
        logger.info(
            f"Captured capacity snapshot {snapshot.id} for {project_key} week {week_start} "
            f"({len(snapshot.team_capacity)} people)"
        )
        return snapshot

    def list_snapshots(
        self, session: Session, project_key: str, limit: Optional[int] = None
    ) -> List[CapacitySnapshotModel]:
        if limit is None:
            limit = settings.SNAPSHOT_HISTORY_LIMIT
        if limit < 1:
            raise ValidationError("Snapshot limit must be at least 1")
        return self.snapshot_repo.list_recent(session, project_key, limit)

    def get_snapshot(self, session: Session, project_key: str, week_start: date) -> CapacitySnapshotModel:
        snapshot = self.snapshot_repo.get_by_week(session, project_key, week_start)
        if not snapshot:
            raise NotFoundError(f"No capacity snapshot for {project_key} week {week_start}")
        return snapshot

    def summarize_snapshot(self, session: Session, project_key: str, week_start: date) -> TeamCapacitySummary:
        return summarize_team(self.get_snapshot(session, project_key, week_start).team_capacity)
