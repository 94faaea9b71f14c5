from datetime import date
from typing import List, Optional, Dict, Any
from sqlalchemy import select
from sqlalchemy.orm import Session

from staffplan.storage.models import CapacitySnapshotModel
from .base import BaseRepository, store_errors


class SnapshotRepository(BaseRepository[CapacitySnapshotModel]):
    """Append-only repository for capacity snapshots."""

    def create(self, session: Session, entity: CapacitySnapshotModel) -> CapacitySnapshotModel:
        with store_errors("insert capacity snapshot"):
            session.add(entity)
            session.flush()
        return entity

    def get(self, session: Session, id: str) -> Optional[CapacitySnapshotModel]:
        with store_errors("load capacity snapshot"):
            return session.get(CapacitySnapshotModel, id)

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[CapacitySnapshotModel]:
        raise NotImplementedError("Capacity snapshots are immutable")

    def delete(self, session: Session, id: str) -> bool:
        raise NotImplementedError("Capacity snapshots are retained indefinitely")

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[CapacitySnapshotModel]:
        stmt = select(CapacitySnapshotModel).order_by(
            CapacitySnapshotModel.week_start.desc(),
            CapacitySnapshotModel.created_at.desc(),
        ).limit(limit).offset(offset)
        with store_errors("list capacity snapshots"):
            return list(session.scalars(stmt).all())

    def list_recent(self, session: Session, project_key: str, limit: int = 12) -> List[CapacitySnapshotModel]:
        """Snapshots of a project, latest week first (newest capture first within a week)."""
        stmt = select(CapacitySnapshotModel).where(
            CapacitySnapshotModel.project_key == project_key
        ).order_by(
            CapacitySnapshotModel.week_start.desc(),
            CapacitySnapshotModel.created_at.desc(),
        ).limit(limit)
        with store_errors("list recent capacity snapshots"):
            return list(session.scalars(stmt).all())

    def get_by_week(self, session: Session, project_key: str, week_start: date) -> Optional[CapacitySnapshotModel]:
        """Most recent snapshot captured for the given week, if any."""
        stmt = select(CapacitySnapshotModel).where(
            CapacitySnapshotModel.project_key == project_key,
            CapacitySnapshotModel.week_start == week_start,
        ).order_by(CapacitySnapshotModel.created_at.desc()).limit(1)
        with store_errors("load capacity snapshot by week"):
            return session.scalar(stmt)
