from datetime import date
from typing import List, Optional, Dict, Any
from sqlalchemy import select
from sqlalchemy.orm import Session

from staffplan.storage.models import AllocationModel
from .base import BaseRepository, store_errors


# Fields an update may touch; identity fields are fixed at creation
MUTABLE_FIELDS = ("start_date", "end_date", "allocation_percent", "notes")


class AllocationRepository(BaseRepository[AllocationModel]):
    """Repository for resource allocations via SQLAlchemy."""

    def create(self, session: Session, entity: AllocationModel) -> AllocationModel:
        with store_errors("insert allocation"):
            session.add(entity)
            # Flush to check for immediate constraints, caller commits
            session.flush()
        return entity

    def get(self, session: Session, id: str) -> Optional[AllocationModel]:
        with store_errors("load allocation"):
            return session.get(AllocationModel, id)

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[AllocationModel]:
        allocation = self.get(session, id)
        if not allocation:
            return None

        for key in MUTABLE_FIELDS:
            if key in updates:
                setattr(allocation, key, updates[key])

        with store_errors("update allocation"):
            session.flush()
        return allocation

    def delete(self, session: Session, id: str) -> bool:
        allocation = self.get(session, id)
        if not allocation:
            return False

        with store_errors("delete allocation"):
            session.delete(allocation)
            session.flush()
        return True

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[AllocationModel]:
        stmt = select(AllocationModel).order_by(
            AllocationModel.start_date, AllocationModel.display_name
        ).limit(limit).offset(offset)
        with store_errors("list allocations"):
            return list(session.scalars(stmt).all())

    def list_by_project(
        self,
        session: Session,
        project_key: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AllocationModel]:
        """
        Allocations of a project ordered by start date, then display name.

        The date filter applies only when both bounds are given, and keeps
        every allocation that overlaps the range, not only those inside it.
        """
        stmt = select(AllocationModel).where(AllocationModel.project_key == project_key)
        if start_date is not None and end_date is not None:
            stmt = stmt.where(
                AllocationModel.start_date <= end_date,
                AllocationModel.end_date >= start_date,
            )
        stmt = stmt.order_by(AllocationModel.start_date, AllocationModel.display_name)
        with store_errors("list project allocations"):
            return list(session.scalars(stmt).all())

    def find_overlapping(
        self,
        session: Session,
        project_key: str,
        start: date,
        end: date,
        account_id: Optional[str] = None,
    ) -> List[AllocationModel]:
        """Allocations overlapping [start, end], ordered by display name."""
        stmt = select(AllocationModel).where(
            AllocationModel.project_key == project_key,
            AllocationModel.start_date <= end,
            AllocationModel.end_date >= start,
        )
        if account_id:
            stmt = stmt.where(AllocationModel.account_id == account_id)
        stmt = stmt.order_by(AllocationModel.display_name, AllocationModel.start_date)
        with store_errors("find overlapping allocations"):
            return list(session.scalars(stmt).all())
