from datetime import date, datetime, timezone
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import (
    String, Integer, Text, JSON, Date, DateTime,
    Index, CheckConstraint, func
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

class Base(DeclarativeBase):
    pass

# Helper to support both Postgres JSONB and generic JSON (for SQLite tests)
JSON_TYPE = JSON().with_variant(JSONB, 'postgresql')
TIMESTAMP_TYPE = DateTime(timezone=True).with_variant(TIMESTAMP(timezone=True), 'postgresql')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

# --- Allocations ---

class AllocationModel(Base):
    """
    A planned assignment of one person to one project for an inclusive
    calendar-date interval at a percentage of full time.

    Several rows for the same (project_key, account_id) may overlap.
    """
    __tablename__ = "resource_allocations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_key: Mapped[str] = mapped_column(String, nullable=False, index=True)
    account_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(String)

    # Bare calendar dates, both ends inclusive
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    allocation_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, server_default=func.now(), onupdate=utcnow)

    __table_args__ = (
        CheckConstraint('allocation_percent >= 0 AND allocation_percent <= 200', name='ck_allocation_percent_range'),
        CheckConstraint('start_date <= end_date', name='ck_allocation_date_order'),
        Index('idx_allocations_project_dates', 'project_key', 'start_date', 'end_date'),
    )

# --- Capacity Snapshots ---

class CapacitySnapshotModel(Base):
    """
    Immutable per-week capture of team utilization for one project.

    team_capacity holds one row per tracked person, already rounded.
    There is no uniqueness on (project_key, week_start).
    """
    __tablename__ = "capacity_snapshots"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_key: Mapped[str] = mapped_column(String, nullable=False, index=True)
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    team_capacity: Mapped[List[Dict[str, Any]]] = mapped_column(JSON_TYPE, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, default=utcnow, server_default=func.now())

    __table_args__ = (
        Index('idx_capacity_snapshots_project_week', 'project_key', 'week_start'),
    )
