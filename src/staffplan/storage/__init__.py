"""StaffPlan Storage Layer - SQLAlchemy models, Postgres adapter and repositories."""

from .base import StorageAdapter
from .postgres_adapter import PostgresAdapter, PostgresConfig
from .models import (
    AllocationModel,
    Base,
    CapacitySnapshotModel,
)

__all__ = [
    "StorageAdapter",
    "PostgresAdapter",
    "PostgresConfig",
    "Base",
    "AllocationModel",
    "CapacitySnapshotModel",
]
