from .allocation_repository import AllocationRepository
from .snapshot_repository import SnapshotRepository

__all__ = ["AllocationRepository", "SnapshotRepository"]
