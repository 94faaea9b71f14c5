"""Capacity Allocation & Utilization Engine."""

from .calendar import HOURS_PER_WORK_DAY, available_hours, week_end, week_start, work_days
from .classifier import CapacityStatus, classify
from .errors import CapacityError, NotFoundError, StoreError, ValidationError
from .resolver import AllocationResolution, OverlapPeriod, resolve_overlap

__all__ = [
    "HOURS_PER_WORK_DAY",
    "AllocationResolution",
    "CapacityError",
    "CapacityStatus",
    "NotFoundError",
    "OverlapPeriod",
    "StoreError",
    "ValidationError",
    "available_hours",
    "classify",
    "resolve_overlap",
    "week_end",
    "week_start",
    "work_days",
]
