from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .classifier import CapacityStatus

# --- Allocations ---

class AllocationBase(BaseModel):
    account_id: str = Field(..., min_length=1, description="Person identifier")
    display_name: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None
    start_date: date = Field(..., description="First day, inclusive (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last day, inclusive (YYYY-MM-DD)")
    allocation_percent: int = Field(..., description="Percent of full time, 0-200")
    notes: Optional[str] = None

class AllocationCreate(AllocationBase):
    pass

class AllocationUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    allocation_percent: Optional[int] = None
    notes: Optional[str] = None

class AllocationResponse(AllocationBase):
    id: str
    project_key: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

# --- Resolution ---

class OverlapPeriodResponse(BaseModel):
    start_date: date
    end_date: date
    allocation_percent: int
    work_days: int
    available_hours: float

    model_config = ConfigDict(from_attributes=True)

class AllocationResolutionResponse(BaseModel):
    weighted_allocation_percent: float
    total_available_hours: float
    periods: List[OverlapPeriodResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

class UtilizationResponse(BaseModel):
    account_id: str
    start_date: date
    end_date: date
    resolution: AllocationResolutionResponse
    actual_hours: float
    utilization_percent: float
    status: CapacityStatus

    model_config = ConfigDict(from_attributes=True)

# --- Worklogs ---

class WorklogEntry(BaseModel):
    """A raw time entry as supplied by the caller."""
    account_id: Optional[str] = None
    started: datetime
    time_spent_seconds: int = Field(0, ge=0)

# --- Snapshots ---

class CapacityRow(BaseModel):
    account_id: str
    display_name: str
    avatar_url: Optional[str] = None
    planned_allocation: float
    actual_hours: float
    available_hours: float
    utilization_percent: float
    status: CapacityStatus

class SnapshotCreate(BaseModel):
    week_start: date = Field(..., description="Monday of the week (YYYY-MM-DD)")
    week_end: Optional[date] = Field(None, description="Defaults to the Sunday after week_start")
    actual_hours: Dict[str, float] = Field(default_factory=dict, description="Hours logged per account id")
    worklogs: List[WorklogEntry] = Field(default_factory=list, description="Raw entries folded into actual_hours")

class SnapshotResponse(BaseModel):
    id: str
    project_key: str
    week_start: date
    team_capacity: List[CapacityRow]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class TeamCapacitySummaryResponse(BaseModel):
    member_count: int
    total_capacity_hours: float
    total_actual_hours: float
    average_utilization_percent: float
    overloaded_count: int
    at_risk_count: int
    underloaded_count: int
    optimal_count: int

    model_config = ConfigDict(from_attributes=True)
