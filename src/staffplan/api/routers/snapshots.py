"""
Router for capacity snapshot endpoints.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from staffplan.api.dependencies import get_allocation_service, get_db
from staffplan.capacity import schemas
from staffplan.capacity.errors import NotFoundError, StoreError, ValidationError
from staffplan.capacity.service import AllocationService
from staffplan.platform.config import settings
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=List[schemas.SnapshotResponse])
def list_snapshots(
    project_key: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
    limit: Optional[int] = Query(None, ge=1, le=settings.SNAPSHOT_HISTORY_MAX),
):
    """
    Historical snapshots of a project, latest week first.
    """
    try:
        return service.list_snapshots(session, project_key, limit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to list snapshots", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/", response_model=schemas.SnapshotResponse, status_code=status.HTTP_201_CREATED)
def create_snapshot(
    project_key: str,
    snapshot_create: schemas.SnapshotCreate,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Capture a capacity snapshot for one week.
    Every call stores a new snapshot, even for a week that already has one.
    """
    try:
        return service.build_snapshot(
            session,
            project_key,
            snapshot_create.week_start,
            week_end=snapshot_create.week_end,
            actual_hours=snapshot_create.actual_hours,
            worklogs=snapshot_create.worklogs,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to create snapshot", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{week_start}", response_model=schemas.SnapshotResponse)
def get_snapshot(
    project_key: str,
    week_start: date,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Most recent snapshot captured for a week.
    """
    try:
        return service.get_snapshot(session, project_key, week_start)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.error("Failed to get snapshot", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{week_start}/summary", response_model=schemas.TeamCapacitySummaryResponse)
def get_snapshot_summary(
    project_key: str,
    week_start: date,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Team totals and status counts for a week's snapshot.
    """
    try:
        return service.summarize_snapshot(session, project_key, week_start)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        logger.error("Failed to summarize snapshot", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))
