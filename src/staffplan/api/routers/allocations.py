"""
Router for resource allocation endpoints.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from staffplan.api.dependencies import get_allocation_service, get_db
from staffplan.capacity import schemas
from staffplan.capacity.errors import NotFoundError, StoreError, ValidationError
from staffplan.capacity.service import AllocationService
from staffplan.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=List[schemas.AllocationResponse])
def list_allocations(
    project_key: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
    start_date: Optional[date] = Query(None, description="Range start (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Range end (YYYY-MM-DD)"),
):
    """
    List allocations of a project.
    With both dates, only allocations overlapping the range are returned.
    """
    try:
        return service.list_allocations(session, project_key, start_date, end_date)
    except StoreError as e:
        logger.error("Failed to list allocations", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/", response_model=schemas.AllocationResponse, status_code=status.HTTP_201_CREATED)
def create_allocation(
    project_key: str,
    allocation_create: schemas.AllocationCreate,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Create a new allocation.
    """
    try:
        return service.create_allocation(session, project_key, allocation_create)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to create allocation", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/current", response_model=List[schemas.AllocationResponse])
def get_current_allocations(
    project_key: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
    week_start: date = Query(..., description="Monday of the week"),
    week_end: date = Query(..., description="Sunday of the week"),
):
    """
    Allocations overlapping one week, ordered by display name.
    """
    try:
        return service.get_current_allocations(session, project_key, week_start, week_end)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to get current allocations", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/resolve", response_model=schemas.AllocationResolutionResponse)
def resolve_allocation(
    project_key: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
    account_id: str = Query(..., min_length=1),
    start_date: date = Query(...),
    end_date: date = Query(...),
):
    """
    Weighted allocation percent and available hours of one person over a range.
    """
    try:
        return service.resolve_overlap(session, project_key, account_id, start_date, end_date)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to resolve allocations", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/utilization", response_model=schemas.UtilizationResponse)
def get_utilization(
    project_key: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
    account_id: str = Query(..., min_length=1),
    start_date: date = Query(...),
    end_date: date = Query(...),
    actual_hours: float = Query(0.0, ge=0, description="Hours logged in the range"),
):
    """
    Utilization and capacity status of one person over a range.
    """
    try:
        return service.assess_utilization(
            session, project_key, account_id, start_date, end_date, actual_hours
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to assess utilization", project_key=project_key, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{allocation_id}", response_model=schemas.AllocationResponse)
def get_allocation(
    project_key: str,
    allocation_id: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Get an allocation by ID.
    """
    try:
        return service.get_allocation(session, allocation_id, project_key=project_key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Allocation not found")
    except StoreError as e:
        logger.error("Failed to get allocation", allocation_id=allocation_id, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.patch("/{allocation_id}", response_model=schemas.AllocationResponse)
def update_allocation(
    project_key: str,
    allocation_id: str,
    allocation_update: schemas.AllocationUpdate,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Update the date range, percent or notes of an allocation.
    """
    try:
        return service.update_allocation(session, allocation_id, allocation_update, project_key=project_key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Allocation not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Failed to update allocation", allocation_id=allocation_id, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/{allocation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_allocation(
    project_key: str,
    allocation_id: str,
    service: Annotated[AllocationService, Depends(get_allocation_service)],
    session: Annotated[Session, Depends(get_db)],
):
    """
    Delete an allocation.
    """
    try:
        service.delete_allocation(session, allocation_id, project_key=project_key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Allocation not found")
    except StoreError as e:
        logger.error("Failed to delete allocation", allocation_id=allocation_id, error=str(e))
        raise HTTPException(status_code=503, detail=str(e))
    return None
