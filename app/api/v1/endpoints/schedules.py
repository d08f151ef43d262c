"""
Schedule Endpoints - Schedule directory reads for kiosk setup
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.db.session import get_db
from app.services.schedule_service import ScheduleService
from app.schemas import Schedule, DataResponse, PaginationResponse
from app.api.deps import require_min_role_level, STAFF_ROLE_LEVEL

router = APIRouter()
schedule_service = ScheduleService()


@router.get(
    "",
    response_model=PaginationResponse[Schedule],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def list_schedules(
    day: Optional[str] = Query(None, description="Day of week, e.g. Monday"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db)
):
    """
    List schedules a kiosk can be bound to

    **Query Parameters:**
    - day: Day of week filter (case-insensitive)
    - limit: Max records (1-1000, default 100)
    - offset: Skip records (default 0)
    """
    schedules = schedule_service.get_schedules(db, day, offset, limit)
    total = schedule_service.count_schedules(db, day)

    return PaginationResponse(
        success=True,
        message="Schedules retrieved successfully",
        data=schedules,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )


@router.get(
    "/{schedule_id}",
    response_model=DataResponse[Schedule],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def get_schedule(
    schedule_id: str,
    db: Session = Depends(get_db)
):
    schedule = schedule_service.get_schedule(db, schedule_id)

    return DataResponse(
        success=True,
        message="Schedule retrieved successfully",
        data=schedule
    )
