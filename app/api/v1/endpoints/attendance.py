"""
Attendance Endpoints - Rosters, student history and absence finalization
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import date as dt

from app.db.session import get_db
from app.services.attendance_service import AttendanceService
from app.schemas import (
    AttendanceRecord,
    AbsenceResult,
    DataResponse,
    PaginationResponse
)
from app.api.deps import require_min_role_level, STAFF_ROLE_LEVEL, ADMIN_ROLE_LEVEL
from atams.exceptions import BadRequestException

router = APIRouter()
attendance_service = AttendanceService()


def _parse_date(value: Optional[str]) -> Optional[dt]:
    if not value:
        return None
    try:
        return dt.fromisoformat(value)
    except ValueError:
        raise BadRequestException("Invalid date format. Use YYYY-MM-DD")


@router.get(
    "/schedules/{schedule_id}",
    response_model=DataResponse[List[AttendanceRecord]],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def get_schedule_attendance(
    schedule_id: str,
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format (default: today)"),
    db: Session = Depends(get_db)
):
    """
    Get attendance records for a schedule on one date

    **Authentication:**
    - Requires role level >= 10 (staff)

    **Errors:**
    - 400: Invalid date
    - 404: Schedule not found
    """
    records = attendance_service.get_schedule_attendance(db, schedule_id, _parse_date(date))

    return DataResponse(
        success=True,
        message="Attendance retrieved successfully",
        data=records
    )


@router.get(
    "/students/{student_id}/history",
    response_model=PaginationResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def get_student_history(
    student_id: str,
    limit: int = Query(50, ge=1, le=100, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db)
):
    """
    Get a student's attendance history, newest first

    **Query Parameters:**
    - limit: Max records (1-100, default 50)
    - offset: Skip records (default 0)
    """
    records = attendance_service.get_student_history(db, student_id, offset, limit)
    total = attendance_service.count_student_history(db, student_id)

    return PaginationResponse(
        success=True,
        message="Attendance history retrieved successfully",
        data=records,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )


@router.post(
    "/schedules/{schedule_id}/absences",
    response_model=DataResponse[AbsenceResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def finalize_absences(
    schedule_id: str,
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format (default: today)"),
    db: Session = Depends(get_db)
):
    """
    Mark students with no record for the schedule as absent

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Use case:**
    - Run after class ends; safe to run more than once
    """
    result = attendance_service.finalize_absences(db, schedule_id, _parse_date(date))

    return DataResponse(
        success=True,
        message=f"Marked {result.marked_count} students absent",
        data=result
    )
