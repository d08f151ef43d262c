"""
Maintenance Endpoints - System maintenance and cleanup operations
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.cleanup_service import CleanupService
from app.schemas import DataResponse
from app.api.deps import require_min_role_level, ADMIN_ROLE_LEVEL
from pydantic import BaseModel

router = APIRouter()
cleanup_service = CleanupService()


class CleanupResult(BaseModel):
    """Cleanup operation result"""
    deleted_count: int
    message: str


@router.post(
    "/cleanup-sessions",
    response_model=DataResponse[CleanupResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(ADMIN_ROLE_LEVEL))]
)
async def cleanup_sessions(
    days_old: int = Query(30, ge=1, le=365, description="Delete sessions that expired more than this many days ago"),
    db: Session = Depends(get_db)
):
    """
    Delete long-expired kiosk sessions

    **Authorization:**
    - Requires role level >= 50 (Admin or above)

    **Parameters:**
    - days_old: Delete sessions whose expiry is older than X days (default: 30, max: 365)

    Does not expire live sessions; expiry is decided when a session is read.
    """
    deleted_count = cleanup_service.cleanup_expired_sessions(db, days_old=days_old)

    result = CleanupResult(
        deleted_count=deleted_count,
        message=f"Successfully deleted {deleted_count} kiosk sessions expired more than {days_old} days ago"
    )

    return DataResponse(
        success=True,
        message="Kiosk session cleanup completed",
        data=result
    )
