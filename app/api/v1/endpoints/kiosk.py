"""
Kiosk Endpoints - Session lifecycle and RFID scanning

Staff open and end sessions with their SSO login. The kiosk device itself is
not logged in; its session token is the only credential it presents.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.kiosk_session_service import KioskSessionService
from app.services.attendance_resolver import AttendanceResolver
from app.schemas import (
    KioskSession,
    CreateKioskSessionRequest,
    KioskSessionResponse,
    EndKioskSessionResponse,
    KioskValidationResponse,
    ScanRequest,
    AttendanceOutcome,
    DataResponse
)
from app.api.deps import require_auth, require_min_role_level, STAFF_ROLE_LEVEL

router = APIRouter()
kiosk_session_service = KioskSessionService()
attendance_resolver = AttendanceResolver()


def _to_response(session: KioskSession) -> KioskSessionResponse:
    return KioskSessionResponse(
        token=session.ks_token,
        schedule_id=session.ks_schedule_id,
        schedule_name=session.ks_schedule_name,
        status=session.ks_status,
        created_at=session.ks_created_at,
        expires_at=session.ks_expires_at
    )


@router.post(
    "/create",
    response_model=DataResponse[KioskSessionResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def create_kiosk_session(
    request: CreateKioskSessionRequest,
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Open a kiosk session for a schedule

    **Authentication:**
    - Requires role level >= 10 (staff)

    **Process:**
    1. Resolve the schedule
    2. End any session the caller still has active
    3. Issue a new token valid for KIOSK_SESSION_TTL_HOURS

    **Errors:**
    - 404: Schedule not found
    """
    session = kiosk_session_service.create(
        db,
        request.schedule_id,
        created_by=current_user["user_id"],
        created_by_name=current_user.get("full_name") or current_user.get("username")
    )

    return DataResponse(
        success=True,
        message="Kiosk session created successfully",
        data=_to_response(session)
    )


@router.get(
    "/current",
    response_model=DataResponse[KioskSessionResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def get_current_kiosk_session(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    Get the caller's live kiosk session

    **Response:**
    - Session details, or data = null when none is active
    """
    session = kiosk_session_service.get_current(db, current_user["user_id"])

    return DataResponse(
        success=True,
        message="Current kiosk session retrieved successfully" if session else "No active kiosk session",
        data=_to_response(session) if session else None
    )


@router.post(
    "/end",
    response_model=DataResponse[EndKioskSessionResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def end_kiosk_session(
    db: Session = Depends(get_db),
    current_user: dict = Depends(require_auth)
):
    """
    End the caller's active kiosk sessions

    Idempotent: ending when nothing is active returns ended_count = 0.
    """
    ended_count = kiosk_session_service.end_for_user(db, current_user["user_id"])

    return DataResponse(
        success=True,
        message="Kiosk session ended successfully" if ended_count else "No active kiosk session to end",
        data=EndKioskSessionResponse(ended_count=ended_count)
    )


@router.post(
    "/session/{token}/end",
    response_model=DataResponse[KioskSessionResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_min_role_level(STAFF_ROLE_LEVEL))]
)
async def end_kiosk_session_by_token(
    token: str,
    db: Session = Depends(get_db)
):
    """
    End a specific kiosk session

    Ending a session that is already ended or expired is a no-op.

    **Errors:**
    - 404: Unknown token
    """
    session = kiosk_session_service.end(db, token)

    return DataResponse(
        success=True,
        message="Kiosk session ended successfully",
        data=_to_response(session)
    )


@router.get(
    "/session/{token}",
    response_model=DataResponse[KioskSessionResponse],
    status_code=status.HTTP_200_OK
)
async def get_kiosk_session(
    token: str,
    db: Session = Depends(get_db)
):
    """
    Load a kiosk session by token (kiosk device, no login)

    **Errors:**
    - 404: Unknown token
    - 410: Session expired or ended
    """
    session = kiosk_session_service.get_by_token(db, token)

    return DataResponse(
        success=True,
        message="Kiosk session retrieved successfully",
        data=_to_response(session)
    )


@router.get(
    "/validate/{token}",
    response_model=DataResponse[KioskValidationResponse],
    status_code=status.HTTP_200_OK
)
async def validate_kiosk_session(
    token: str,
    db: Session = Depends(get_db)
):
    """
    Check whether a kiosk token is still live

    Always 200; inspect data.valid, data.status and data.reason.
    """
    validation = kiosk_session_service.validate(db, token)

    return DataResponse(
        success=True,
        message="Kiosk session is valid" if validation.valid else "Kiosk session is not valid",
        data=validation
    )


@router.post(
    "/scan",
    response_model=DataResponse[AttendanceOutcome],
    status_code=status.HTTP_200_OK
)
async def scan_rfid(
    request: ScanRequest,
    db: Session = Depends(get_db)
):
    """
    Record an RFID scan from a kiosk

    **Process:**
    1. Load the kiosk session (expired sessions are rejected)
    2. Resolve the badge to a student
    3. Classify against the bound schedule
    4. Write the attendance record idempotently

    **Response:**
    - duplicate = true when the scan was already recorded (safe to retry)

    **Errors:**
    - 400: Blank RFID
    - 404: Unknown session, badge or schedule
    - 409: No schedule today, or time-out without time-in
    - 410: Session expired or ended
    - 503: Store unavailable (details.retryable = true)
    """
    outcome = attendance_resolver.resolve(db, request)

    return DataResponse(
        success=True,
        message=outcome.message,
        data=outcome
    )
