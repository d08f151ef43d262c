"""
Kiosk Exceptions - Typed failures surfaced to kiosk clients

Every error carries details.code so the kiosk UI can map it to a distinct
message, and details.retryable so it knows whether to resubmit the same scan.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from fastapi import status
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from atams.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
)
from atams.logging import get_logger

logger = get_logger(__name__)


def _details(code: str, retryable: bool = False, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    details = {"code": code, "retryable": retryable}
    if extra:
        details.update(extra)
    return details


class SessionNotFoundException(NotFoundException):
    """404 - No kiosk session exists for the token"""

    def __init__(self, message: str = "Kiosk session not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("SESSION_NOT_FOUND", extra=details))


class SessionExpiredException(AppException):
    """410 - Kiosk session is past its expiry"""

    code = "SESSION_EXPIRED"

    def __init__(self, message: str = "Kiosk session has expired", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_410_GONE, _details(self.code, extra=details))


class SessionEndedException(SessionExpiredException):
    """410 - Kiosk session was ended by staff"""

    code = "SESSION_ENDED"

    def __init__(self, message: str = "Kiosk session has ended", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ScheduleNotFoundException(NotFoundException):
    """404 - Schedule does not resolve in the schedule directory"""

    def __init__(self, message: str = "Schedule not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("SCHEDULE_NOT_FOUND", extra=details))


class NoScheduleTodayException(ConflictException):
    """409 - The kiosk's bound schedule does not run today"""

    def __init__(self, message: str = "No schedule for today", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("NO_SCHEDULE_TODAY", extra=details))


class UnknownBadgeException(NotFoundException):
    """404 - No student is registered for the scanned RFID"""

    def __init__(self, message: str = "No registered student found for this RFID", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("UNKNOWN_BADGE", extra=details))


class WrongSectionException(ConflictException):
    """409 - Student is not enrolled in the section of the kiosk's schedule"""

    def __init__(self, message: str = "Student is not assigned to this class", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("WRONG_SECTION", extra=details))


class NoOpenAttendanceException(ConflictException):
    """409 - Time-out scan without a prior time-in"""

    def __init__(self, message: str = "Cannot time out without a time-in record", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("NO_OPEN_ATTENDANCE", extra=details))


class TransientStoreException(ServiceUnavailableException):
    """503 - Store unavailable or timed out; the identical scan may be retried"""

    def __init__(self, message: str = "Attendance store temporarily unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _details("TRANSIENT_STORE_ERROR", retryable=True, extra=details))


@contextmanager
def store_guard(db: Session, operation: str) -> Generator[None, None, None]:
    """
    Fail closed on storage outages

    Connection loss, pool checkout timeouts and statement timeouts become
    TransientStoreException after the session is rolled back. Integrity and
    programming errors are not transient and propagate unchanged.
    """
    try:
        yield
    except (OperationalError, PoolTimeoutError) as e:
        db.rollback()
        logger.warning(
            f"Store operation failed: {operation}",
            extra={'extra_data': {'operation': operation, 'error_type': type(e).__name__}}
        )
        raise TransientStoreException(details={"operation": operation})
    except DBAPIError as e:
        if not e.connection_invalidated:
            raise
        db.rollback()
        logger.warning(
            f"Store connection lost: {operation}",
            extra={'extra_data': {'operation': operation, 'error_type': type(e).__name__}}
        )
        raise TransientStoreException(details={"operation": operation})
