from .schedule import Schedule
from .kiosk import (
    KioskSession,
    CreateKioskSessionRequest,
    KioskSessionResponse,
    EndKioskSessionResponse,
    KioskValidationResponse
)
from .attendance import (
    AttendanceRecord,
    ScanClassification,
    ScanRequest,
    AttendanceOutcome,
    AbsenceResult
)
from .common import DataResponse, PaginationResponse

__all__ = [
    # Schedule schemas
    "Schedule",
    # Kiosk schemas
    "KioskSession",
    "CreateKioskSessionRequest",
    "KioskSessionResponse",
    "EndKioskSessionResponse",
    "KioskValidationResponse",
    # Attendance schemas
    "AttendanceRecord",
    "ScanClassification",
    "ScanRequest",
    "AttendanceOutcome",
    "AbsenceResult",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
