from .schedule_service import ScheduleService
from .kiosk_session_service import KioskSessionService
from .attendance_resolver import AttendanceResolver
from .attendance_service import AttendanceService
from .cleanup_service import CleanupService

__all__ = [
    "ScheduleService",
    "KioskSessionService",
    "AttendanceResolver",
    "AttendanceService",
    "CleanupService"
]
