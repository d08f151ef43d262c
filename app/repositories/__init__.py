from .schedule_repository import ScheduleRepository
from .student_repository import StudentRepository
from .kiosk_session_repository import KioskSessionRepository
from .attendance_record_repository import AttendanceRecordRepository

__all__ = [
    "ScheduleRepository",
    "StudentRepository",
    "KioskSessionRepository",
    "AttendanceRecordRepository"
]
