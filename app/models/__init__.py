from .schedule import Schedule
from .student import Student
from .kiosk_session import KioskSession
from .attendance_record import AttendanceRecord

__all__ = [
    "Schedule",
    "Student",
    "KioskSession",
    "AttendanceRecord"
]
