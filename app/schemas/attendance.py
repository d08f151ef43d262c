"""
Attendance Schemas for records, scans and classification
"""
from typing import Optional, Literal, List
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import fix_datetime_timezone

AttendanceType = Literal["timeIn", "timeOut"]
AttendanceStatus = Literal["present", "late", "absent"]
ScanTiming = Literal["early", "on_time", "within_grace", "late"]


class AttendanceRecordBase(BaseModel):
    ar_student_id: str
    ar_schedule_id: str
    ar_date: date
    ar_time_in: Optional[datetime] = None
    ar_time_out: Optional[datetime] = None
    ar_status: AttendanceStatus
    ar_note: Optional[str] = None
    ar_session_token: Optional[str] = None


class AttendanceRecordInDB(AttendanceRecordBase):
    model_config = ConfigDict(from_attributes=True)

    ar_id: int
    ar_version: int = 1
    ar_created_at: Optional[datetime] = None
    ar_updated_at: Optional[datetime] = None

    @field_validator('ar_time_in', 'ar_time_out', 'ar_created_at', 'ar_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return fix_datetime_timezone(v)


class AttendanceRecord(AttendanceRecordInDB):
    pass


class ScanClassification(BaseModel):
    """Result of evaluating one scan against a schedule window"""
    attendance_type: AttendanceType
    status: Optional[AttendanceStatus] = None  # None for timeOut scans
    scheduled_at: datetime
    timing: ScanTiming
    minutes_late: float = 0.0
    minutes_early: float = 0.0
    within_grace: bool = False
    note: str


# Request/Response schemas for API endpoints
class ScanRequest(BaseModel):
    """Request schema for kiosk RFID scan endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    rfid: str
    attendance_type: AttendanceType = Field(..., alias="attendanceType")
    session_token: str = Field(..., alias="sessionToken", min_length=1)


class AttendanceOutcome(BaseModel):
    """Response schema for a resolved scan"""
    record: AttendanceRecord
    status: AttendanceStatus
    attendance_type: AttendanceType
    duplicate: bool = False
    student_id: str
    student_name: str
    schedule_id: str
    schedule_name: str
    classification: Optional[ScanClassification] = None  # None when the scan was a duplicate
    message: str


class AbsenceResult(BaseModel):
    """Response schema for absence finalization"""
    schedule_id: str
    date: date
    marked_count: int
    student_ids: List[str] = []
