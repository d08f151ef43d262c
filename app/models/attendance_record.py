"""
Attendance Record Model - One row per student, schedule and day
"""
from sqlalchemy import Column, BigInteger, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from atams.db import Base


class AttendanceRecord(Base):
    """Attendance Record model for kiosk schema - Table: kiosk.attendance_records"""
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("ar_student_id", "ar_schedule_id", "ar_date", name="uq_attendance_student_schedule_date"),
        {"schema": "kiosk"},
    )

    ar_id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    ar_student_id = Column(String(50), ForeignKey("kiosk.students.st_id"), nullable=False, index=True)
    ar_schedule_id = Column(String(50), ForeignKey("kiosk.schedules.sc_id"), nullable=False, index=True)
    ar_date = Column(Date, nullable=False, index=True)  # Local calendar date of the class
    ar_time_in = Column(DateTime(timezone=True), nullable=True)
    ar_time_out = Column(DateTime(timezone=True), nullable=True)
    ar_status = Column(String(10), nullable=False)  # 'present', 'late' or 'absent'
    ar_note = Column(String(500), nullable=True)
    ar_session_token = Column(String(128), nullable=True)  # Kiosk session that recorded the time-in
    ar_version = Column(Integer, nullable=False, default=1)
    ar_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ar_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
