"""
Attendance Record Repository - Data access layer for attendance records
"""
from typing import Optional, List, Dict, Any, Set
from datetime import date, datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_, update
from sqlalchemy.exc import IntegrityError

from atams.db import BaseRepository
from app.models.attendance_record import AttendanceRecord


class AttendanceRecordRepository(BaseRepository[AttendanceRecord]):
    def __init__(self):
        super().__init__(AttendanceRecord)

    def get_for_day(self, db: Session, student_id: str, schedule_id: str, day: date) -> Optional[AttendanceRecord]:
        """Get the record for a student, schedule and calendar date using ORM"""
        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.ar_student_id == student_id,
                AttendanceRecord.ar_schedule_id == schedule_id,
                AttendanceRecord.ar_date == day
            )
        ).first()

    def create_if_absent(self, db: Session, obj_in: Dict[str, Any]) -> Optional[AttendanceRecord]:
        """
        Insert a record unless one already exists for the same student,
        schedule and date. Returns the new record, or None when the unique
        constraint rejected the insert (another request got there first).
        """
        try:
            return self.create(db, obj_in)
        except IntegrityError:
            db.rollback()
            return None

    def set_time_in_if_missing(
        self,
        db: Session,
        record_id: int,
        time_in: datetime,
        status: str,
        note: Optional[str],
        session_token: Optional[str]
    ) -> bool:
        """Record a time-in on a row that has none yet. Returns False if another write won."""
        stmt = (
            update(AttendanceRecord)
            .where(
                AttendanceRecord.ar_id == record_id,
                AttendanceRecord.ar_time_in.is_(None)
            )
            .values(
                ar_time_in=time_in,
                ar_status=status,
                ar_note=note,
                ar_session_token=session_token,
                ar_version=AttendanceRecord.ar_version + 1,
                ar_updated_at=time_in
            )
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def set_time_out_if_missing(self, db: Session, record_id: int, time_out: datetime, note: Optional[str]) -> bool:
        """Record a time-out on an open row. Status is left untouched."""
        stmt = (
            update(AttendanceRecord)
            .where(
                AttendanceRecord.ar_id == record_id,
                AttendanceRecord.ar_time_in.is_not(None),
                AttendanceRecord.ar_time_out.is_(None)
            )
            .values(
                ar_time_out=time_out,
                ar_note=note,
                ar_version=AttendanceRecord.ar_version + 1,
                ar_updated_at=time_out
            )
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def list_by_schedule_date(self, db: Session, schedule_id: str, day: date) -> List[AttendanceRecord]:
        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.ar_schedule_id == schedule_id,
                AttendanceRecord.ar_date == day
            )
        ).order_by(AttendanceRecord.ar_time_in.asc(), AttendanceRecord.ar_id.asc()).all()

    def student_ids_for_schedule_date(self, db: Session, schedule_id: str, day: date) -> Set[str]:
        """Student IDs that already have a record for the schedule on that date"""
        rows = db.query(AttendanceRecord.ar_student_id).filter(
            and_(
                AttendanceRecord.ar_schedule_id == schedule_id,
                AttendanceRecord.ar_date == day
            )
        ).all()
        return {row[0] for row in rows}

    def get_student_history(self, db: Session, student_id: str, skip: int = 0, limit: int = 50) -> List[AttendanceRecord]:
        """Get a student's records, newest first, using ORM"""
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.ar_student_id == student_id
        ).order_by(AttendanceRecord.ar_date.desc(), AttendanceRecord.ar_id.desc()).offset(skip).limit(limit).all()

    def count_student_history(self, db: Session, student_id: str) -> int:
        """Count a student's records using native SQL"""
        query = """
            SELECT COUNT(*)
            FROM kiosk.attendance_records
            WHERE ar_student_id = :student_id
        """
        return self.execute_raw_sql_scalar(db, query, {"student_id": student_id})
