"""
Attendance Service - Roster reads and absence finalization
"""
from typing import List, Optional
from datetime import date, datetime
from sqlalchemy.orm import Session

from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.repositories.schedule_repository import ScheduleRepository
from app.repositories.student_repository import StudentRepository
from app.schemas.attendance import AbsenceResult, AttendanceRecord
from app.schemas.schedule import DAYS_OF_WEEK
from app.core.clock import to_local, utc_now
from app.core.exceptions import NoScheduleTodayException, ScheduleNotFoundException, store_guard
from atams.logging import get_logger

logger = get_logger(__name__)

ABSENT_NOTE = "No time-in recorded."


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or utc_now()).date()


class AttendanceService:
    def __init__(self) -> None:
        self.record_repo = AttendanceRecordRepository()
        self.schedule_repo = ScheduleRepository()
        self.student_repo = StudentRepository()

    def get_schedule_attendance(
        self,
        db: Session,
        schedule_id: str,
        target_date: Optional[date] = None
    ) -> List[AttendanceRecord]:
        """
        Get attendance records for a schedule on one date

        Args:
            db: Database session
            schedule_id: Schedule ID
            target_date: Local calendar date (default today)

        Raises:
            ScheduleNotFoundException: If schedule not found
        """
        target_date = target_date or local_today()

        with store_guard(db, "attendance.by_schedule"):
            if not self.schedule_repo.check_schedule_exists(db, schedule_id):
                raise ScheduleNotFoundException(details={"schedule_id": schedule_id})

            records = self.record_repo.list_by_schedule_date(db, schedule_id, target_date)
            return [AttendanceRecord.model_validate(r) for r in records]

    def get_student_history(self, db: Session, student_id: str, skip: int = 0, limit: int = 50) -> List[AttendanceRecord]:
        """Get a student's attendance history, newest first"""
        with store_guard(db, "attendance.history"):
            records = self.record_repo.get_student_history(db, student_id, skip, limit)
            return [AttendanceRecord.model_validate(r) for r in records]

    def count_student_history(self, db: Session, student_id: str) -> int:
        with store_guard(db, "attendance.history_count"):
            return self.record_repo.count_student_history(db, student_id)

    def finalize_absences(
        self,
        db: Session,
        schedule_id: str,
        target_date: Optional[date] = None
    ) -> AbsenceResult:
        """
        Mark every student of the schedule's section without a record as absent

        Existing records are never touched, so running this twice marks nobody
        the second time. A student scanning in later turns the absent row into
        a time-in.

        Raises:
            ScheduleNotFoundException: If schedule not found
            NoScheduleTodayException: If the schedule does not run on target_date
        """
        target_date = target_date or local_today()

        with store_guard(db, "attendance.finalize_absences"):
            schedule = self.schedule_repo.get_by_id(db, schedule_id)
            if not schedule:
                raise ScheduleNotFoundException(details={"schedule_id": schedule_id})

            weekday = DAYS_OF_WEEK[target_date.weekday()]
            if schedule.sc_day.strip().lower() != weekday.lower():
                raise NoScheduleTodayException(
                    f"Schedule does not run on {target_date.isoformat()}",
                    details={"schedule_day": schedule.sc_day, "date": target_date.isoformat()}
                )

            students = self.student_repo.get_by_section(db, schedule.sc_section_id)
            recorded = self.record_repo.student_ids_for_schedule_date(db, schedule_id, target_date)

            marked = []
            for student in students:
                if student.st_id in recorded:
                    continue
                created = self.record_repo.create_if_absent(db, {
                    "ar_student_id": student.st_id,
                    "ar_schedule_id": schedule_id,
                    "ar_date": target_date,
                    "ar_status": "absent",
                    "ar_note": ABSENT_NOTE
                })
                if created is not None:
                    marked.append(created.ar_student_id)

        logger.info(
            "Absences finalized",
            extra={'extra_data': {
                'schedule_id': schedule_id,
                'date': target_date.isoformat(),
                'marked_count': len(marked)
            }}
        )
        return AbsenceResult(
            schedule_id=schedule_id,
            date=target_date,
            marked_count=len(marked),
            student_ids=marked
        )
