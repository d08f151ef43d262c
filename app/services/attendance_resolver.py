"""
Attendance Resolver - Turn one kiosk scan into an attendance outcome

Flow: live session -> badge -> bound schedule -> classification -> idempotent
write keyed by (student, schedule, local date). Every write is either an
insert guarded by the unique constraint or an update conditional on the
column it fills, so a retried or concurrent scan is reported as a duplicate
instead of being recorded twice.
"""
from typing import Optional, Tuple
from datetime import datetime, date
from sqlalchemy.orm import Session

from app.models.attendance_record import AttendanceRecord as AttendanceRecordModel
from app.models.schedule import Schedule as ScheduleModel
from app.models.student import Student as StudentModel
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.repositories.schedule_repository import ScheduleRepository
from app.repositories.student_repository import StudentRepository
from app.services.kiosk_session_service import KioskSessionService
from app.services.scan_classifier import classify_scan, combine_notes
from app.schemas.attendance import AttendanceOutcome, AttendanceRecord, ScanClassification, ScanRequest
from app.schemas.kiosk import KioskSession
from app.core.clock import as_utc, to_local, utc_now
from app.core.exceptions import (
    NoOpenAttendanceException,
    ScheduleNotFoundException,
    TransientStoreException,
    UnknownBadgeException,
    WrongSectionException,
    store_guard,
)
from atams.exceptions import BadRequestException
from atams.logging import get_logger

logger = get_logger(__name__)


def student_display_name(student: StudentModel) -> str:
    return f"{student.st_first_name} {student.st_last_name}".strip()


class AttendanceResolver:
    def __init__(self) -> None:
        self.session_service = KioskSessionService()
        self.student_repo = StudentRepository()
        self.schedule_repo = ScheduleRepository()
        self.record_repo = AttendanceRecordRepository()

    def resolve(self, db: Session, scan: ScanRequest, now: Optional[datetime] = None) -> AttendanceOutcome:
        """
        Resolve a kiosk scan

        Args:
            db: Database session
            scan: RFID, attendance type and kiosk session token
            now: Time the scan was received (default current UTC time)

        Returns:
            AttendanceOutcome: Recorded (or already recorded) attendance

        Raises:
            SessionNotFoundException / SessionExpiredException: Dead kiosk token, nothing written
            BadRequestException: Blank RFID
            UnknownBadgeException: No student for the RFID
            ScheduleNotFoundException: Bound schedule no longer exists
            WrongSectionException: Student belongs to another section
            NoScheduleTodayException: Schedule does not run today
            NoOpenAttendanceException: Time-out without a time-in
            TransientStoreException: Store unavailable; retry the same scan
        """
        now = as_utc(now) if now else utc_now()

        session = self.session_service.get_by_token(db, scan.session_token, now)

        rfid = scan.rfid.strip()
        if not rfid:
            raise BadRequestException(
                "Please enter an RFID value",
                details={"code": "INVALID_RFID", "retryable": False}
            )

        with store_guard(db, "attendance.resolve"):
            student = self.student_repo.get_by_rfid(db, rfid)
            if not student:
                raise UnknownBadgeException(details={"rfid": rfid})

            schedule = self.schedule_repo.get_by_id(db, session.ks_schedule_id)
            if not schedule:
                raise ScheduleNotFoundException(details={"schedule_id": session.ks_schedule_id})

            if student.st_section_id != schedule.sc_section_id:
                raise WrongSectionException(
                    f"Student is assigned to {student.st_section_id or 'no section'}, "
                    f"not {schedule.sc_section_name}. Cannot record attendance.",
                    details={
                        "student_id": student.st_id,
                        "student_section_id": student.st_section_id,
                        "schedule_section_id": schedule.sc_section_id
                    }
                )

            classification = classify_scan(schedule, scan.attendance_type, now)
            day = to_local(now).date()

            if scan.attendance_type == "timeIn":
                record, duplicate = self._record_time_in(db, student, schedule, session, classification, day, now)
            else:
                record, duplicate = self._record_time_out(db, student, schedule, classification, day, now)

            outcome = self._build_outcome(student, session, classification, record, duplicate)

        logger.info(
            "Scan resolved",
            extra={'extra_data': {
                'student_id': outcome.student_id,
                'schedule_id': outcome.schedule_id,
                'attendance_type': outcome.attendance_type,
                'status': outcome.status,
                'duplicate': outcome.duplicate
            }}
        )
        return outcome

    def _record_time_in(
        self,
        db: Session,
        student: StudentModel,
        schedule: ScheduleModel,
        session: KioskSession,
        classification: ScanClassification,
        day: date,
        now: datetime
    ) -> Tuple[AttendanceRecordModel, bool]:
        record = self.record_repo.get_for_day(db, student.st_id, schedule.sc_id, day)

        if record is None:
            created = self.record_repo.create_if_absent(db, {
                "ar_student_id": student.st_id,
                "ar_schedule_id": schedule.sc_id,
                "ar_date": day,
                "ar_time_in": now,
                "ar_status": classification.status,
                "ar_note": classification.note,
                "ar_session_token": session.ks_token
            })
            if created is not None:
                return created, False

            # Lost the insert race: the winner may be a time-in or an absence row
            record = self.record_repo.get_for_day(db, student.st_id, schedule.sc_id, day)
            if record is None:
                raise TransientStoreException(details={"operation": "attendance.time_in"})

        if record.ar_time_in is not None:
            return record, True

        # Pre-marked absent: the student showed up after all
        updated = self.record_repo.set_time_in_if_missing(
            db, record.ar_id, now, classification.status, classification.note, session.ks_token
        )
        db.refresh(record)
        return record, not updated

    def _record_time_out(
        self,
        db: Session,
        student: StudentModel,
        schedule: ScheduleModel,
        classification: ScanClassification,
        day: date,
        now: datetime
    ) -> Tuple[AttendanceRecordModel, bool]:
        record = self.record_repo.get_for_day(db, student.st_id, schedule.sc_id, day)

        if record is None or record.ar_time_in is None:
            raise NoOpenAttendanceException(
                details={"student_id": student.st_id, "schedule_id": schedule.sc_id, "date": day.isoformat()}
            )

        if record.ar_time_out is not None:
            return record, True

        note = combine_notes(record.ar_note, classification.note)
        updated = self.record_repo.set_time_out_if_missing(db, record.ar_id, now, note)
        db.refresh(record)
        return record, not updated

    def _build_outcome(
        self,
        student: StudentModel,
        session: KioskSession,
        classification: ScanClassification,
        record: AttendanceRecordModel,
        duplicate: bool
    ) -> AttendanceOutcome:
        record_data = AttendanceRecord.model_validate(record)
        name = student_display_name(student)

        if classification.attendance_type == "timeIn":
            stamp = record_data.ar_time_in
            message = f"{name} already timed in" if duplicate else f"{name} timed in ({record_data.ar_status})"
        else:
            stamp = record_data.ar_time_out
            message = f"{name} already timed out" if duplicate else f"{name} timed out"

        if stamp is not None:
            message = f"{message} at {to_local(stamp).strftime('%H:%M')}"

        return AttendanceOutcome(
            record=record_data,
            status=record_data.ar_status,
            attendance_type=classification.attendance_type,
            duplicate=duplicate,
            student_id=student.st_id,
            student_name=name,
            schedule_id=session.ks_schedule_id,
            schedule_name=session.ks_schedule_name,
            classification=None if duplicate else classification,
            message=message
        )
