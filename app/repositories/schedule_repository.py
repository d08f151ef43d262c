"""
Schedule Repository - Read access to the schedule directory
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.schedule import Schedule


class ScheduleRepository(BaseRepository[Schedule]):
    def __init__(self):
        super().__init__(Schedule)

    def get_by_id(self, db: Session, schedule_id: str) -> Optional[Schedule]:
        """Get schedule by ID using ORM"""
        return db.query(Schedule).filter(Schedule.sc_id == schedule_id).first()

    def get_schedules(self, db: Session, day: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Schedule]:
        """Get schedules, optionally for a single day, ordered by start time"""
        query = db.query(Schedule)

        if day:
            query = query.filter(Schedule.sc_day == day)

        return query.order_by(Schedule.sc_day, Schedule.sc_time_in).offset(skip).limit(limit).all()

    def count_schedules(self, db: Session, day: Optional[str] = None) -> int:
        """Count schedules using native SQL"""
        if day:
            query = "SELECT COUNT(*) FROM kiosk.schedules WHERE sc_day = :day"
            return self.execute_raw_sql_scalar(db, query, {"day": day})

        return self.execute_raw_sql_scalar(db, "SELECT COUNT(*) FROM kiosk.schedules")

    def check_schedule_exists(self, db: Session, schedule_id: str) -> bool:
        """Check if schedule exists using native SQL"""
        query = "SELECT 1 FROM kiosk.schedules WHERE sc_id = :schedule_id LIMIT 1"
        result = self.execute_raw_sql_scalar(db, query, {"schedule_id": schedule_id})
        return result is not None
