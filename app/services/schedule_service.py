"""
Schedule Service - Schedule directory reads
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from app.repositories.schedule_repository import ScheduleRepository
from app.schemas.schedule import Schedule, normalize_day
from app.core.exceptions import ScheduleNotFoundException, store_guard
from atams.exceptions import BadRequestException


class ScheduleService:
    def __init__(self) -> None:
        self.schedule_repo = ScheduleRepository()

    def _day_filter(self, day: Optional[str]) -> Optional[str]:
        if not day:
            return None
        try:
            return normalize_day(day)
        except ValueError as e:
            raise BadRequestException(str(e))

    def get_schedules(self, db: Session, day: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Schedule]:
        """Get schedules, optionally filtered by day of week"""
        day = self._day_filter(day)
        with store_guard(db, "schedule.list"):
            schedules = self.schedule_repo.get_schedules(db, day, skip, limit)
            return [Schedule.model_validate(s) for s in schedules]

    def count_schedules(self, db: Session, day: Optional[str] = None) -> int:
        day = self._day_filter(day)
        with store_guard(db, "schedule.count"):
            return self.schedule_repo.count_schedules(db, day)

    def get_schedule(self, db: Session, schedule_id: str) -> Schedule:
        """
        Get schedule by ID

        Raises:
            ScheduleNotFoundException: If schedule not found
        """
        with store_guard(db, "schedule.get"):
            schedule = self.schedule_repo.get_by_id(db, schedule_id)
        if not schedule:
            raise ScheduleNotFoundException(details={"schedule_id": schedule_id})
        return Schedule.model_validate(schedule)
