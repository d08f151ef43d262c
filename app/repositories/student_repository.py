"""
Student Repository - Badge identity lookup
"""
from typing import Optional, List
from sqlalchemy.orm import Session

from atams.db import BaseRepository
from app.models.student import Student


class StudentRepository(BaseRepository[Student]):
    def __init__(self):
        super().__init__(Student)

    def get_by_rfid(self, db: Session, rfid: str) -> Optional[Student]:
        """Get the student registered to an RFID badge"""
        return db.query(Student).filter(Student.st_rfid == rfid).first()

    def get_by_section(self, db: Session, section_id: str) -> List[Student]:
        return db.query(Student).filter(
            Student.st_section_id == section_id
        ).order_by(Student.st_last_name, Student.st_first_name).all()
