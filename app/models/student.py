"""
Student Model - Badge holders resolved from RFID scans
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from atams.db import Base


class Student(Base):
    """Student model for kiosk schema - Table: kiosk.students"""
    __tablename__ = "students"
    __table_args__ = {"schema": "kiosk"}

    st_id = Column(String(50), primary_key=True, index=True)
    st_first_name = Column(String(100), nullable=False)
    st_last_name = Column(String(100), nullable=False)
    st_rfid = Column(String(64), nullable=True, unique=True, index=True)
    st_section_id = Column(String(50), nullable=True, index=True)
    st_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    st_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
