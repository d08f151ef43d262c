"""
Schedule Model - Class schedules a kiosk can be bound to
"""
from sqlalchemy import Column, String, DateTime, Time
from sqlalchemy.sql import func
from atams.db import Base


class Schedule(Base):
    """Schedule model for kiosk schema - Table: kiosk.schedules"""
    __tablename__ = "schedules"
    __table_args__ = {"schema": "kiosk"}

    sc_id = Column(String(50), primary_key=True, index=True)
    sc_day = Column(String(10), nullable=False, index=True)  # 'Monday' .. 'Sunday'
    sc_time_in = Column(Time, nullable=False)
    sc_time_out = Column(Time, nullable=False)
    sc_section_id = Column(String(50), nullable=False, index=True)
    sc_section_name = Column(String(255), nullable=False)
    sc_teacher_id = Column(String(50), nullable=True)
    sc_subject_id = Column(String(50), nullable=True)
    sc_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    sc_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
