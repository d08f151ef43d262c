"""
Kiosk Session Model - Token-authorized binding of a kiosk to one schedule
"""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from atams.db import Base


class KioskSession(Base):
    """Kiosk Session model for kiosk schema - Table: kiosk.kiosk_sessions"""
    __tablename__ = "kiosk_sessions"
    __table_args__ = {"schema": "kiosk"}

    ks_token = Column(String(128), primary_key=True, index=True)
    ks_schedule_id = Column(String(50), ForeignKey("kiosk.schedules.sc_id"), nullable=False, index=True)
    ks_schedule_name = Column(String(255), nullable=False)
    ks_created_by = Column(BigInteger, nullable=True, index=True)  # Atlas user id of the staff member
    ks_created_by_name = Column(String(255), nullable=True)
    ks_status = Column(String(10), nullable=False, default="active")  # 'active', 'ended' or 'expired'
    ks_created_at = Column(DateTime(timezone=True), nullable=False)
    ks_expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    ks_ended_at = Column(DateTime(timezone=True), nullable=True)
    ks_updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
