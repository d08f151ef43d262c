"""
Kiosk Schemas for session lifecycle endpoints
"""
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import fix_datetime_timezone
from app.schemas.schedule import Schedule

KioskSessionStatus = Literal["active", "ended", "expired"]


class KioskSessionBase(BaseModel):
    ks_schedule_id: str
    ks_schedule_name: str
    ks_created_by: Optional[int] = None
    ks_created_by_name: Optional[str] = None
    ks_status: KioskSessionStatus = "active"
    ks_created_at: datetime
    ks_expires_at: datetime
    ks_ended_at: Optional[datetime] = None


class KioskSessionInDB(KioskSessionBase):
    model_config = ConfigDict(from_attributes=True)

    ks_token: str
    ks_updated_at: Optional[datetime] = None

    @field_validator('ks_created_at', 'ks_expires_at', 'ks_ended_at', 'ks_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return fix_datetime_timezone(v)


class KioskSession(KioskSessionInDB):
    pass


# Request/Response schemas for API endpoints
class CreateKioskSessionRequest(BaseModel):
    """Request schema for kiosk session creation"""
    model_config = ConfigDict(populate_by_name=True)

    schedule_id: str = Field(..., alias="scheduleId", min_length=1)


class KioskSessionResponse(BaseModel):
    """Response schema for a kiosk session"""
    token: str
    schedule_id: str
    schedule_name: str
    status: KioskSessionStatus
    created_at: datetime
    expires_at: datetime


class EndKioskSessionResponse(BaseModel):
    """Response schema for ending the caller's kiosk session"""
    ended_count: int


class KioskValidationResponse(BaseModel):
    """Boolean-style liveness check for a kiosk token"""
    valid: bool
    status: Optional[KioskSessionStatus] = None
    reason: Optional[str] = None
    schedule_id: Optional[str] = None
    schedule_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    schedule: Optional[Schedule] = None
