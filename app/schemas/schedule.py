"""
Schedule Schemas - Read models for the schedule directory
"""
from typing import Optional
from datetime import datetime, time
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from app.schemas.common import fix_datetime_timezone

DAYS_OF_WEEK = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def normalize_day(value: str) -> str:
    """Map 'monday', ' MONDAY ' etc. to the canonical day name"""
    cleaned = value.strip().capitalize()
    if cleaned not in DAYS_OF_WEEK:
        raise ValueError(f"Invalid day of week: {value}")
    return cleaned


class ScheduleBase(BaseModel):
    sc_day: str
    sc_time_in: time
    sc_time_out: time
    sc_section_id: str
    sc_section_name: str
    sc_teacher_id: Optional[str] = None
    sc_subject_id: Optional[str] = None

    @field_validator('sc_day')
    @classmethod
    def validate_day(cls, v):
        return normalize_day(v)

    @model_validator(mode='after')
    def validate_window(self):
        if self.sc_time_in >= self.sc_time_out:
            raise ValueError("sc_time_in must be earlier than sc_time_out")
        return self


class ScheduleInDB(ScheduleBase):
    model_config = ConfigDict(from_attributes=True)

    sc_id: str
    sc_created_at: Optional[datetime] = None
    sc_updated_at: Optional[datetime] = None

    @field_validator('sc_created_at', 'sc_updated_at', mode='before')
    @classmethod
    def fix_datetime_timezone(cls, v):
        return fix_datetime_timezone(v)


class Schedule(ScheduleInDB):
    pass
