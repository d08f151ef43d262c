"""
Clock helpers - UTC storage, local wall-clock evaluation
"""
from datetime import date, datetime, time, timezone

import pytz

from app.core.config import settings


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC

    Naive values are treated as UTC (SQLite hands back naive timestamps).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_zone():
    return pytz.timezone(settings.ATTENDANCE_TIMEZONE)


def to_local(value: datetime) -> datetime:
    """Convert a timestamp to the attendance wall-clock timezone"""
    return as_utc(value).astimezone(local_zone())


def local_datetime(day: date, wall_time: time) -> datetime:
    """Aware datetime for a wall-clock time on a local calendar date"""
    return local_zone().localize(datetime.combine(day, wall_time))
