"""
Scan Classifier - Evaluate a scan against a schedule's wall-clock window

Pure functions, no I/O. A time-in scan up to the grace period after the
scheduled start is still present; anything later is late. Time-out scans are
classified for the note only and never carry a status.
"""
from datetime import datetime
from typing import Optional

from app.core.clock import local_datetime, to_local
from app.core.config import settings
from app.core.exceptions import NoScheduleTodayException
from app.schemas.attendance import AttendanceType, ScanClassification
from app.schemas.schedule import DAYS_OF_WEEK


def _timing(delta_minutes: float, grace_period_minutes: int) -> str:
    if abs(delta_minutes) < 1:
        return "on_time"
    if delta_minutes > grace_period_minutes:
        return "late"
    if delta_minutes < -grace_period_minutes:
        return "early"
    return "within_grace"


def build_arrival_note(timing: str, minutes_late: float, minutes_early: float, grace_period_minutes: int) -> str:
    late, early = round(minutes_late), round(minutes_early)
    if timing == "late":
        return f"Arrived {late} minutes late (beyond the {grace_period_minutes}-minute window). Marked as LATE."
    if timing == "early":
        return f"Arrived {early} minutes early."
    if timing == "within_grace":
        if minutes_late > 0:
            return f"Arrived {late} minutes late but within the {grace_period_minutes}-minute grace window. Marked present."
        return f"Arrived {early} minutes early (within grace period). Marked present."
    return "Arrived on time."


def build_departure_note(timing: str, minutes_late: float, minutes_early: float, grace_period_minutes: int) -> str:
    late, early = round(minutes_late), round(minutes_early)
    if timing == "late":
        return f"Clocked out {late} minutes after schedule."
    if timing == "early":
        return f"Clocked out {early} minutes early."
    if timing == "within_grace":
        if minutes_late > 0:
            return f"Clocked out {late} minutes after schedule but within the {grace_period_minutes}-minute grace window."
        return f"Clocked out {early} minutes before schedule (within grace period)."
    return "Clocked out on time."


def combine_notes(*notes: Optional[str]) -> Optional[str]:
    """Join arrival and departure notes the way staff read them on the roster"""
    parts = [n for n in notes if n]
    return " | ".join(parts) if parts else None


def classify_scan(
    schedule,
    attendance_type: AttendanceType,
    occurred_at: datetime,
    grace_period_minutes: Optional[int] = None
) -> ScanClassification:
    """
    Classify a scan against the schedule window

    Args:
        schedule: Schedule model or schema (sc_day, sc_time_in, sc_time_out)
        attendance_type: "timeIn" or "timeOut"
        occurred_at: When the scan was received (aware, any timezone)
        grace_period_minutes: Override for ATTENDANCE_GRACE_PERIOD_MINUTES

    Returns:
        ScanClassification

    Raises:
        NoScheduleTodayException: If the schedule does not run on the scan's local weekday
    """
    if grace_period_minutes is None:
        grace_period_minutes = settings.ATTENDANCE_GRACE_PERIOD_MINUTES

    local = to_local(occurred_at)
    today = DAYS_OF_WEEK[local.weekday()]
    if schedule.sc_day.strip().lower() != today.lower():
        raise NoScheduleTodayException(
            details={"schedule_day": schedule.sc_day, "today": today}
        )

    scheduled_time = schedule.sc_time_in if attendance_type == "timeIn" else schedule.sc_time_out
    scheduled_at = local_datetime(local.date(), scheduled_time)

    delta_minutes = (local - scheduled_at).total_seconds() / 60
    minutes_late = max(delta_minutes, 0.0)
    minutes_early = max(-delta_minutes, 0.0)
    timing = _timing(delta_minutes, grace_period_minutes)

    if attendance_type == "timeIn":
        status = "late" if delta_minutes > grace_period_minutes else "present"
        note = build_arrival_note(timing, minutes_late, minutes_early, grace_period_minutes)
    else:
        status = None
        note = build_departure_note(timing, minutes_late, minutes_early, grace_period_minutes)

    return ScanClassification(
        attendance_type=attendance_type,
        status=status,
        scheduled_at=scheduled_at,
        timing=timing,
        minutes_late=minutes_late,
        minutes_early=minutes_early,
        within_grace=abs(delta_minutes) <= grace_period_minutes,
        note=note
    )
