"""
Kiosk Session Service - Session store for kiosk bindings

A kiosk session binds one kiosk to one schedule for a bounded time. Expiry is
evaluated when a session is read; there is no background sweeper.
"""
import secrets
from typing import Optional
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

from app.repositories.kiosk_session_repository import KioskSessionRepository
from app.repositories.schedule_repository import ScheduleRepository
from app.schemas.kiosk import KioskSession, KioskValidationResponse
from app.schemas.schedule import Schedule
from app.core.clock import as_utc, utc_now
from app.core.config import settings
from app.core.exceptions import (
    ScheduleNotFoundException,
    SessionEndedException,
    SessionExpiredException,
    SessionNotFoundException,
    store_guard,
)
from atams.logging import get_logger

logger = get_logger(__name__)


def schedule_display_name(schedule) -> str:
    return f"{schedule.sc_day} - {schedule.sc_section_name}"


class KioskSessionService:
    def __init__(self) -> None:
        self.session_repo = KioskSessionRepository()
        self.schedule_repo = ScheduleRepository()

    def create(
        self,
        db: Session,
        schedule_id: str,
        created_by: Optional[int],
        created_by_name: Optional[str] = None,
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None
    ) -> KioskSession:
        """
        Open a kiosk session bound to a schedule

        Any session the same staff member still has active is ended in the
        same transaction, so one kiosk never holds two live tokens.

        Args:
            db: Database session
            schedule_id: Schedule the kiosk will record attendance for
            created_by: Staff user ID from auth
            created_by_name: Staff display name
            ttl: Session lifetime (default KIOSK_SESSION_TTL_HOURS)
            now: Creation time (default current UTC time)

        Returns:
            KioskSession: The new active session

        Raises:
            ScheduleNotFoundException: If the schedule does not exist
        """
        now = as_utc(now) if now else utc_now()
        ttl = ttl if ttl is not None else timedelta(hours=settings.KIOSK_SESSION_TTL_HOURS)

        with store_guard(db, "kiosk_session.create"):
            schedule = self.schedule_repo.get_by_id(db, schedule_id)
            if not schedule:
                raise ScheduleNotFoundException(details={"schedule_id": schedule_id})

            ended_count = 0
            if created_by is not None:
                ended_count = self.session_repo.end_all_for_user(db, created_by, now, commit=False)

            session_data = {
                "ks_token": secrets.token_urlsafe(settings.KIOSK_TOKEN_BYTES),
                "ks_schedule_id": schedule.sc_id,
                "ks_schedule_name": schedule_display_name(schedule),
                "ks_created_by": created_by,
                "ks_created_by_name": created_by_name,
                "ks_status": "active",
                "ks_created_at": now,
                "ks_expires_at": now + ttl
            }
            db_session = self.session_repo.create(db, session_data)
            result = KioskSession.model_validate(db_session)

        logger.info(
            "Kiosk session created",
            extra={'extra_data': {
                'schedule_id': schedule_id,
                'created_by': created_by,
                'expires_at': result.ks_expires_at.isoformat(),
                'replaced_sessions': ended_count
            }}
        )
        return result

    def get_by_token(self, db: Session, token: str, now: Optional[datetime] = None) -> KioskSession:
        """
        Load a live session by token

        A session read at or after its expiry is flipped to expired by a
        conditional update; repeated reads keep failing the same way.

        Raises:
            SessionNotFoundException: Unknown token
            SessionEndedException: Session was ended by staff
            SessionExpiredException: Session is past its expiry
        """
        now = as_utc(now) if now else utc_now()

        with store_guard(db, "kiosk_session.get"):
            db_session = self.session_repo.get_by_token(db, token)
            if not db_session:
                raise SessionNotFoundException()

            if db_session.ks_status == "ended":
                raise SessionEndedException(details={"ended_at": _isoformat(db_session.ks_ended_at)})
            if db_session.ks_status == "expired":
                raise SessionExpiredException(details={"expires_at": _isoformat(db_session.ks_expires_at)})

            expires_at = as_utc(db_session.ks_expires_at)
            if now >= expires_at:
                if self.session_repo.expire_if_due(db, token, now):
                    logger.info(
                        "Kiosk session expired",
                        extra={'extra_data': {'schedule_id': db_session.ks_schedule_id}}
                    )
                raise SessionExpiredException(details={"expires_at": expires_at.isoformat()})

            return KioskSession.model_validate(db_session)

    def end(self, db: Session, token: str, now: Optional[datetime] = None) -> KioskSession:
        """
        End a session by token. Ending an ended or expired session is a no-op.

        Raises:
            SessionNotFoundException: Unknown token
        """
        now = as_utc(now) if now else utc_now()

        with store_guard(db, "kiosk_session.end"):
            db_session = self.session_repo.get_by_token(db, token)
            if not db_session:
                raise SessionNotFoundException()

            if self.session_repo.end_active(db, token, now):
                logger.info(
                    "Kiosk session ended",
                    extra={'extra_data': {'schedule_id': db_session.ks_schedule_id}}
                )

            db.refresh(db_session)
            return KioskSession.model_validate(db_session)

    def end_for_user(self, db: Session, user_id: int, now: Optional[datetime] = None) -> int:
        """End every active session the user created. Returns the number ended."""
        now = as_utc(now) if now else utc_now()

        with store_guard(db, "kiosk_session.end_for_user"):
            ended_count = self.session_repo.end_all_for_user(db, user_id, now)

        if ended_count:
            logger.info(
                "Kiosk sessions ended by staff",
                extra={'extra_data': {'user_id': user_id, 'ended_count': ended_count}}
            )
        return ended_count

    def get_current(self, db: Session, user_id: int, now: Optional[datetime] = None) -> Optional[KioskSession]:
        """Get the caller's live session, or None"""
        now = as_utc(now) if now else utc_now()

        with store_guard(db, "kiosk_session.current"):
            db_session = self.session_repo.get_active_for_user(db, user_id)
            while db_session and now >= as_utc(db_session.ks_expires_at):
                self.session_repo.expire_if_due(db, db_session.ks_token, now)
                db_session = self.session_repo.get_active_for_user(db, user_id)

            if not db_session:
                return None
            return KioskSession.model_validate(db_session)

    def validate(self, db: Session, token: str, now: Optional[datetime] = None) -> KioskValidationResponse:
        """Boolean-style liveness check; never raises for dead tokens"""
        try:
            session = self.get_by_token(db, token, now)
        except SessionEndedException as e:
            return KioskValidationResponse(valid=False, status="ended", reason=e.message)
        except SessionExpiredException as e:
            return KioskValidationResponse(valid=False, status="expired", reason=e.message)
        except SessionNotFoundException as e:
            return KioskValidationResponse(valid=False, reason=e.message)

        with store_guard(db, "kiosk_session.validate"):
            schedule = self.schedule_repo.get_by_id(db, session.ks_schedule_id)

        return KioskValidationResponse(
            valid=True,
            status=session.ks_status,
            schedule_id=session.ks_schedule_id,
            schedule_name=session.ks_schedule_name,
            expires_at=session.ks_expires_at,
            schedule=Schedule.model_validate(schedule) if schedule else None
        )


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return as_utc(value).isoformat() if value else None
