"""
Cleanup Service - Maintenance operations for database hygiene
"""
from typing import Optional
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

from app.repositories.kiosk_session_repository import KioskSessionRepository
from app.core.clock import as_utc, utc_now
from app.core.exceptions import store_guard
from atams.logging import get_logger

logger = get_logger(__name__)


class CleanupService:
    def __init__(self) -> None:
        self.session_repo = KioskSessionRepository()

    def cleanup_expired_sessions(self, db: Session, days_old: int = 30, now: Optional[datetime] = None) -> int:
        """
        Delete kiosk sessions that expired long ago to prevent table bloat

        Expiry itself is decided when a session is read; this only removes
        rows nobody can use any more.

        Args:
            db: Database session
            days_old: Delete sessions whose expiry is older than this many days (default: 30)
            now: Reference time (default current UTC time)

        Returns:
            int: Number of sessions deleted
        """
        now = as_utc(now) if now else utc_now()
        cutoff = now - timedelta(days=days_old)

        with store_guard(db, "cleanup.kiosk_sessions"):
            deleted_count = self.session_repo.delete_expired_before(db, cutoff)

        logger.info(
            "Expired kiosk sessions cleaned up",
            extra={'extra_data': {'days_old': days_old, 'deleted_count': deleted_count}}
        )
        return deleted_count
