"""
Kiosk Session Repository - Data access layer for kiosk sessions

Status transitions are single conditional UPDATE statements so that two
requests racing on the same token cannot both win.
"""
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_, delete, update

from atams.db import BaseRepository
from app.models.kiosk_session import KioskSession


class KioskSessionRepository(BaseRepository[KioskSession]):
    def __init__(self):
        super().__init__(KioskSession)

    def get_by_token(self, db: Session, token: str) -> Optional[KioskSession]:
        return db.query(KioskSession).filter(KioskSession.ks_token == token).first()

    def get_active_for_user(self, db: Session, user_id: int) -> Optional[KioskSession]:
        """Get the user's most recent session still marked active"""
        return db.query(KioskSession).filter(
            and_(
                KioskSession.ks_created_by == user_id,
                KioskSession.ks_status == "active"
            )
        ).order_by(KioskSession.ks_created_at.desc()).first()

    def expire_if_due(self, db: Session, token: str, now: datetime) -> bool:
        """
        Flip an active session to expired once its expiry has passed.
        Returns True if this call performed the transition.
        """
        stmt = (
            update(KioskSession)
            .where(
                KioskSession.ks_token == token,
                KioskSession.ks_status == "active",
                KioskSession.ks_expires_at <= now
            )
            .values(ks_status="expired", ks_updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def end_active(self, db: Session, token: str, now: datetime) -> bool:
        """
        End a session if it is still active.
        Returns True if this call performed the transition.
        """
        stmt = (
            update(KioskSession)
            .where(
                KioskSession.ks_token == token,
                KioskSession.ks_status == "active"
            )
            .values(ks_status="ended", ks_ended_at=now, ks_updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount == 1

    def end_all_for_user(self, db: Session, user_id: int, now: datetime, commit: bool = True) -> int:
        """
        End every active session created by the user.
        With commit=False the change joins the caller's transaction.
        """
        stmt = (
            update(KioskSession)
            .where(
                KioskSession.ks_created_by == user_id,
                KioskSession.ks_status == "active"
            )
            .values(ks_status="ended", ks_ended_at=now, ks_updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        if commit:
            db.commit()
        return result.rowcount

    def delete_expired_before(self, db: Session, cutoff: datetime) -> int:
        """Delete sessions whose expiry is older than cutoff. Returns count deleted."""
        stmt = (
            delete(KioskSession)
            .where(KioskSession.ks_expires_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        db.commit()
        return result.rowcount
