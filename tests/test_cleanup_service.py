from datetime import timedelta

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from app.core.exceptions import TransientStoreException, store_guard
from app.models.kiosk_session import KioskSession as KioskSessionModel
from app.services.cleanup_service import CleanupService
from app.services.kiosk_session_service import KioskSessionService
from tests.conftest import MONDAY, at


def test_cleanup_only_removes_long_expired_sessions(db, schedule):
    sessions = KioskSessionService()
    now = at(MONDAY, 12, 0)
    sessions.create(db, schedule.sc_id, created_by=1, now=now - timedelta(days=10))
    sessions.create(db, schedule.sc_id, created_by=2, now=now - timedelta(days=3))
    live = sessions.create(db, schedule.sc_id, created_by=3, now=now)

    deleted = CleanupService().cleanup_expired_sessions(db, days_old=7, now=now)

    assert deleted == 1
    remaining = {row.ks_created_by for row in db.query(KioskSessionModel).all()}
    assert remaining == {2, 3}
    assert sessions.get_by_token(db, live.ks_token, now=now).ks_status == "active"


def test_cleanup_with_nothing_to_delete(db):
    assert CleanupService().cleanup_expired_sessions(db, days_old=30, now=at(MONDAY, 12, 0)) == 0


def test_store_guard_translates_dropped_connection(db):
    with pytest.raises(TransientStoreException) as exc:
        with store_guard(db, "cleanup.check"):
            raise DBAPIError("SELECT 1", {}, Exception("server closed the connection"), connection_invalidated=True)

    assert exc.value.details == {"code": "TRANSIENT_STORE_ERROR", "retryable": True, "operation": "cleanup.check"}


def test_store_guard_leaves_integrity_errors_alone(db):
    with pytest.raises(IntegrityError):
        with store_guard(db, "cleanup.check"):
            raise IntegrityError("INSERT", {}, Exception("duplicate key"))
