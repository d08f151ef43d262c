from datetime import timedelta

from app.models.kiosk_session import KioskSession as KioskSessionModel
from app.services.kiosk_session_service import KioskSessionService
from tests.conftest import MONDAY, TUESDAY, at


def scan_in(client, token, rfid):
    return client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": rfid, "attendanceType": "timeIn", "sessionToken": token}
    )


def open_kiosk(db, schedule):
    return KioskSessionService().create(db, schedule.sc_id, created_by=1, now=at(MONDAY, 7, 30)).ks_token


def test_list_schedules(client, schedule):
    response = client.get("/api/v1/schedules", params={"day": "monday"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["sc_id"] == "SCH-MON-AM"

    assert client.get("/api/v1/schedules", params={"day": "Tuesday"}).json()["total"] == 0
    assert client.get("/api/v1/schedules", params={"day": "Funday"}).status_code == 400


def test_get_schedule(client, schedule):
    assert client.get("/api/v1/schedules/SCH-MON-AM").json()["data"]["sc_time_in"] == "08:00:00"
    assert client.get("/api/v1/schedules/SCH-NOPE").status_code == 404


def test_schedule_attendance_for_date(client, db, schedule, students, freeze_time):
    token = open_kiosk(db, schedule)
    freeze_time(at(MONDAY, 8, 0))
    scan_in(client, token, "RFID-0001")
    scan_in(client, token, "RFID-0002")

    response = client.get("/api/v1/attendance/schedules/SCH-MON-AM", params={"date": MONDAY.isoformat()})

    assert response.status_code == 200
    assert {r["ar_student_id"] for r in response.json()["data"]} == {"STU-1", "STU-2"}

    other_day = client.get("/api/v1/attendance/schedules/SCH-MON-AM", params={"date": TUESDAY.isoformat()})
    assert other_day.json()["data"] == []


def test_schedule_attendance_rejects_bad_date(client, schedule):
    response = client.get("/api/v1/attendance/schedules/SCH-MON-AM", params={"date": "19/10/2026"})

    assert response.status_code == 400


def test_student_history(client, db, schedule, students, freeze_time):
    token = open_kiosk(db, schedule)
    freeze_time(at(MONDAY, 8, 0))
    scan_in(client, token, "RFID-0001")

    response = client.get("/api/v1/attendance/students/STU-1/history")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["ar_status"] == "present"


def test_finalize_absences_is_idempotent(client, db, schedule, students, freeze_time):
    token = open_kiosk(db, schedule)
    freeze_time(at(MONDAY, 8, 0))
    scan_in(client, token, "RFID-0001")

    freeze_time(at(MONDAY, 12, 30))
    first = client.post("/api/v1/attendance/schedules/SCH-MON-AM/absences")
    second = client.post("/api/v1/attendance/schedules/SCH-MON-AM/absences")

    assert first.status_code == 200
    assert sorted(first.json()["data"]["student_ids"]) == ["STU-2", "STU-3"]
    assert second.json()["data"]["marked_count"] == 0

    roster = client.get("/api/v1/attendance/schedules/SCH-MON-AM").json()["data"]
    statuses = {r["ar_student_id"]: r["ar_status"] for r in roster}
    assert statuses == {"STU-1": "present", "STU-2": "absent", "STU-3": "absent"}


def test_late_arrival_after_absence_finalization(client, db, schedule, students, freeze_time):
    token = KioskSessionService().create(
        db, schedule.sc_id, created_by=1, ttl=timedelta(hours=6), now=at(MONDAY, 7, 30)
    ).ks_token
    freeze_time(at(MONDAY, 8, 30))
    client.post("/api/v1/attendance/schedules/SCH-MON-AM/absences")

    response = scan_in(client, token, "RFID-0002")

    assert response.json()["data"]["status"] == "late"
    assert response.json()["data"]["duplicate"] is False


def test_finalize_absences_on_wrong_day(client, schedule, students):
    response = client.post(
        "/api/v1/attendance/schedules/SCH-MON-AM/absences", params={"date": TUESDAY.isoformat()}
    )

    assert response.status_code == 409
    assert response.json()["details"]["code"] == "NO_SCHEDULE_TODAY"


def test_cleanup_sessions(client, db, schedule, freeze_time):
    service = KioskSessionService()
    service.create(db, schedule.sc_id, created_by=1, now=at(MONDAY, 7, 0) - timedelta(days=40))
    service.create(db, schedule.sc_id, created_by=2, now=at(MONDAY, 7, 0))

    freeze_time(at(MONDAY, 9, 0))
    response = client.post("/api/v1/maintenance/cleanup-sessions", params={"days_old": 30})

    assert response.status_code == 200
    assert response.json()["data"]["deleted_count"] == 1
    assert db.query(KioskSessionModel).count() == 1
