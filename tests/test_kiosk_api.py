from datetime import timedelta

from tests.conftest import MONDAY, at


def create_session(client, schedule_id="SCH-MON-AM"):
    return client.post("/api/v1/kiosk/create", json={"scheduleId": schedule_id})


def test_create_session(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))

    response = create_session(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["schedule_id"] == "SCH-MON-AM"
    assert data["schedule_name"] == "Monday - Sunflower"
    assert data["status"] == "active"
    assert data["token"]


def test_create_session_unknown_schedule(client, schedule):
    response = create_session(client, "SCH-NOPE")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["details"]["code"] == "SCHEDULE_NOT_FOUND"


def test_create_session_requires_schedule_id(client, schedule):
    response = client.post("/api/v1/kiosk/create", json={})

    assert response.status_code == 422


def test_current_and_end(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]

    current = client.get("/api/v1/kiosk/current")
    assert current.status_code == 200
    assert current.json()["data"]["token"] == token

    ended = client.post("/api/v1/kiosk/end")
    assert ended.json()["data"]["ended_count"] == 1

    again = client.post("/api/v1/kiosk/end")
    assert again.status_code == 200
    assert again.json()["data"]["ended_count"] == 0

    assert client.get("/api/v1/kiosk/current").json()["data"] is None


def test_get_session_by_token(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]

    response = client.get(f"/api/v1/kiosk/session/{token}")

    assert response.status_code == 200
    assert response.json()["data"]["token"] == token


def test_get_session_unknown_token(client, schedule):
    response = client.get("/api/v1/kiosk/session/nope")

    assert response.status_code == 404
    assert response.json()["details"]["code"] == "SESSION_NOT_FOUND"


def test_get_session_after_expiry_is_gone(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]

    freeze_time(at(MONDAY, 9, 1))
    first = client.get(f"/api/v1/kiosk/session/{token}")
    second = client.get(f"/api/v1/kiosk/session/{token}")

    assert first.status_code == second.status_code == 410
    assert first.json()["details"]["code"] == "SESSION_EXPIRED"


def test_get_session_after_end(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]
    client.post(f"/api/v1/kiosk/session/{token}/end")

    response = client.get(f"/api/v1/kiosk/session/{token}")

    assert response.status_code == 410
    assert response.json()["details"]["code"] == "SESSION_ENDED"


def test_validate(client, schedule, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]

    valid = client.get(f"/api/v1/kiosk/validate/{token}").json()["data"]
    assert valid["valid"] is True
    assert valid["schedule"]["sc_section_name"] == "Sunflower"

    freeze_time(at(MONDAY, 7, 0) + timedelta(hours=3))
    expired = client.get(f"/api/v1/kiosk/validate/{token}")
    assert expired.status_code == 200
    assert expired.json()["data"]["valid"] is False
    assert expired.json()["data"]["status"] == "expired"


def test_scan_round_trip(client, schedule, students, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]

    freeze_time(at(MONDAY, 8, 20))
    time_in = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0001", "attendanceType": "timeIn", "sessionToken": token}
    )
    assert time_in.status_code == 200
    assert time_in.json()["data"]["status"] == "late"
    assert time_in.json()["data"]["duplicate"] is False

    repeat = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0001", "attendanceType": "timeIn", "sessionToken": token}
    )
    assert repeat.json()["data"]["duplicate"] is True
    assert repeat.json()["data"]["status"] == "late"


def test_scan_error_codes(client, schedule, students, freeze_time):
    freeze_time(at(MONDAY, 7, 0))
    token = create_session(client).json()["data"]["token"]
    freeze_time(at(MONDAY, 8, 0))

    unknown = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-XXXX", "attendanceType": "timeIn", "sessionToken": token}
    )
    assert unknown.status_code == 404
    assert unknown.json()["details"] == {"code": "UNKNOWN_BADGE", "retryable": False, "rfid": "RFID-XXXX"}

    other_section = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0009", "attendanceType": "timeIn", "sessionToken": token}
    )
    assert other_section.status_code == 409
    assert other_section.json()["details"]["code"] == "WRONG_SECTION"
    assert other_section.json()["details"]["retryable"] is False
    assert other_section.json()["message"].endswith("Cannot record attendance.")

    no_open = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0001", "attendanceType": "timeOut", "sessionToken": token}
    )
    assert no_open.status_code == 409
    assert no_open.json()["details"]["code"] == "NO_OPEN_ATTENDANCE"

    blank = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": " ", "attendanceType": "timeIn", "sessionToken": token}
    )
    assert blank.status_code == 400

    bad_type = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0001", "attendanceType": "lunch", "sessionToken": token}
    )
    assert bad_type.status_code == 422


def test_scan_with_expired_session(client, schedule, students, freeze_time):
    freeze_time(at(MONDAY, 6, 0))
    token = create_session(client).json()["data"]["token"]

    freeze_time(at(MONDAY, 8, 0))
    response = client.post(
        "/api/v1/kiosk/scan",
        json={"rfid": "RFID-0001", "attendanceType": "timeIn", "sessionToken": token}
    )

    assert response.status_code == 410
    assert response.json()["details"]["code"] == "SESSION_EXPIRED"
