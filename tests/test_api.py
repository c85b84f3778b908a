from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest

from lesson_attendance.attendance import controller
from lesson_attendance.container import wire_container
from lesson_attendance.core.exceptions import StorageUnavailable
from lesson_attendance.main import create_app

NOW = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(monkeypatch):
    state = {"now": NOW}
    monkeypatch.setattr(controller, "now_utc", lambda: state["now"])
    return state


@pytest.fixture
def client(monkeypatch, clock, ledger, lessons, students, qr_settings, ist):
    monkeypatch.setenv("APP_ENV", "testing")
    container = wire_container(
        lessons_repo=lessons,
        students_repo=students,
        ledger=ledger,
        qr_settings=qr_settings,
        civil_tz=ist,
    )
    app = create_app(container=container)
    return app.test_client()


def login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def issue(client):
    login(client, "teacher_1", "teacher")
    res = client.post("/api/attendance/lesson-qr", json={"lessonId": 101})
    assert res.status_code == 200
    return res.get_json()


def test_issue_returns_token_png_and_metadata(client):
    body = issue(client)

    assert body["metadata"]["lessonId"] == 101
    assert body["metadata"]["classId"] == 7
    assert body["metadata"]["civilDate"] == "2024-03-04"
    assert body["metadata"]["expiresAtUnix"] == int(NOW.timestamp()) + 900
    assert base64.b64decode(body["qr_png"]).startswith(b"\x89PNG")


def test_issue_requires_teacher(client):
    login(client, "A", "student")

    assert client.post("/api/attendance/lesson-qr", json={"lessonId": 101}).status_code == 403


def test_issue_validation_and_missing_lesson(client):
    login(client, "teacher_1", "teacher")

    assert client.post("/api/attendance/lesson-qr", json={"lessonId": "abc"}).status_code == 400
    assert client.post("/api/attendance/lesson-qr", json={"lessonId": 101, "date": "nope"}).status_code == 400
    assert client.post("/api/attendance/lesson-qr", json={"lessonId": 999}).status_code == 404


def test_scan_flow_over_http(client, clock, ledger):
    token = issue(client)["token"]

    login(client, "A", "student")
    first = client.post("/api/attendance/scan", json={"token": token})
    again = client.post("/api/attendance/scan", json={"token": token})
    login(client, "D", "student")
    wrong = client.post("/api/attendance/scan", json={"token": token})
    clock["now"] = NOW + timedelta(minutes=20)
    login(client, "B", "student")
    expired = client.post("/api/attendance/scan", json={"token": token})

    assert first.status_code == 200
    assert first.get_json()["alreadyRecorded"] is False
    assert again.get_json()["alreadyRecorded"] is True
    assert wrong.status_code == 200
    assert wrong.get_json()["wrongClass"] is True
    assert expired.status_code == 400
    assert expired.get_json()["error"] == "TOKEN_EXPIRED"
    assert ledger.count() == 1


def test_scan_requires_login_and_token(client):
    assert client.post("/api/attendance/scan", json={"token": "x.y"}).status_code == 401

    login(client, "A", "student")
    assert client.post("/api/attendance/scan", json={}).status_code == 400


def test_finalize_then_summaries(client):
    token = issue(client)["token"]
    login(client, "A", "student")
    client.post("/api/attendance/scan", json={"token": token})

    login(client, "teacher_1", "teacher")
    first = client.post("/api/attendance/finalize", json={"lessonId": 101, "date": "2024-03-04"})
    second = client.post("/api/attendance/finalize", json={"lessonId": 101})
    week = client.get("/api/attendance/summary?lessonId=101&date=2024-03-09")
    this_week = client.get("/api/attendance/summary?lessonId=101&date=2024-03-06")
    daily = client.get("/api/attendance/daily?lessonId=101&date=2024-03-04")

    assert first.get_json() == {"ok": True, "writtenCount": 2, "date": "2024-03-04"}
    assert second.get_json()["writtenCount"] == 0
    assert week.get_json()["week"][0]["date"] == "2024-03-11"
    assert this_week.get_json()["week"][0]["present"] == 1
    assert this_week.get_json()["week"][0]["absent"] == 2
    assert daily.get_json()["present"] == 1


def test_finalize_unknown_lesson_is_404(client):
    login(client, "admin_1", "admin")

    assert client.post("/api/attendance/finalize", json={"lessonId": 999}).status_code == 404


def test_manual_correction(client, ledger):
    login(client, "teacher_1", "teacher")

    res = client.put(
        "/api/attendance/records",
        json={"studentId": "B", "lessonId": 101, "date": "2024-03-04", "present": True},
    )
    bad = client.put(
        "/api/attendance/records",
        json={"studentId": "B", "lessonId": 101, "date": "2024-03-04", "present": "yes"},
    )

    assert res.status_code == 200
    assert res.get_json()["recordId"] > 0
    assert bad.status_code == 400
    assert ledger.count() == 1


def test_student_rate_is_private(client, ledger):
    login(client, "A", "student")

    assert client.get("/api/attendance/students/B/rate?year=2024").status_code == 403
    own = client.get("/api/attendance/students/A/rate?year=2024").get_json()
    assert own == {"studentId": "A", "year": 2024, "percentage": None}


def test_storage_outage_is_retryable_503(client, ledger):
    token = issue(client)["token"]
    ledger.fail_with = StorageUnavailable("down")
    login(client, "A", "student")

    res = client.post("/api/attendance/scan", json={"token": token})

    assert res.status_code == 503
    assert res.get_json()["retryable"] is True


@pytest.mark.parametrize("year", ["10000", "0", "abc"])
def test_student_rate_rejects_out_of_range_year(client, year):
    login(client, "A", "student")

    res = client.get(f"/api/attendance/students/A/rate?year={year}")

    assert res.status_code == 400
    assert res.get_json()["error"] == "VALIDATION_ERROR"
