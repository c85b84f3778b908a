from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest

from fakes import InMemoryLedger, InMemoryLessons, InMemoryStudents
from lesson_attendance.common.datetime_utils import fixed_offset
from lesson_attendance.core.enums import Weekday
from lesson_attendance.lessons.model import Lesson
from lesson_attendance.students.model import Student
from lesson_attendance.tokens.codec import TokenCodec
from lesson_attendance.tokens.model import AttendanceToken, QrSettings

IST = fixed_offset(330)
CLASS_K = 7
OTHER_CLASS = 8
L1 = 101


@pytest.fixture
def ist():
    return IST


@pytest.fixture
def fixed_now():
    # 14:30 IST, Monday 2024-03-04
    return datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def qr_settings():
    return QrSettings(secret=b"unit-test-secret", ttl_seconds=900)


@pytest.fixture
def codec(qr_settings):
    return TokenCodec(qr_settings)


@pytest.fixture
def lessons():
    return InMemoryLessons(
        {
            L1: Lesson(
                lesson_id=L1,
                name="Mathematics",
                class_id=CLASS_K,
                teacher_id="teacher_1",
                day_of_week=Weekday.MONDAY,
                start_time=time(14, 0),
                end_time=time(15, 0),
            )
        }
    )


@pytest.fixture
def students():
    return InMemoryStudents(
        {
            "A": Student("A", CLASS_K, "Asha"),
            "B": Student("B", CLASS_K, "Bilal"),
            "C": Student("C", CLASS_K, "Chen"),
            "D": Student("D", OTHER_CLASS, "Dara"),
            "X": Student("X", CLASS_K, "Xavi", is_deleted=True),
        }
    )


@pytest.fixture
def ledger():
    return InMemoryLedger()


@pytest.fixture
def make_token(codec):
    def _make(*, lesson_id: int = L1, issued_at: datetime, civil_date: date | None = None, ttl: int = 900, nonce="n" * 22):
        payload = AttendanceToken(
            lesson_id=lesson_id,
            civil_date=civil_date or issued_at.astimezone(IST).date(),
            expires_at_unix=int((issued_at + timedelta(seconds=ttl)).timestamp()),
            nonce=nonce,
        )
        return codec.sign(payload)

    return _make
