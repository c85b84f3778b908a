from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the session by the identity provider."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class ScanOutcome(str, Enum):
    """Terminal states of a single scan attempt."""

    RECORDED = "RECORDED"
    ALREADY_RECORDED = "ALREADY_RECORDED"
    WRONG_CLASS = "WRONG_CLASS"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    LESSON_NOT_FOUND = "LESSON_NOT_FOUND"
    STUDENT_INACTIVE = "STUDENT_INACTIVE"


class DatePolicy(str, Enum):
    """Which civil date a scan is attributed to."""

    SCAN_DATE = "scan_date"
    TOKEN_DATE = "token_date"
