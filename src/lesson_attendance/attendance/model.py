from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ScanOutcome


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance outcome per (student_id, lesson_id, civil_date)."""

    record_id: int
    student_id: str
    lesson_id: int
    civil_date: date
    present: bool


@dataclass(frozen=True)
class DayCount:
    """Read-model: row counts for one lesson on one civil date."""

    civil_date: date
    present: int
    total: int


_MESSAGES = {
    ScanOutcome.RECORDED: "Attendance recorded.",
    ScanOutcome.ALREADY_RECORDED: "Attendance already recorded for this lesson and date.",
    ScanOutcome.WRONG_CLASS: "You belong to a different class. This QR code is not for your class.",
    ScanOutcome.INVALID_TOKEN: "This QR code is not valid.",
    ScanOutcome.TOKEN_EXPIRED: "This QR code has expired. Ask your teacher for a new one.",
    ScanOutcome.LESSON_NOT_FOUND: "The lesson for this QR code no longer exists.",
    ScanOutcome.STUDENT_INACTIVE: "Student not found or inactive.",
}


@dataclass(frozen=True)
class ScanResult:
    outcome: ScanOutcome
    record_id: Optional[int] = None
    civil_date: Optional[date] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (ScanOutcome.RECORDED, ScanOutcome.ALREADY_RECORDED)

    @property
    def message(self) -> str:
        return _MESSAGES[self.outcome]

    def to_response(self) -> dict:
        if self.outcome == ScanOutcome.RECORDED:
            return {"ok": True, "alreadyRecorded": False, "recordId": self.record_id, "message": self.message}
        if self.outcome == ScanOutcome.ALREADY_RECORDED:
            return {"ok": True, "alreadyRecorded": True, "message": self.message}
        if self.outcome == ScanOutcome.WRONG_CLASS:
            return {"ok": False, "wrongClass": True, "message": self.message}

        body = {"ok": False, "error": self.outcome.value, "message": self.message}
        if self.reason:
            body["reason"] = self.reason
        return body
