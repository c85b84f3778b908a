from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..attendance.repository import AttendanceLedger
from ..common.datetime_utils import as_civil_date, civil_day_bounds, week_monday
from ..core.constants import WEEKDAY_LABELS
from ..core.exceptions import LessonNotFoundError
from ..lessons.repository import LessonRepository
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class WeekdayPoint:
    weekday: str
    civil_date: date
    starts_at: datetime
    ends_at: datetime
    present: int
    absent: int

    def to_dict(self) -> dict:
        return {
            "weekday": self.weekday,
            "date": self.civil_date.isoformat(),
            "startsAt": self.starts_at.isoformat(timespec="milliseconds"),
            "endsAt": self.ends_at.isoformat(timespec="milliseconds"),
            "present": self.present,
            "absent": self.absent,
        }


@dataclass(frozen=True)
class DailySummary:
    lesson_id: int
    civil_date: date
    present: int
    absent: int

    def to_dict(self) -> dict:
        return {
            "lessonId": self.lesson_id,
            "date": self.civil_date.isoformat(),
            "present": self.present,
            "absent": self.absent,
        }


class WeeklySummaryAggregator:
    """Mon-Fri present/absent series for one lesson, in a fixed civil timezone.

    Day boundaries come from a constant UTC offset, so the result does not
    depend on the host's timezone.
    """

    def __init__(self, ledger: AttendanceLedger, *, civil_tz: timezone):
        self._ledger = ledger
        self._tz = civil_tz

    def summarize(self, lesson_id: int, any_date_in_week: date | datetime | str) -> list[WeekdayPoint]:
        monday = week_monday(as_civil_date(any_date_in_week, self._tz))
        days = [monday + timedelta(days=i) for i in range(len(WEEKDAY_LABELS))]
        counts = self._ledger.day_counts(lesson_id, start_date=days[0], end_date=days[-1])

        series = []
        for label, day in zip(WEEKDAY_LABELS, days):
            starts_at, ends_at = civil_day_bounds(day, self._tz)
            c = counts.get(day)
            present = c.present if c else 0
            total = c.total if c else 0
            series.append(
                WeekdayPoint(
                    weekday=label,
                    civil_date=day,
                    starts_at=starts_at,
                    ends_at=ends_at,
                    present=present,
                    # A sweep racing this read can leave total momentarily behind present.
                    absent=max(total - present, 0),
                )
            )
        return series


class AttendanceReportService:
    """Per-day and per-student figures for dashboards."""

    def __init__(self, ledger: AttendanceLedger, lessons: LessonRepository, students: StudentRepository):
        self._ledger = ledger
        self._lessons = lessons
        self._students = students

    def daily_summary(self, lesson_id: int, civil_date: date) -> DailySummary:
        """Present rows against the active roster of the lesson's class.

        Students who have not scanned count as absent even before finalize.
        """
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)

        roster_size = len(self._students.list_active_by_class(lesson.class_id))
        c = self._ledger.day_counts(lesson.lesson_id, start_date=civil_date, end_date=civil_date).get(civil_date)
        present = c.present if c else 0
        return DailySummary(
            lesson_id=lesson.lesson_id,
            civil_date=civil_date,
            present=present,
            absent=max(roster_size - present, 0),
        )

    def student_attendance_rate(self, student_id: str, *, year: int) -> Optional[int]:
        """Whole-number percentage of present rows since 1 January, None without rows."""
        records = self._ledger.records_for_student_since(student_id, date(year, 1, 1))
        if not records:
            return None
        present = sum(1 for r in records if r.present)
        return round(present * 100 / len(records))
