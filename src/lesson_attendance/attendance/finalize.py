from __future__ import annotations

import logging
from datetime import date

from ..core.exceptions import LessonNotFoundError
from ..lessons.repository import LessonRepository
from ..students.repository import StudentRepository
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)


class FinalizeSweeper:
    """Closes a lesson's attendance window: no scan means absent.

    A scan that lands while the sweep runs is not serialized against it; the
    ledger's unique key keeps one row per student either way.
    """

    def __init__(self, ledger: AttendanceLedger, lessons: LessonRepository, students: StudentRepository):
        self._ledger = ledger
        self._lessons = lessons
        self._students = students

    def finalize(self, lesson_id: int, civil_date: date) -> int:
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)

        roster = {s.student_id for s in self._students.list_active_by_class(lesson.class_id) if s.is_active}
        if not roster:
            return 0

        recorded = {r.student_id for r in self._ledger.records_for_lesson_on_date(lesson.lesson_id, civil_date)}
        missing = roster - recorded
        if not missing:
            logger.info("finalize lesson=%s date=%s: nothing to write", lesson.lesson_id, civil_date)
            return 0

        written = self._ledger.insert_absent(lesson_id=lesson.lesson_id, civil_date=civil_date, student_ids=missing)
        logger.info(
            "finalize lesson=%s date=%s: %d absent rows written (roster=%d)",
            lesson.lesson_id,
            civil_date,
            written,
            len(roster),
        )
        return written
