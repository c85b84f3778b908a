from __future__ import annotations

import logging
from datetime import date

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, LessonNotFoundError, ValidationError
from ..lessons.repository import LessonRepository
from ..students.repository import StudentRepository
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)


class AttendanceCorrectionService:
    """Manual teacher/admin override of a single ledger row."""

    def __init__(self, ledger: AttendanceLedger, lessons: LessonRepository, students: StudentRepository):
        self._ledger = ledger
        self._lessons = lessons
        self._students = students

    def correct(
        self,
        *,
        current_role: Role,
        student_id: str,
        lesson_id: int,
        civil_date: date,
        present: bool,
    ) -> int:
        if current_role not in (Role.TEACHER, Role.ADMIN):
            raise AuthorizationError("Only teachers and admins can correct attendance")

        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)

        student = self._students.get_by_id(student_id)
        if not student or not student.is_active:
            raise ValidationError("Student not found or inactive")
        if student.class_id != lesson.class_id:
            raise ValidationError("Student is not enrolled in this lesson's class")

        record_id = self._ledger.upsert(
            student_id=student.student_id,
            lesson_id=lesson.lesson_id,
            civil_date=civil_date,
            present=bool(present),
        )
        logger.info(
            "attendance corrected student=%s lesson=%s date=%s present=%s",
            student.student_id,
            lesson.lesson_id,
            civil_date,
            present,
        )
        return record_id
