"""Redeeming a lesson QR token.

Steps run strictly in order and stop at the first terminal outcome:
signature, expiry, lesson, student, class, existing row, write.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from ..common.datetime_utils import timestamp, to_civil_date
from ..core.enums import DatePolicy, ScanOutcome
from ..core.exceptions import TokenError
from ..lessons.repository import LessonRepository
from ..students.repository import StudentRepository
from ..tokens.codec import TokenCodec
from .model import ScanResult
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)


class ScanHandler:
    def __init__(
        self,
        codec: TokenCodec,
        ledger: AttendanceLedger,
        lessons: LessonRepository,
        students: StudentRepository,
        *,
        civil_tz: timezone,
        date_policy: DatePolicy = DatePolicy.SCAN_DATE,
    ):
        self._codec = codec
        self._ledger = ledger
        self._lessons = lessons
        self._students = students
        self._tz = civil_tz
        self._date_policy = DatePolicy(date_policy)

    def handle_scan(self, actor_student_id: str, token_string: str, *, now: datetime) -> ScanResult:
        """Turn a redeemed token into at most one ledger write.

        Token and business rejections come back as ScanResult outcomes;
        StorageUnavailable propagates and the call may be retried as is.
        """
        try:
            token = self._codec.verify(token_string)
        except TokenError as exc:
            logger.info("scan rejected student=%s reason=%s", actor_student_id, exc.reason)
            return ScanResult(ScanOutcome.INVALID_TOKEN, reason=exc.reason)

        if token.expires_at_unix < timestamp(now):
            logger.info("scan rejected student=%s lesson=%s: token expired", actor_student_id, token.lesson_id)
            return ScanResult(ScanOutcome.TOKEN_EXPIRED)

        lesson = self._lessons.get_by_id(token.lesson_id)
        if not lesson:
            return ScanResult(ScanOutcome.LESSON_NOT_FOUND)

        student = self._students.get_by_id(actor_student_id)
        if not student or not student.is_active:
            return ScanResult(ScanOutcome.STUDENT_INACTIVE)

        if student.class_id != lesson.class_id:
            logger.info(
                "scan wrong class student=%s class=%s lesson=%s class=%s",
                student.student_id,
                student.class_id,
                lesson.lesson_id,
                lesson.class_id,
            )
            return ScanResult(ScanOutcome.WRONG_CLASS)

        if self._date_policy == DatePolicy.TOKEN_DATE:
            civil_date = token.civil_date
        else:
            civil_date = to_civil_date(now, self._tz)

        existing = self._ledger.existing(
            student_id=student.student_id, lesson_id=lesson.lesson_id, civil_date=civil_date
        )
        if existing:
            return ScanResult(ScanOutcome.ALREADY_RECORDED, record_id=existing.record_id, civil_date=civil_date)

        record_id = self._ledger.upsert(
            student_id=student.student_id,
            lesson_id=lesson.lesson_id,
            civil_date=civil_date,
            present=True,
        )
        logger.info("attendance recorded student=%s lesson=%s date=%s", student.student_id, lesson.lesson_id, civil_date)
        return ScanResult(ScanOutcome.RECORDED, record_id=record_id, civil_date=civil_date)
