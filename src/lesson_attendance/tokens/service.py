from __future__ import annotations

import logging
import secrets
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..common.datetime_utils import to_civil_date, unix_seconds
from ..core.constants import NONCE_BYTES
from ..core.exceptions import LessonNotFoundError
from ..lessons.repository import LessonRepository
from .codec import TokenCodec
from .model import AttendanceToken, IssuedToken

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Mints lesson QR tokens. Authorizing the issuer is done by the caller."""

    def __init__(self, codec: TokenCodec, lessons: LessonRepository, *, ttl_seconds: int, civil_tz: timezone):
        self._codec = codec
        self._lessons = lessons
        self._ttl = timedelta(seconds=int(ttl_seconds))
        self._tz = civil_tz

    def issue(self, lesson_id: int, *, now: datetime, requested_date: Optional[date] = None) -> IssuedToken:
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise LessonNotFoundError(lesson_id)

        civil_date = requested_date or to_civil_date(now, self._tz)
        payload = AttendanceToken(
            lesson_id=lesson.lesson_id,
            civil_date=civil_date,
            expires_at_unix=unix_seconds(now + self._ttl),
            nonce=secrets.token_urlsafe(NONCE_BYTES),
        )
        token = self._codec.sign(payload)

        logger.info("issued token lesson=%s date=%s exp=%s", lesson.lesson_id, civil_date, payload.expires_at_unix)
        return IssuedToken(
            token=token,
            lesson_id=lesson.lesson_id,
            class_id=lesson.class_id,
            civil_date=civil_date,
            expires_at_unix=payload.expires_at_unix,
        )
