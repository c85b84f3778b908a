from __future__ import annotations

from typing import Optional

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_time
from .model import Lesson
from .repository import LessonRepository


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lesson_id, lesson_name, class_id, teacher_id, day_of_week, start_time, end_time
                FROM lessons
                WHERE lesson_id=%s
                """,
                (int(lesson_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Lesson(
                lesson_id=int(r["lesson_id"]),
                name=r["lesson_name"],
                class_id=int(r["class_id"]),
                teacher_id=str(r["teacher_id"]),
                day_of_week=Weekday(r["day_of_week"]),
                start_time=to_time(r["start_time"]),
                end_time=to_time(r["end_time"]),
            )
