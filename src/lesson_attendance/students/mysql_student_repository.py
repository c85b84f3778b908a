from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["student_id"]),
        class_id=int(r["class_id"]),
        full_name=r.get("full_name") or "",
        is_deleted=bool(r.get("is_deleted")),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, class_id, full_name, is_deleted FROM students WHERE student_id=%s",
                (str(student_id),),
            )
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def list_active_by_class(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, class_id, full_name, is_deleted
                FROM students
                WHERE class_id=%s AND is_deleted=0
                ORDER BY student_id
                """,
                (int(class_id),),
            )
            return [_row_to_student(r) for r in fetchall(cur)]
