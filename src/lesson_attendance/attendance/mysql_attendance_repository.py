from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.exceptions import StorageUnavailable
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import AttendanceRecord, DayCount
from .repository import AttendanceLedger

logger = logging.getLogger(__name__)

_ER_DUP_ENTRY = 1062

_COLUMNS = "attendance_id, student_id, lesson_id, civil_date, present"


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["attendance_id"]),
        student_id=str(r["student_id"]),
        lesson_id=int(r["lesson_id"]),
        civil_date=to_date(r["civil_date"]),
        present=bool(r["present"]),
    )


class MySQLAttendanceLedger(AttendanceLedger):
    """Ledger on the `lesson_attendance` table.

    Relies on uq_attendance_student_lesson_date for per-key atomicity.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, student_id: str, lesson_id: int, civil_date: date, present: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid report the surviving row on conflict.
            cur.execute(
                """
                INSERT INTO lesson_attendance(student_id, lesson_id, civil_date, present)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    present=VALUES(present)
                """,
                (str(student_id), int(lesson_id), civil_date, int(bool(present))),
            )
            return int(cur.lastrowid)

    def existing(self, *, student_id: str, lesson_id: int, civil_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lesson_attendance
                WHERE student_id=%s AND lesson_id=%s AND civil_date=%s
                """,
                (str(student_id), int(lesson_id), civil_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def records_for_lesson_on_date(self, lesson_id: int, civil_date: date) -> set[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lesson_attendance
                WHERE lesson_id=%s AND civil_date=%s
                """,
                (int(lesson_id), civil_date),
            )
            return {_row_to_record(r) for r in fetchall(cur)}

    def insert_absent(self, *, lesson_id: int, civil_date: date, student_ids: Iterable[str]) -> int:
        ids = sorted({str(s) for s in student_ids})
        if not ids:
            return 0

        placeholders = ",".join(["(%s,%s,%s,0)"] * len(ids))
        params: list[object] = []
        for student_id in ids:
            params.extend([student_id, int(lesson_id), civil_date])

        with db_cursor(self._conn_factory) as (_, cur):
            # IGNORE keeps rows a concurrent scan already created.
            cur.execute(
                f"""
                INSERT IGNORE INTO lesson_attendance(student_id, lesson_id, civil_date, present)
                VALUES {placeholders}
                """,
                tuple(params),
            )
            written = max(int(cur.rowcount), 0)
            if written < len(ids):
                # IGNORE also downgrades FK and data errors; only duplicates may pass.
                cur.execute("SHOW WARNINGS")
                unexpected = [w for w in fetchall(cur) if int(w["Code"]) != _ER_DUP_ENTRY]
                if unexpected:
                    logger.error("absent batch lesson=%s date=%s failed: %s", lesson_id, civil_date, unexpected[0]["Message"])
                    raise StorageUnavailable("absent batch rejected by the database")

        if written < len(ids):
            logger.warning(
                "absent batch lesson=%s date=%s: %d of %d rows skipped (already recorded)",
                lesson_id,
                civil_date,
                len(ids) - written,
                len(ids),
            )
        return written

    def day_counts(self, lesson_id: int, *, start_date: date, end_date: date) -> dict[date, DayCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT civil_date,
                       COALESCE(SUM(present = 1), 0) AS present_count,
                       COUNT(*) AS total_count
                FROM lesson_attendance
                WHERE lesson_id=%s AND civil_date BETWEEN %s AND %s
                GROUP BY civil_date
                """,
                (int(lesson_id), start_date, end_date),
            )
            out: dict[date, DayCount] = {}
            for r in fetchall(cur):
                d = to_date(r["civil_date"])
                out[d] = DayCount(civil_date=d, present=int(r["present_count"]), total=int(r["total_count"]))
            return out

    def records_for_student_since(self, student_id: str, since: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lesson_attendance
                WHERE student_id=%s AND civil_date >= %s
                ORDER BY civil_date, lesson_id
                """,
                (str(student_id), since),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
