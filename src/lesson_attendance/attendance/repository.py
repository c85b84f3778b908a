from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord, DayCount


class AttendanceLedger(Protocol):
    """Single source of truth for presence.

    At most one row exists per (student_id, lesson_id, civil_date), whatever the
    number of concurrent writers. Persistence faults raise StorageUnavailable.
    """

    def upsert(self, *, student_id: str, lesson_id: int, civil_date: date, present: bool) -> int:
        """Create the row or overwrite its `present` flag. Returns the record id."""
        raise NotImplementedError

    def existing(self, *, student_id: str, lesson_id: int, civil_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def records_for_lesson_on_date(self, lesson_id: int, civil_date: date) -> set[AttendanceRecord]:
        raise NotImplementedError

    def insert_absent(self, *, lesson_id: int, civil_date: date, student_ids: Iterable[str]) -> int:
        """Batch-create present=false rows in one write.

        Keys that already exist are skipped one by one, never failing the batch.
        Returns the number of rows created.
        """
        raise NotImplementedError

    def day_counts(self, lesson_id: int, *, start_date: date, end_date: date) -> dict[date, DayCount]:
        """Present/total row counts per civil date in [start_date, end_date]."""
        raise NotImplementedError

    def records_for_student_since(self, student_id: str, since: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
