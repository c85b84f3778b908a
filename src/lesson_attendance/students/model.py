from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Roster entry. `is_deleted` marks a soft-deleted (inactive) student."""

    student_id: str
    class_id: int
    full_name: str = ""
    is_deleted: bool = False

    @property
    def is_active(self) -> bool:
        return not self.is_deleted
