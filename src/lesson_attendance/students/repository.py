from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        """Return the student, soft-deleted or not."""
        raise NotImplementedError

    def list_active_by_class(self, class_id: int) -> Sequence[Student]:
        raise NotImplementedError
