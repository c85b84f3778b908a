from __future__ import annotations

from typing import Optional, Protocol

from .model import Lesson


class LessonRepository(Protocol):
    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        raise NotImplementedError
