from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import Weekday


@dataclass(frozen=True)
class Lesson:
    """Lesson as owned by the school application. Read-only here."""

    lesson_id: int
    name: str
    class_id: int
    teacher_id: str
    day_of_week: Weekday
    start_time: time
    end_time: time
