from __future__ import annotations

from datetime import MAXYEAR, MINYEAR
from typing import Any

from ..core.exceptions import ValidationError


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be an integer") from exc
    if isinstance(value, bool) or number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be true or false")
    return value


def require_year(value: Any, field_name: str = "year") -> int:
    year = require_positive_int(value, field_name)
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"{field_name} must be between {MINYEAR} and {MAXYEAR}")
    return year
