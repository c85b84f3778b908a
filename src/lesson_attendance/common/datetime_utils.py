from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def fixed_offset(minutes: int) -> timezone:
    """Constant-offset civil timezone. Never resolved through host tz data."""
    return timezone(timedelta(minutes=int(minutes)))


def now_utc() -> datetime:
    """Current instant, timezone-aware.

    Note: Only the HTTP layer calls this; the core takes `now` as a parameter.
    """
    return datetime.now(timezone.utc)


def to_civil_date(instant: datetime, tz: timezone) -> date:
    """Civil date of an instant as observed in `tz`.

    Naive datetimes are taken to be UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz).date()


def as_civil_date(value: date | datetime | str, tz: timezone) -> date:
    if isinstance(value, datetime):
        return to_civil_date(value, tz)
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def civil_day_bounds(day: date, tz: timezone) -> tuple[datetime, datetime]:
    """[00:00:00.000, 23:59:59.999] of `day` in `tz`, as aware datetimes."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max.replace(microsecond=999000), tzinfo=tz)
    return start, end


def week_monday(day: date) -> date:
    """Monday of the school week containing `day`.

    Saturday and Sunday belong to the week that follows them.
    """
    weekday = day.isoweekday()  # 1=Mon .. 7=Sun
    if weekday >= 6:
        return day + timedelta(days=8 - weekday)
    return day - timedelta(days=weekday - 1)


def timestamp(instant: datetime) -> float:
    """POSIX timestamp with sub-second precision. Naive datetimes are taken to be UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.timestamp()


def unix_seconds(instant: datetime) -> int:
    return int(timestamp(instant))
