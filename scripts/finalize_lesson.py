"""Close a lesson's attendance window from the command line.

    python scripts/finalize_lesson.py 12 --date 2024-03-04
"""

from __future__ import annotations

import argparse
import importlib

from config import get_settings_module

from lesson_attendance.common.datetime_utils import fixed_offset, now_utc, parse_iso_date, to_civil_date
from lesson_attendance.common.logging_utils import configure_logging
from lesson_attendance.container import build_container
from lesson_attendance.core.enums import DatePolicy
from lesson_attendance.main import load_qr_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Write absent rows for students who did not scan.")
    parser.add_argument("lesson_id", type=int)
    parser.add_argument("--date", help="civil date YYYY-MM-DD (default: today in the civil timezone)")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    civil_tz = fixed_offset(settings.CIVIL_TZ_OFFSET_MINUTES)

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        qr_settings=load_qr_settings(settings),
        civil_tz=civil_tz,
        date_policy=DatePolicy(settings.ATTENDANCE_DATE_POLICY),
    )
    civil_date = parse_iso_date(args.date) if args.date else to_civil_date(now_utc(), civil_tz)

    written = container.finalize_sweeper.finalize(args.lesson_id, civil_date)
    print(f"OK: lesson {args.lesson_id} on {civil_date.isoformat()} -> {written} absent rows written")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
