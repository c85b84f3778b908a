from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone

from .attendance.finalize import FinalizeSweeper
from .attendance.mysql_attendance_repository import MySQLAttendanceLedger
from .attendance.repository import AttendanceLedger
from .attendance.scan_handler import ScanHandler
from .attendance.service import AttendanceCorrectionService
from .core.enums import DatePolicy
from .database.connection import DBConfig, DatabaseConnection
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.repository import LessonRepository
from .reports.service import AttendanceReportService, WeeklySummaryAggregator
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .tokens.codec import TokenCodec
from .tokens.model import QrSettings
from .tokens.service import TokenIssuer


@dataclass(frozen=True)
class Container:
    civil_tz: timezone

    token_issuer: TokenIssuer
    scan_handler: ScanHandler
    finalize_sweeper: FinalizeSweeper
    correction_service: AttendanceCorrectionService
    weekly_summary: WeeklySummaryAggregator
    report_service: AttendanceReportService


def wire_container(
    *,
    lessons_repo: LessonRepository,
    students_repo: StudentRepository,
    ledger: AttendanceLedger,
    qr_settings: QrSettings,
    civil_tz: timezone,
    date_policy: DatePolicy = DatePolicy.SCAN_DATE,
) -> Container:
    codec = TokenCodec(qr_settings)
    return Container(
        civil_tz=civil_tz,
        token_issuer=TokenIssuer(codec, lessons_repo, ttl_seconds=qr_settings.ttl_seconds, civil_tz=civil_tz),
        scan_handler=ScanHandler(
            codec,
            ledger,
            lessons_repo,
            students_repo,
            civil_tz=civil_tz,
            date_policy=date_policy,
        ),
        finalize_sweeper=FinalizeSweeper(ledger, lessons_repo, students_repo),
        correction_service=AttendanceCorrectionService(ledger, lessons_repo, students_repo),
        weekly_summary=WeeklySummaryAggregator(ledger, civil_tz=civil_tz),
        report_service=AttendanceReportService(ledger, lessons_repo, students_repo),
    )


def build_container(
    *,
    db_config: dict,
    qr_settings: QrSettings,
    civil_tz: timezone,
    date_policy: DatePolicy = DatePolicy.SCAN_DATE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        lessons_repo=MySQLLessonRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        ledger=MySQLAttendanceLedger(conn),
        qr_settings=qr_settings,
        civil_tz=civil_tz,
        date_policy=date_policy,
    )
