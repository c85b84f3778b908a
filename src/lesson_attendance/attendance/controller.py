from __future__ import annotations

import base64
import io
import logging
from functools import wraps

import qrcode
from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_utc, parse_iso_date, to_civil_date
from ..common.validators import require_bool, require_non_empty, require_positive_int, require_year
from ..container import Container
from ..core.enums import Role, ScanOutcome
from ..core.exceptions import AuthorizationError, LessonNotFoundError, StorageUnavailable, ValidationError

logger = logging.getLogger(__name__)


def _error(status: int, error: str, message: str):
    return jsonify({"ok": False, "error": error, "message": message}), status


def render_qr_png(data: str) -> str:
    """PNG of `data` as a base64 string, ready for a data: URL."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


def register(app: Flask, container: Container) -> None:
    def roles_required(*roles: Role):
        allowed = {r.value for r in roles}

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "user_id" not in session:
                    return _error(401, "UNAUTHENTICATED", "Please sign in to continue.")
                if session.get("role") not in allowed:
                    return _error(403, "FORBIDDEN", "You do not have access to this action.")
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def _date_arg(value):
        if value in (None, ""):
            return to_civil_date(now_utc(), container.civil_tz)
        return parse_iso_date(value)

    @app.errorhandler(StorageUnavailable)
    def storage_unavailable(e):
        logger.error("storage unavailable on %s %s: %s", request.method, request.path, e)
        body = {"ok": False, "error": "STORAGE_UNAVAILABLE", "retryable": True, "message": "Please try again."}
        return jsonify(body), 503

    @app.route("/api/attendance/lesson-qr", methods=["POST"], endpoint="attendance_lesson_qr")
    @roles_required(Role.TEACHER)
    def lesson_qr():
        data = request.get_json(silent=True) or {}
        try:
            lesson_id = require_positive_int(data.get("lessonId"), "lessonId")
            requested = data.get("date")
            requested_date = parse_iso_date(requested) if requested else None
            issued = container.token_issuer.issue(lesson_id, now=now_utc(), requested_date=requested_date)
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))
        except LessonNotFoundError as e:
            return _error(404, "LESSON_NOT_FOUND", str(e))

        return jsonify({"token": issued.token, "qr_png": render_qr_png(issued.token), "metadata": issued.metadata()})

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @roles_required(Role.STUDENT)
    def scan():
        data = request.get_json(silent=True) or {}
        token = data.get("token")
        if not isinstance(token, str) or not token.strip():
            return _error(400, "VALIDATION_ERROR", "token is required")

        result = container.scan_handler.handle_scan(str(session["user_id"]), token, now=now_utc())
        # Wrong class and already-recorded are expected user situations, not failures.
        status = 200 if result.ok or result.outcome == ScanOutcome.WRONG_CLASS else 400
        return jsonify(result.to_response()), status

    @app.route("/api/attendance/finalize", methods=["POST"], endpoint="attendance_finalize")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def finalize():
        data = request.get_json(silent=True) or {}
        try:
            lesson_id = require_positive_int(data.get("lessonId"), "lessonId")
            civil_date = _date_arg(data.get("date"))
            written = container.finalize_sweeper.finalize(lesson_id, civil_date)
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))
        except LessonNotFoundError as e:
            return _error(404, "LESSON_NOT_FOUND", str(e))

        return jsonify({"ok": True, "writtenCount": written, "date": civil_date.isoformat()})

    @app.route("/api/attendance/records", methods=["PUT"], endpoint="attendance_correct")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def correct_record():
        data = request.get_json(silent=True) or {}
        try:
            record_id = container.correction_service.correct(
                current_role=Role(session["role"]),
                student_id=require_non_empty(data.get("studentId"), "studentId"),
                lesson_id=require_positive_int(data.get("lessonId"), "lessonId"),
                civil_date=parse_iso_date(data.get("date")),
                present=require_bool(data.get("present"), "present"),
            )
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))
        except AuthorizationError as e:
            return _error(403, "FORBIDDEN", str(e))
        except LessonNotFoundError as e:
            return _error(404, "LESSON_NOT_FOUND", str(e))

        return jsonify({"ok": True, "recordId": record_id})

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def weekly_summary():
        try:
            lesson_id = require_positive_int(request.args.get("lessonId"), "lessonId")
            civil_date = _date_arg(request.args.get("date"))
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))

        series = container.weekly_summary.summarize(lesson_id, civil_date)
        return jsonify({"lessonId": lesson_id, "week": [p.to_dict() for p in series]})

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="attendance_daily")
    @roles_required(Role.TEACHER, Role.ADMIN)
    def daily_summary():
        try:
            lesson_id = require_positive_int(request.args.get("lessonId"), "lessonId")
            civil_date = _date_arg(request.args.get("date"))
            summary = container.report_service.daily_summary(lesson_id, civil_date)
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))
        except LessonNotFoundError as e:
            return _error(404, "LESSON_NOT_FOUND", str(e))

        return jsonify(summary.to_dict())

    @app.route("/api/attendance/students/<student_id>/rate", methods=["GET"], endpoint="attendance_student_rate")
    @roles_required(Role.STUDENT, Role.TEACHER, Role.ADMIN)
    def student_rate(student_id: str):
        if session.get("role") == Role.STUDENT.value and str(session["user_id"]) != student_id:
            return _error(403, "FORBIDDEN", "Students can only view their own attendance.")
        try:
            year_arg = request.args.get("year")
            year = require_year(year_arg) if year_arg else to_civil_date(now_utc(), container.civil_tz).year
        except ValidationError as e:
            return _error(400, "VALIDATION_ERROR", str(e))

        rate = container.report_service.student_attendance_rate(student_id, year=year)
        return jsonify({"studentId": student_id, "year": year, "percentage": rate})
