import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lesson_attendance_test"),
}

QR_SECRET = "test-qr-secret"
QR_TTL_SECONDS = 900
CIVIL_TZ_OFFSET_MINUTES = 330
ATTENDANCE_DATE_POLICY = "scan_date"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
