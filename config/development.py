import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lesson_attendance"),
}

# HMAC key for lesson QR tokens
QR_SECRET = os.getenv("QR_SECRET", "dev-secret-change-me")
QR_TTL_SECONDS = int(os.getenv("QR_TTL_SECONDS", "900"))

# Civil timezone as a fixed UTC offset (IST = +330)
CIVIL_TZ_OFFSET_MINUTES = int(os.getenv("CIVIL_TZ_OFFSET_MINUTES", "330"))

# 'scan_date' or 'token_date'
ATTENDANCE_DATE_POLICY = os.getenv("ATTENDANCE_DATE_POLICY", "scan_date")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
