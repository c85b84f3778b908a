import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lesson_attendance"),
}

# No default: the app refuses to start without it.
QR_SECRET = os.getenv("QR_SECRET")
QR_TTL_SECONDS = int(os.getenv("QR_TTL_SECONDS", "900"))

CIVIL_TZ_OFFSET_MINUTES = int(os.getenv("CIVIL_TZ_OFFSET_MINUTES", "330"))
ATTENDANCE_DATE_POLICY = os.getenv("ATTENDANCE_DATE_POLICY", "scan_date")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
