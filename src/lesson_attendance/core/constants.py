"""Constants and defaults."""

TOKEN_KIND = "lesson_attendance"
DEFAULT_TOKEN_TTL_SECONDS = 15 * 60
NONCE_BYTES = 16

# IST (UTC+05:30)
DEFAULT_CIVIL_TZ_OFFSET_MINUTES = 330

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri")
