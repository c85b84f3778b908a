from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.constants import TOKEN_KIND


@dataclass(frozen=True)
class AttendanceToken:
    """Payload of a lesson QR code. Ephemeral, never persisted."""

    lesson_id: int
    civil_date: date
    expires_at_unix: int
    nonce: str
    kind: str = TOKEN_KIND


@dataclass(frozen=True)
class QrSettings:
    """Signing configuration, built once at startup."""

    secret: bytes
    ttl_seconds: int

    def __post_init__(self):
        if not self.secret:
            raise ValueError("QR signing secret must not be empty")
        if self.ttl_seconds <= 0:
            raise ValueError("QR token TTL must be positive")

    def __repr__(self) -> str:
        return f"QrSettings(secret=<redacted>, ttl_seconds={self.ttl_seconds})"


@dataclass(frozen=True)
class IssuedToken:
    token: str
    lesson_id: int
    class_id: int
    civil_date: date
    expires_at_unix: int

    def metadata(self) -> dict:
        return {
            "lessonId": self.lesson_id,
            "classId": self.class_id,
            "civilDate": self.civil_date.isoformat(),
            "expiresAtUnix": self.expires_at_unix,
        }
