class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when the acting user lacks permission for an action."""


class LessonNotFoundError(DomainError):
    """Raised when an operation targets a lesson that does not exist."""

    def __init__(self, lesson_id: int):
        super().__init__(f"Lesson {lesson_id} not found")
        self.lesson_id = lesson_id


class StorageUnavailable(Exception):
    """Raised on any persistence-layer fault. Safe to retry with the same inputs."""


class TokenError(DomainError):
    """Base class for attendance token rejections."""

    reason = "INVALID_TOKEN"


class MalformedToken(TokenError):
    reason = "MALFORMED_TOKEN"


class BadSignature(TokenError):
    reason = "BAD_SIGNATURE"


class InvalidKind(TokenError):
    reason = "INVALID_KIND"
