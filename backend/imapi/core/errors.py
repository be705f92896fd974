"""
Domain errors shared by the services.

Every business-rule failure is a ``DomainError`` carrying a ``kind`` so callers
can branch on the failure instead of on the message. Infrastructure failures
(database unreachable and the like) are never wrapped here.
"""
import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    """Discriminator for domain failures."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTH = "auth"
    UPSTREAM = "upstream"


class AuthFailure(str, enum.Enum):
    """Reason attached to an AuthError."""
    BAD_CREDENTIALS = "bad_credentials"
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    EXPIRED = "expired"
    NOT_OWNER = "not_owner"


class DomainError(Exception):
    """Business logic failure, distinct from infrastructure errors."""
    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT


class AuthError(DomainError):
    kind = ErrorKind.AUTH

    def __init__(self, reason: AuthFailure, message: Optional[str] = None):
        super().__init__(message or _AUTH_MESSAGES[reason])
        self.reason = reason


class UpstreamError(DomainError):
    kind = ErrorKind.UPSTREAM


_AUTH_MESSAGES = {
    AuthFailure.BAD_CREDENTIALS: "Username or password is incorrect",
    AuthFailure.MISSING_TOKEN: "Not authorized for this route - token missing",
    AuthFailure.INVALID_TOKEN: "Invalid token",
    AuthFailure.EXPIRED: "Token has expired",
    AuthFailure.NOT_OWNER: "Not allowed to modify this review",
}
