"""Domain error codes for the booths module."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    INVALID_OPERATOR_INFO = "INVALID_OPERATOR_INFO"
    INVALID_EXPIRY = "INVALID_EXPIRY"
    RATE_LIMITED = "RATE_LIMITED"
    BOOTH_NOT_FOUND = "BOOTH_NOT_FOUND"
    CODE_NOT_FOUND = "CODE_NOT_FOUND"
    OPERATION_NOT_FOUND = "OPERATION_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    CODE_EXPIRED = "CODE_EXPIRED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    SESSION_INVALID = "SESSION_INVALID"
    BOOTH_INACTIVE = "BOOTH_INACTIVE"
    ADMISSION_DENIED = "ADMISSION_DENIED"
    CODE_CONFLICT = "CODE_CONFLICT"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    retryable = False

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Malformed or missing input. Not retried."""


class NotFoundError(DomainError):
    """A code or id does not resolve."""


class ExpiredError(DomainError):
    """A code or session is past its validity window."""


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidOperatorInfoError(ValidationError):
    """Raised when operator details fail validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_OPERATOR_INFO, message=reason)


class InvalidExpiryError(ValidationError):
    """Raised when a code expiry is not a positive number of days."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EXPIRY,
            message="Code expiry must be at least one day",
        )


class RateLimitedError(DomainError):
    """Raised when an address has too many failed code attempts."""

    def __init__(self, retry_after: timedelta) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message="Too many attempts. Please try again later",
        )
        self.retry_after = retry_after


class BoothNotFoundError(NotFoundError):
    """Raised when a booth is not found."""

    def __init__(self, booth_id: str) -> None:
        super().__init__(code=ErrorCode.BOOTH_NOT_FOUND, message="Booth not found")
        self.booth_id = booth_id


class CodeNotFoundError(NotFoundError):
    """Raised when no booth holds the submitted code."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.CODE_NOT_FOUND, message="Invalid booth code")


class OperationNotFoundError(NotFoundError):
    """Raised when an operation is not found."""

    def __init__(self, operation_id: str) -> None:
        super().__init__(
            code=ErrorCode.OPERATION_NOT_FOUND,
            message="Operation not found",
        )
        self.operation_id = operation_id


class SessionNotFoundError(NotFoundError):
    """Raised when no session matches a token."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.SESSION_NOT_FOUND, message="Session not found")


class CodeExpiredError(ExpiredError):
    """Raised when a booth code is past its expiry."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.CODE_EXPIRED, message="Booth code has expired")


class SessionExpiredError(ExpiredError):
    """Raised when a session is past its expiry."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.SESSION_EXPIRED, message="Session has expired")


class SessionInvalidError(DomainError):
    """Raised when a session is bound to an operation that has closed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SESSION_INVALID,
            message="Session is no longer valid",
        )


class BoothInactiveError(DomainError):
    """Raised when the booth behind a valid code is deactivated."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.BOOTH_INACTIVE, message="Booth is inactive")


class AdmissionDeniedError(DomainError):
    """Raised when a booth already has its maximum of active operators."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            code=ErrorCode.ADMISSION_DENIED,
            message=f"This booth allows at most {limit} concurrent operators",
        )
        self.limit = limit


class CodeConflictError(DomainError):
    """Raised when storage rejects a code already held by another booth."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.CODE_CONFLICT,
            message="Booth code is already in use",
        )
        self.booth_code = code


class StorageUnavailableError(DomainError):
    """Transient storage failure. Safe for the caller to retry."""

    retryable = True

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Storage is temporarily unavailable",
        )
        self.detail = detail
