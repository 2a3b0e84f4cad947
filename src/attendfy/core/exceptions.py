from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations.

    `status_code` is the HTTP status the API layer answers with.
    """

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class AuthenticationError(DomainError):
    """Raised when the caller's identity cannot be established."""

    status_code = 401
    default_message = "Authentication failed"


class NoToken(AuthenticationError):
    default_message = "No authentication token, access denied"


class InvalidToken(AuthenticationError):
    default_message = "Token is invalid"


class UserNotFound(AuthenticationError):
    default_message = "User not found"


class AccountDeactivated(AuthenticationError):
    default_message = "User account is deactivated"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid credentials"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    default_message = "Access denied"


class Forbidden(AuthorizationError):
    pass


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class RecordNotFound(NotFoundError):
    default_message = "Attendance record not found"


class ConflictError(DomainError):
    """Duplicate data or an invalid state transition."""

    status_code = 400
    default_message = "Conflict"


class AlreadyCheckedIn(ConflictError):
    default_message = "Already checked in today"


class NoCheckInFound(ConflictError):
    default_message = "No check-in found for today"


class AlreadyCheckedOut(ConflictError):
    default_message = "Already checked out today"


class DeviceNotFound(NotFoundError):
    default_message = "Device not found"


class DeviceExists(ConflictError):
    default_message = "Device already exists"
