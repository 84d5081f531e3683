from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` and the HTTP
    status the controllers answer with.
    """

    code = "DOMAIN_ERROR"
    status_code = 400
    default_message = "Request could not be completed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class IdentityNotFound(DomainError):
    code = "LOGIN_FAILED"
    default_message = "User not found"


class IdentityInactive(DomainError):
    code = "IDENTITY_INACTIVE"
    default_message = "Account is inactive. Please contact your administrator."


class CodeNotFound(DomainError):
    code = "CODE_NOT_FOUND"
    default_message = "OTP expired or not found"


class AttemptsExceeded(DomainError):
    code = "ATTEMPTS_EXCEEDED"
    default_message = "Maximum OTP attempts exceeded. Please request a new code."


class InvalidCode(DomainError):
    code = "INVALID_CODE"
    default_message = "Invalid OTP"


class AlreadyCheckedIn(DomainError):
    code = "ALREADY_CHECKED_IN"
    default_message = "You have already checked in today"


class NotCheckedIn(DomainError):
    code = "NOT_CHECKED_IN"
    default_message = "You have not checked in today"


class AlreadyCheckedOut(DomainError):
    code = "ALREADY_CHECKED_OUT"
    default_message = "You have already checked out today"


class AuthenticationError(DomainError):
    """Raised when a request carries no usable credentials."""

    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class TokenInvalid(AuthenticationError):
    default_message = "Invalid token"


class TokenExpired(AuthenticationError):
    default_message = "Token has expired"


class RefreshTokenRevokedOrUnknown(AuthenticationError):
    default_message = "Invalid or expired refresh token"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "You do not have the required permissions"


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Not found"


class TransientError(Exception):
    """Retryable infrastructure failure (store timeout, lost connection).

    Not a DomainError: callers retry it instead of showing it to the user.
    """

    code = "TRANSIENT_ERROR"
    status_code = 503
    default_message = "Service temporarily unavailable, please retry"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DeliveryError(TransientError):
    code = "DELIVERY_FAILED"
    default_message = "Failed to send OTP email"
