"""Typed error hierarchy for the boilerplate API.

All application errors inherit from AppError and provide:
- code: Machine-readable error code
- message: Human-readable description
- details: Additional context as dict
- retryable: Whether the operation can be retried

The HTTP status for each family is decided by the error handler middleware.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error with full context."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for API responses and logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
            "timestamp": self.timestamp.isoformat(),
        }


# --- Not Found Errors ---


@dataclass
class NotFoundError(AppError):
    """Resource not found."""

    code: str = "NOT_FOUND"
    message: str = "Resource not found"


@dataclass
class UserNotFoundError(NotFoundError):
    """User not found."""

    code: str = "USER_NOT_FOUND"
    message: str = "User not found"


# --- Validation Errors ---


@dataclass
class ValidationError(AppError):
    """Input validation failed."""

    code: str = "VALIDATION_ERROR"
    message: str = "Invalid request data"


@dataclass
class WebhookHeadersMissingError(ValidationError):
    """One or more svix signature headers are absent."""

    code: str = "WEBHOOK_HEADERS_MISSING"
    message: str = "Missing svix headers"


@dataclass
class WebhookVerificationFailedError(ValidationError):
    """Webhook signature or payload could not be verified."""

    code: str = "WEBHOOK_VERIFICATION_FAILED"
    message: str = "Webhook signature verification failed"


# --- Auth Errors ---


@dataclass
class AuthError(AppError):
    """Authentication/authorization failed."""

    code: str = "AUTH_ERROR"
    message: str = "Authentication failed"


@dataclass
class UnauthorizedError(AuthError):
    """Request carries no authenticated user."""

    code: str = "UNAUTHORIZED"
    message: str = "Authentication required"


@dataclass
class TokenExpiredError(AuthError):
    """JWT token has expired."""

    code: str = "TOKEN_EXPIRED"
    retryable: bool = True  # Can retry with fresh token


@dataclass
class TokenInvalidError(AuthError):
    """JWT token is invalid."""

    code: str = "TOKEN_INVALID"


# --- Server-side Errors ---


@dataclass
class DatabaseError(AppError):
    """Database operation failed."""

    code: str = "DATABASE_ERROR"
    message: str = "A database error occurred"


@dataclass
class ResponseSchemaError(AppError):
    """A handler produced a payload that violates its response contract."""

    code: str = "RESPONSE_SCHEMA_ERROR"
    message: str = "Response failed schema validation"


@dataclass
class UserSyncError(AppError):
    """Identity provider user could not be reconciled with local storage."""

    code: str = "USER_SYNC_ERROR"
    message: str = "User sync failed"
    external_id: str = ""


@dataclass
class ConfigurationError(AppError):
    """Required configuration is missing."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Required configuration is missing"
    setting: str = ""
