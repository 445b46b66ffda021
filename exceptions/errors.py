"""
Custom exception classes for the application.

Every error that reaches the HTTP boundary is an AppError and renders
the standard {"error": {...}} body.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "IMPORT_JOB_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class BadRequestError(AppError):
    """Request rejected before any work was done (400)."""

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details
        )


class UnauthorizedError(AppError):
    """Missing or rejected credentials (401)."""

    def __init__(
        self,
        message: str,
        code: str = "UNAUTHORIZED",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=401,
            details=details
        )


class ForbiddenError(AppError):
    """Authenticated but not allowed (403)."""

    def __init__(
        self,
        message: str,
        code: str = "FORBIDDEN",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=403,
            details=details
        )


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# AUTH ERRORS
# ===================

class AuthRequiredError(UnauthorizedError):
    """No bearer credential on the request."""

    def __init__(self):
        super().__init__(
            code="AUTH_REQUIRED",
            message="Unauthorized"
        )


class InvalidCredentialsError(UnauthorizedError):
    """CMS rejected the identifier/password pair."""

    def __init__(self, message: str = "Invalid email/username or password"):
        super().__init__(
            code="AUTH_INVALID_CREDENTIALS",
            message=message
        )


class SessionInvalidError(UnauthorizedError):
    """Bearer credential no longer accepted by the CMS."""

    def __init__(self):
        super().__init__(
            code="AUTH_SESSION_INVALID",
            message="Session is invalid or has expired"
        )


class AccountBlockedError(ForbiddenError):
    """CMS account is blocked."""

    def __init__(self):
        super().__init__(
            code="AUTH_ACCOUNT_BLOCKED",
            message="Your account has been blocked. Please contact an administrator."
        )


class AccountUnconfirmedError(ForbiddenError):
    """CMS account email not confirmed."""

    def __init__(self):
        super().__init__(
            code="AUTH_ACCOUNT_UNCONFIRMED",
            message="Please confirm your email address before signing in."
        )


class CmsUnavailableError(ExternalServiceError):
    """CMS could not be reached."""

    def __init__(self, message: str):
        super().__init__(
            service="cms",
            message=message
        )


# ===================
# IMPORT ERRORS
# ===================

class ImportRequestError(BadRequestError):
    """Import request rejected before any row was processed."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="IMPORT_INVALID_REQUEST",
            message=message,
            details=details
        )


class RowValidationError(ValidationError):
    """A single row could not be mapped to a product record."""

    def __init__(self, message: str):
        super().__init__(
            code="ROW_VALIDATION_ERROR",
            message=message
        )


class CsvParseError(ValidationError):
    """Uploaded CSV could not be read."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="CSV_PARSE_ERROR",
            message=message,
            details=details
        )


class ImportJobNotFoundError(NotFoundError):
    """Job id unknown to the job store (never seen or expired)."""

    def __init__(self, job_id: str):
        super().__init__(
            resource="Import job",
            identifier=job_id,
            code="IMPORT_JOB_NOT_FOUND"
        )


class JobQueueUnavailableError(ExternalServiceError):
    """Background job infrastructure unreachable or not configured."""

    def __init__(self, message: str = "Job queue not available"):
        super().__init__(
            service="job_queue",
            message=message
        )
