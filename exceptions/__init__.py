"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,

    # Auth
    AuthRequiredError,
    InvalidCredentialsError,
    SessionInvalidError,
    AccountBlockedError,
    AccountUnconfirmedError,
    CmsUnavailableError,

    # Import
    ImportRequestError,
    RowValidationError,
    CsvParseError,
    ImportJobNotFoundError,
    JobQueueUnavailableError,
)

__all__ = [
    # Base
    "AppError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",

    # Auth
    "AuthRequiredError",
    "InvalidCredentialsError",
    "SessionInvalidError",
    "AccountBlockedError",
    "AccountUnconfirmedError",
    "CmsUnavailableError",

    # Import
    "ImportRequestError",
    "RowValidationError",
    "CsvParseError",
    "ImportJobNotFoundError",
    "JobQueueUnavailableError",
]
