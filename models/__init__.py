"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.auth import (
    LoginRequest,
    AdminUser,
    AdminSession,
)
from models.product_import import (
    ProductField,
    PRODUCT_FIELD_LABELS,
    ProductRecord,
    ImportRequest,
    ImportJobPayload,
    RetryPolicy,
    JobStatus,
    SyncImportResponse,
    BackgroundImportResponse,
    ImportStartResponse,
    ImportJobStatus,
    ProductFieldOption,
    CsvPreviewResponse,
)

__all__ = [
    # Base
    "BaseSchema",

    # Auth
    "LoginRequest",
    "AdminUser",
    "AdminSession",

    # Product import
    "ProductField",
    "PRODUCT_FIELD_LABELS",
    "ProductRecord",
    "ImportRequest",
    "ImportJobPayload",
    "RetryPolicy",
    "JobStatus",
    "SyncImportResponse",
    "BackgroundImportResponse",
    "ImportStartResponse",
    "ImportJobStatus",
    "ProductFieldOption",
    "CsvPreviewResponse",
]
