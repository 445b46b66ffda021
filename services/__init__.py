"""
Business logic services.

Each service handles one step of the import pipeline.
"""

from services.auth_service import AuthService, get_auth_service
from services.execution_mode import ExecutionMode, select_mode, LARGE_IMPORT_THRESHOLD
from services.product_importer import (
    ProductImporter,
    RetryingProductImporter,
    RowSuccess,
    RowFailure,
    FailureKind,
    get_product_importer,
)
from services.batch_runner import BatchRunner, BatchResult
from services.import_service import ImportService, get_import_service
from services.import_job_service import ImportJobService, get_import_job_service

__all__ = [
    "AuthService",
    "get_auth_service",
    "ExecutionMode",
    "select_mode",
    "LARGE_IMPORT_THRESHOLD",
    "ProductImporter",
    "RetryingProductImporter",
    "RowSuccess",
    "RowFailure",
    "FailureKind",
    "get_product_importer",
    "BatchRunner",
    "BatchResult",
    "ImportService",
    "get_import_service",
    "ImportJobService",
    "get_import_job_service",
]
