"""
Single-record importer.

Submits one mapped product record to the CMS and turns whatever happens
into a RowOutcome. Nothing raised by the CMS call escapes import_one().
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import structlog

from config import settings
from integrations.cms_client import CmsClient, CmsError, get_cms_client
from models.product_import import ProductRecord

logger = structlog.get_logger(__name__)

UNKNOWN_ERROR = "Unknown error"


class FailureKind(str, Enum):
    """Why a row failed."""
    VALIDATION = "validation"   # Row mapping failed or the CMS rejected the record (4xx)
    TRANSIENT = "transient"     # Timeout, connection error or CMS 5xx


@dataclass
class RowSuccess:
    """Row accepted by the CMS."""
    row: int
    product_id: str
    pending_assets: int = 0


@dataclass
class RowFailure:
    """Row not imported; row is 1-based."""
    row: int
    reason: str
    kind: FailureKind = FailureKind.TRANSIENT

    @property
    def message(self) -> str:
        """Error list entry, e.g. 'Row 2: Name is required'."""
        return f"Row {self.row}: {self.reason or UNKNOWN_ERROR}"


RowOutcome = Union[RowSuccess, RowFailure]


class ProductImporter:
    """
    Creates one product in the CMS per call.

    Asset URLs on the record (images, GLB, USDZ, CAD) are only counted and
    logged: asset download is not implemented, the count is reported back
    as pending_assets.
    """

    def __init__(self, client: Optional[CmsClient] = None):
        self.client = client or get_cms_client()

    def import_one(self, record: ProductRecord, token: str, row: int) -> RowOutcome:
        """
        Create one product.

        Args:
            record: Mapped product record
            token: Caller's CMS bearer credential
            row: 1-based row number, used in failure messages

        Returns:
            RowSuccess with the CMS id, or RowFailure with the reason
        """
        try:
            product_id = self.client.create_product(record.to_catalog_payload(), token)
        except CmsError as e:
            kind = FailureKind.TRANSIENT if e.transient else FailureKind.VALIDATION
            logger.warning(
                "import_row_failed",
                row=row,
                name=record.name,
                status_code=e.status_code,
                kind=kind.value,
                error=e.message
            )
            return RowFailure(row=row, reason=e.message or UNKNOWN_ERROR, kind=kind)
        except Exception as e:
            logger.error(
                "import_row_crashed",
                row=row,
                name=record.name,
                error=str(e),
                error_type=type(e).__name__
            )
            return RowFailure(row=row, reason=str(e) or UNKNOWN_ERROR)

        pending_assets = record.assets.count
        if pending_assets:
            # TODO: queue asset download and attach to the product once a download worker exists
            logger.info(
                "product_assets_pending",
                product_id=product_id,
                asset_count=pending_assets,
                detail="asset download not implemented"
            )

        logger.debug("import_row_created", row=row, product_id=product_id)
        return RowSuccess(row=row, product_id=product_id, pending_assets=pending_assets)


class RetryingProductImporter:
    """
    Wraps an importer and retries transient failures.

    Still one outcome per row: the last attempt's outcome is returned.
    Validation failures are never retried.
    """

    def __init__(
        self,
        importer: ProductImporter,
        attempts: int = 3,
        backoff_seconds: float = 0.5,
        sleep=time.sleep,
    ):
        self.importer = importer
        self.attempts = max(1, attempts)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep

    def import_one(self, record: ProductRecord, token: str, row: int) -> RowOutcome:
        outcome = self.importer.import_one(record, token, row)
        for attempt in range(1, self.attempts):
            if not isinstance(outcome, RowFailure) or outcome.kind is not FailureKind.TRANSIENT:
                break
            delay = self.backoff_seconds * 2 ** (attempt - 1)
            logger.info("import_row_retry", row=row, attempt=attempt + 1, delay=delay)
            self.sleep(delay)
            outcome = self.importer.import_one(record, token, row)
        return outcome


def get_product_importer() -> Union[ProductImporter, RetryingProductImporter]:
    """Importer configured from settings (row retry only if enabled)."""
    importer = ProductImporter()
    if settings.import_row_retry_attempts > 1:
        return RetryingProductImporter(
            importer,
            attempts=settings.import_row_retry_attempts,
            backoff_seconds=settings.import_row_retry_backoff_seconds,
        )
    return importer
