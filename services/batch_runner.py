"""
Batch runner for product imports.

Drives the row mapper and single-record importer over every row of a
batch, in input order, one row at a time. Row failures are data: they go
into the error list and the batch carries on. Only an exception escaping
run() (a crash of the runner itself) fails a background job.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol
import structlog

from exceptions import RowValidationError
from models.product_import import FieldMapping, ProductRecord, RawRow
from parsers.row_mapper import map_row
from services.product_importer import (
    FailureKind,
    RowFailure,
    RowOutcome,
    RowSuccess,
)

logger = structlog.get_logger(__name__)

# progress (0-100), processed count, errors so far
ProgressCallback = Callable[[int, int, list[str]], None]


class RecordImporter(Protocol):
    def import_one(self, record: ProductRecord, token: str, row: int) -> RowOutcome:
        ...


@dataclass
class BatchResult:
    """Aggregate outcome of one batch."""
    total: int
    processed: int = 0
    errors: list[str] = field(default_factory=list)
    pending_assets: int = 0

    @property
    def failed(self) -> int:
        return len(self.errors)

    def to_dict(self) -> dict:
        """Convert to the worker's task return value."""
        return {
            "total": self.total,
            "processed": self.processed,
            "errors": list(self.errors),
            "pending_assets": self.pending_assets,
        }


def compute_progress(attempted: int, total: int) -> int:
    """Percentage of rows attempted, rounded half up."""
    if total <= 0:
        return 100
    return int(100 * attempted / total + 0.5)


class BatchRunner:
    """
    Sequential import of a batch.

    Row N's outcome is recorded before row N+1 starts, so the error list
    is in row order.
    """

    def __init__(self, importer: RecordImporter):
        self.importer = importer

    def run(
        self,
        rows: list[RawRow],
        mapping: FieldMapping,
        token: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """
        Import every row.

        Args:
            rows: Raw CSV rows in input order
            mapping: Column -> product field mapping
            token: Caller's CMS bearer credential
            on_progress: Called after each row (background jobs only)

        Returns:
            BatchResult once every row has been attempted
        """
        total = len(rows)
        result = BatchResult(total=total)

        logger.info("import_batch_started", total=total)

        for index, row in enumerate(rows, start=1):
            outcome = self._import_row(row, mapping, token, index)

            if isinstance(outcome, RowSuccess):
                result.processed += 1
                result.pending_assets += outcome.pending_assets
            else:
                result.errors.append(outcome.message)

            if on_progress is not None:
                on_progress(compute_progress(index, total), result.processed, list(result.errors))

        logger.info(
            "import_batch_finished",
            total=total,
            processed=result.processed,
            failed=result.failed,
            pending_assets=result.pending_assets
        )

        return result

    def _import_row(
        self,
        row: RawRow,
        mapping: FieldMapping,
        token: str,
        index: int,
    ) -> RowOutcome:
        try:
            record = map_row(row, mapping)
        except RowValidationError as e:
            logger.info("import_row_invalid", row=index, error=e.message)
            return RowFailure(row=index, reason=e.message, kind=FailureKind.VALIDATION)

        return self.importer.import_one(record, token, index)
