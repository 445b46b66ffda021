"""
Product import service.

Entry point for starting an import: validates the request, picks the
execution mode, then either runs the batch inline or queues it.
"""

from typing import Optional, Union
import structlog

from config import JobQueue, settings, get_job_queue
from exceptions import ImportRequestError, JobQueueUnavailableError
from models.auth import AdminSession
from models.product_import import (
    BackgroundImportResponse,
    ImportJobPayload,
    ImportRequest,
    ProductField,
    RetryPolicy,
    SyncImportResponse,
)
from services.batch_runner import BatchRunner
from services.execution_mode import ExecutionMode, select_mode
from services.product_importer import get_product_importer

logger = structlog.get_logger(__name__)


class ImportService:
    """
    Starts product imports.

    Small imports (and every import when the queue is unavailable) run
    inline and return the batch result. Large imports are queued and
    return a job handle to poll.
    """

    def __init__(
        self,
        queue: Optional[JobQueue],
        runner: BatchRunner,
        retry_policy: Optional[RetryPolicy] = None,
        max_rows: Optional[int] = None,
    ):
        self.queue = queue
        self.runner = runner
        self.retry_policy = retry_policy or RetryPolicy(
            attempts=settings.import_job_max_attempts,
            backoff_seconds=settings.import_job_backoff_seconds,
        )
        self.max_rows = max_rows or settings.import_max_rows

    def validate_request(self, request: ImportRequest) -> None:
        """
        Reject a request before any row is touched.

        Raises:
            ImportRequestError: Missing rows, missing mapping, no name column,
                or too many rows
        """
        if not request.rows:
            raise ImportRequestError("CSV data is required")

        if not request.field_mappings:
            raise ImportRequestError("Field mappings are required")

        if ProductField.NAME not in request.field_mappings.values():
            raise ImportRequestError(
                "A column must be mapped to name",
                details={"mapped_fields": sorted({f.value for f in request.field_mappings.values() if f.value})}
            )

        if len(request.rows) > self.max_rows:
            raise ImportRequestError(
                f"Too many rows: {len(request.rows)} (maximum {self.max_rows})",
                details={"rows": len(request.rows), "max_rows": self.max_rows}
            )

    def start_import(
        self,
        request: ImportRequest,
        session: AdminSession,
    ) -> Union[SyncImportResponse, BackgroundImportResponse]:
        """
        Start an import.

        Args:
            request: Rows and column mapping
            session: Authenticated caller (its token is used for CMS writes)

        Returns:
            SyncImportResponse with the final result, or
            BackgroundImportResponse with the job id to poll

        Raises:
            ImportRequestError: If the request is invalid
        """
        self.validate_request(request)

        total = len(request.rows)
        mode = select_mode(total, queue_available=self.queue is not None)

        logger.info(
            "import_started",
            user_id=session.user.id,
            total=total,
            mapped_columns=len(request.field_mappings),
            mode=mode.value
        )

        if mode is ExecutionMode.BACKGROUND:
            try:
                return self._enqueue(request, session)
            except JobQueueUnavailableError as e:
                logger.warning(
                    "import_queue_fallback_to_sync",
                    total=total,
                    error=e.message
                )

        return self._run_inline(request, session)

    def _enqueue(
        self,
        request: ImportRequest,
        session: AdminSession,
    ) -> BackgroundImportResponse:
        total = len(request.rows)
        payload = ImportJobPayload(
            rows=request.rows,
            field_mappings=request.field_mappings,
            token=session.token,
            user_id=session.user.id,
            retry=self.retry_policy,
        )

        job_id = self.queue.enqueue(
            payload.model_dump(mode="json"),
            total=total,
            user_id=session.user.id,
        )

        logger.info("import_job_enqueued", job_id=job_id, total=total)

        return BackgroundImportResponse(id=job_id, total=total)

    def _run_inline(
        self,
        request: ImportRequest,
        session: AdminSession,
    ) -> SyncImportResponse:
        result = self.runner.run(request.rows, request.field_mappings, session.token)

        return SyncImportResponse(
            processed=result.processed,
            total=result.total,
            errors=result.errors,
            pending_assets=result.pending_assets,
        )


def get_import_service() -> ImportService:
    return ImportService(
        queue=get_job_queue(),
        runner=BatchRunner(get_product_importer()),
    )
