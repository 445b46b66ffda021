"""
Celery tasks for product imports.
"""

import structlog

from config import JobQueue, get_job_queue
from config.job_queue import IMPORT_TASK_NAME
from exceptions import JobQueueUnavailableError
from models.product_import import ImportJobPayload
from services.batch_runner import BatchRunner
from services.product_importer import get_product_importer
from tasks.celery_app import celery_app

logger = structlog.get_logger(__name__)


def execute_import_job(
    job_id: str,
    payload: ImportJobPayload,
    runner: BatchRunner,
    queue: JobQueue,
) -> dict:
    """
    Run a queued batch, writing progress to the job record after each row.

    Returns:
        Batch result dict (the task's return value)
    """

    def report(progress: int, processed: int, errors: list[str]) -> None:
        queue.record_progress(job_id, progress, processed, errors)

    result = runner.run(
        payload.rows,
        payload.field_mappings,
        payload.token,
        on_progress=report,
    )
    return result.to_dict()


@celery_app.task(bind=True, name=IMPORT_TASK_NAME)
def run_product_import(self, payload: dict) -> dict:
    """
    Import a batch of products in the background.

    Per-row failures end up in the result; the task only fails if the
    runner itself crashes, after the payload's retry policy is used up.
    """
    job = ImportJobPayload.model_validate(payload)
    job_id = self.request.id
    attempt = self.request.retries + 1

    logger.info(
        "import_job_started",
        job_id=job_id,
        total=len(job.rows),
        attempt=attempt,
        max_attempts=job.retry.attempts
    )

    try:
        queue = get_job_queue()
        if queue is None:
            raise JobQueueUnavailableError("Job queue not available in worker")

        result = execute_import_job(
            job_id,
            job,
            BatchRunner(get_product_importer()),
            queue,
        )
    except Exception as exc:
        if attempt >= job.retry.attempts:
            logger.error(
                "import_job_failed",
                job_id=job_id,
                attempt=attempt,
                error=str(exc),
                error_type=type(exc).__name__
            )
            raise

        countdown = job.retry.delay_for(self.request.retries)
        logger.warning(
            "import_job_retrying",
            job_id=job_id,
            attempt=attempt,
            countdown=countdown,
            error=str(exc)
        )
        raise self.retry(exc=exc, countdown=countdown, max_retries=job.retry.attempts - 1)

    logger.info(
        "import_job_completed",
        job_id=job_id,
        processed=result["processed"],
        total=result["total"],
        failed=len(result["errors"])
    )
    return result
