"""
Import job status service.

Read-only view of background imports for polling clients. Translates the
job system's native (Celery) states into the four-state import lifecycle.
"""

from typing import Optional
import structlog

from config import JobQueue, get_job_queue
from exceptions import ImportJobNotFoundError, JobQueueUnavailableError
from models.product_import import ImportJobStatus, JobStatus

logger = structlog.get_logger(__name__)

PROCESSING_STATES = {"STARTED"}

# A job still running never reports 100
MAX_RUNNING_PROGRESS = 99


def map_job_state(state: Optional[str]) -> JobStatus:
    """
    Map a native job state to the import lifecycle.

    STARTED → processing (task_track_started), SUCCESS → completed,
    FAILURE → failed, anything else (PENDING, RECEIVED, RETRY, ...) → pending.
    """
    state = (state or "").upper()
    if state in PROCESSING_STATES:
        return JobStatus.PROCESSING
    if state == "SUCCESS":
        return JobStatus.COMPLETED
    if state == "FAILURE":
        return JobStatus.FAILED
    return JobStatus.PENDING


class ImportJobService:
    """Status lookups for queued imports."""

    def __init__(self, queue: Optional[JobQueue]):
        self.queue = queue

    def get_status(self, job_id: str) -> ImportJobStatus:
        """
        Get the current status of a background import.

        Args:
            job_id: Id returned when the import was queued

        Returns:
            ImportJobStatus snapshot

        Raises:
            JobQueueUnavailableError: If the job system cannot be reached
            ImportJobNotFoundError: If the job is unknown or expired
        """
        if self.queue is None:
            raise JobQueueUnavailableError()

        snapshot = self.queue.get_job(job_id)
        if snapshot is None:
            raise ImportJobNotFoundError(job_id)

        status = map_job_state(snapshot.state)

        processed = snapshot.processed
        errors = snapshot.errors
        if snapshot.result is not None:
            processed = snapshot.result.get("processed", processed)
            errors = snapshot.result.get("errors", errors)

        if status is JobStatus.COMPLETED:
            progress = 100
        else:
            progress = min(max(snapshot.progress, 0), MAX_RUNNING_PROGRESS)

        error = None
        if status is JobStatus.FAILED:
            error = snapshot.failed_reason or "Job failed"

        logger.debug(
            "import_job_status",
            job_id=job_id,
            state=snapshot.state,
            status=status.value,
            progress=progress
        )

        return ImportJobStatus(
            id=snapshot.id,
            status=status,
            progress=progress,
            total=snapshot.total,
            processed=processed,
            errors=errors,
            error=error,
        )


def get_import_job_service() -> ImportJobService:
    return ImportJobService(get_job_queue())
