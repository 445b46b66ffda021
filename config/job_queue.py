"""
Background job queue management.

Provides the process-wide import job queue (Celery on Redis).
Construction happens once; if Redis is not configured or unreachable the
queue is permanently unavailable (None) and imports run synchronously.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional, Protocol

import redis
import structlog
from celery import Celery
from celery.result import AsyncResult
from kombu.exceptions import OperationalError as BrokerError
from redis.exceptions import RedisError

from config.settings import settings
from exceptions import JobQueueUnavailableError

logger = structlog.get_logger(__name__)

IMPORT_TASK_NAME = "imports.run_product_import"
JOB_KEY_PREFIX = "product-import"


@dataclass
class JobSnapshot:
    """Read-only view of a queued job as the job system reports it."""
    id: str
    state: str
    total: int
    progress: int = 0
    processed: int = 0
    errors: list[str] = field(default_factory=list)
    result: Optional[dict[str, Any]] = None
    failed_reason: Optional[str] = None


class JobQueue(Protocol):
    """Background job collaborator used by the import pipeline."""

    def enqueue(self, payload: dict, total: int, user_id: Optional[int] = None) -> str:
        ...

    def get_job(self, job_id: str) -> Optional[JobSnapshot]:
        ...

    def record_progress(
        self,
        job_id: str,
        progress: int,
        processed: int,
        errors: list[str],
    ) -> None:
        ...


class CeleryJobQueue:
    """
    Job queue backed by Celery with a Redis broker.

    Each job has a Redis hash (the job record) written at enqueue time.
    The record holds the submitted total and the progress written by the
    worker; Celery owns the lifecycle state.
    """

    def __init__(
        self,
        client: redis.Redis,
        app: Celery,
        retention_seconds: int,
    ):
        self.client = client
        self.app = app
        self.retention_seconds = retention_seconds

    def _key(self, job_id: str) -> str:
        return f"{JOB_KEY_PREFIX}:{job_id}"

    def enqueue(self, payload: dict, total: int, user_id: Optional[int] = None) -> str:
        """
        Create the job record and send the import task.

        Returns:
            Job id

        Raises:
            JobQueueUnavailableError: If Redis or the broker is unreachable
        """
        job_id = str(uuid.uuid4())
        key = self._key(job_id)

        try:
            self.client.hset(key, mapping={
                "total": total,
                "user_id": "" if user_id is None else user_id,
                "created_at": datetime.utcnow().isoformat(),
                "progress": 0,
                "processed": 0,
                "errors": "[]",
            })
            self.client.expire(key, self.retention_seconds)
        except RedisError as e:
            logger.error("job_record_write_failed", job_id=job_id, error=str(e))
            raise JobQueueUnavailableError(f"Failed to create import job: {e}") from e

        try:
            self.app.send_task(IMPORT_TASK_NAME, args=[payload], task_id=job_id)
        except (BrokerError, RedisError) as e:
            logger.error("job_enqueue_failed", job_id=job_id, error=str(e))
            try:
                self.client.delete(key)
            except RedisError as cleanup_error:
                logger.warning("job_record_cleanup_failed", job_id=job_id, error=str(cleanup_error))
            raise JobQueueUnavailableError(f"Failed to enqueue import job: {e}") from e

        return job_id

    def get_job(self, job_id: str) -> Optional[JobSnapshot]:
        """
        Read a job's record and Celery state.

        Returns:
            JobSnapshot, or None if the job is unknown or expired

        Raises:
            JobQueueUnavailableError: If Redis is unreachable
        """
        try:
            record = self.client.hgetall(self._key(job_id))
            if not record:
                return None

            result = AsyncResult(job_id, app=self.app)
            state = result.state
            outcome = result.result
        except RedisError as e:
            logger.error("job_lookup_failed", job_id=job_id, error=str(e))
            raise JobQueueUnavailableError(f"Failed to read import job: {e}") from e

        snapshot = JobSnapshot(
            id=job_id,
            state=state,
            total=int(record.get("total", 0)),
            progress=int(record.get("progress", 0)),
            processed=int(record.get("processed", 0)),
            errors=json.loads(record.get("errors") or "[]"),
        )
        if state == "SUCCESS" and isinstance(outcome, dict):
            snapshot.result = outcome
        elif state == "FAILURE":
            snapshot.failed_reason = str(outcome) if outcome else None

        return snapshot

    def record_progress(
        self,
        job_id: str,
        progress: int,
        processed: int,
        errors: list[str],
    ) -> None:
        """
        Write the runner's progress to the job record.

        Progress never moves backwards, including across whole-batch retries.
        """
        key = self._key(job_id)
        previous = int(self.client.hget(key, "progress") or 0)
        self.client.hset(key, mapping={
            "progress": max(previous, progress),
            "processed": processed,
            "errors": json.dumps(errors),
        })


@lru_cache()
def get_job_queue() -> Optional[CeleryJobQueue]:
    """
    Get the cached job queue.

    Uses lru_cache so the connection is attempted once per process.
    A failed attempt is cached too: the queue stays unavailable until
    reset_job_queue() is called.

    Returns:
        CeleryJobQueue, or None if not configured or unreachable
    """
    if not settings.redis_url:
        logger.warning("job_queue_not_configured")
        return None

    try:
        client = redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        client.ping()
    except RedisError as e:
        logger.error(
            "job_queue_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        return None

    from tasks.celery_app import celery_app

    logger.info("job_queue_connected")
    return CeleryJobQueue(client, celery_app, settings.import_job_retention_seconds)


def init_job_queue() -> bool:
    """Build the job queue at process start. Returns True if available."""
    return get_job_queue() is not None


def reset_job_queue():
    """
    Reset the cached job queue.

    Call this after config changes or to retry an unavailable queue.
    """
    get_job_queue.cache_clear()
    logger.info("job_queue_reset")


def check_queue() -> dict:
    """
    Check job queue health.

    Returns:
        dict: Queue status with details
    """
    if not settings.redis_url:
        return {"status": "not_configured"}

    queue = get_job_queue()
    if queue is None:
        return {"status": "unavailable"}

    try:
        queue.client.ping()
        return {"status": "healthy"}
    except RedisError as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
