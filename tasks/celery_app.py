"""
Celery configuration for the import worker.

Broker and result backend are both the Redis instance from REDIS_URL.
One job at a time, one row at a time: the CMS is the shared bottleneck.
"""

from celery import Celery

from config.logging import configure_logging
from config.settings import settings

configure_logging()

celery_app = Celery(
    "product_import",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["tasks.import_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_track_started=True,
    worker_concurrency=1,
    worker_prefetch_multiplier=1,
    worker_hijack_root_logger=False,
    result_expires=settings.import_job_retention_seconds,
)
