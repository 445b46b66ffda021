"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    configure_logging: structlog setup shared by API and worker
    get_job_queue: Function to get the background job queue (or None)
    check_queue: Health check function
"""

from config.settings import settings, get_settings, Settings
from config.logging import configure_logging
from config.job_queue import (
    JobQueue,
    JobSnapshot,
    CeleryJobQueue,
    get_job_queue,
    init_job_queue,
    reset_job_queue,
    check_queue,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",
    "configure_logging",

    # Job queue
    "JobQueue",
    "JobSnapshot",
    "CeleryJobQueue",
    "get_job_queue",
    "init_job_queue",
    "reset_job_queue",
    "check_queue",
]
