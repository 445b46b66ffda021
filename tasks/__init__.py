"""
Background tasks run by the Celery worker.

Start the worker with:
    celery -A tasks.celery_app worker --concurrency=1 --loglevel=INFO
"""
