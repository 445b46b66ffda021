"""
Unit tests for CeleryJobQueue.

Redis and Celery are mocked; no broker is needed.

Run: pytest tests/unit/test_celery_job_queue.py -v
"""

import json
import pytest
from unittest.mock import MagicMock, patch

from kombu.exceptions import OperationalError
from redis.exceptions import ConnectionError as RedisConnectionError

from config.job_queue import IMPORT_TASK_NAME, CeleryJobQueue
from exceptions import JobQueueUnavailableError


@pytest.fixture
def redis_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def celery_app() -> MagicMock:
    return MagicMock()


@pytest.fixture
def queue(redis_client, celery_app) -> CeleryJobQueue:
    return CeleryJobQueue(redis_client, celery_app, retention_seconds=3600)


def async_result(state: str, result=None) -> MagicMock:
    mock = MagicMock()
    mock.state = state
    mock.result = result
    return mock


class TestEnqueue:
    """Tests for CeleryJobQueue.enqueue()"""

    def test_writes_record_and_sends_task(self, queue, redis_client, celery_app):
        # Act
        job_id = queue.enqueue({"rows": []}, total=60, user_id=7)

        # Assert
        key = f"product-import:{job_id}"
        record = redis_client.hset.call_args.kwargs["mapping"]
        assert redis_client.hset.call_args.args == (key,)
        assert record["total"] == 60
        assert record["progress"] == 0
        redis_client.expire.assert_called_once_with(key, 3600)
        celery_app.send_task.assert_called_once_with(
            IMPORT_TASK_NAME, args=[{"rows": []}], task_id=job_id
        )

    def test_broker_down_raises_and_cleans_up(self, queue, redis_client, celery_app):
        celery_app.send_task.side_effect = OperationalError("connection refused")

        with pytest.raises(JobQueueUnavailableError):
            queue.enqueue({}, total=60)

        redis_client.delete.assert_called_once()

    def test_redis_down_raises(self, queue, redis_client, celery_app):
        redis_client.hset.side_effect = RedisConnectionError("down")

        with pytest.raises(JobQueueUnavailableError):
            queue.enqueue({}, total=60)

        celery_app.send_task.assert_not_called()


class TestGetJob:
    """Tests for CeleryJobQueue.get_job()"""

    def test_unknown_job_returns_none(self, queue, redis_client):
        redis_client.hgetall.return_value = {}

        assert queue.get_job("missing") is None

    def test_running_job(self, queue, redis_client):
        redis_client.hgetall.return_value = {
            "total": "60", "progress": "40", "processed": "23", "errors": json.dumps(["Row 2: Name is required"]),
        }

        with patch("config.job_queue.AsyncResult", return_value=async_result("STARTED")):
            snapshot = queue.get_job("job-1")

        assert snapshot.state == "STARTED"
        assert snapshot.total == 60
        assert snapshot.progress == 40
        assert snapshot.processed == 23
        assert snapshot.errors == ["Row 2: Name is required"]
        assert snapshot.result is None

    def test_successful_job_has_result(self, queue, redis_client):
        redis_client.hgetall.return_value = {"total": "60", "progress": "99"}
        result = {"total": 60, "processed": 60, "errors": []}

        with patch("config.job_queue.AsyncResult", return_value=async_result("SUCCESS", result)):
            snapshot = queue.get_job("job-1")

        assert snapshot.result == result

    def test_failed_job_has_reason(self, queue, redis_client):
        redis_client.hgetall.return_value = {"total": "60"}

        with patch("config.job_queue.AsyncResult", return_value=async_result("FAILURE", RuntimeError("Worker lost"))):
            snapshot = queue.get_job("job-1")

        assert snapshot.failed_reason == "Worker lost"

    def test_redis_down_raises(self, queue, redis_client):
        redis_client.hgetall.side_effect = RedisConnectionError("down")

        with pytest.raises(JobQueueUnavailableError):
            queue.get_job("job-1")


class TestRecordProgress:
    """Tests for CeleryJobQueue.record_progress()"""

    def test_progress_never_moves_back(self, queue, redis_client):
        """A retried batch restarting at row 1 keeps the earlier high mark."""
        redis_client.hget.return_value = "70"

        queue.record_progress("job-1", 5, 3, ["Row 1: x"])

        mapping = redis_client.hset.call_args.kwargs["mapping"]
        assert mapping["progress"] == 70
        assert mapping["processed"] == 3
        assert json.loads(mapping["errors"]) == ["Row 1: x"]

    def test_progress_moves_forward(self, queue, redis_client):
        redis_client.hget.return_value = "10"

        queue.record_progress("job-1", 20, 12, [])

        assert redis_client.hset.call_args.kwargs["mapping"]["progress"] == 20
