"""
Unit tests for ImportJobService.

Run: pytest tests/unit/test_import_job_service.py -v
"""

import pytest

from exceptions import ImportJobNotFoundError, JobQueueUnavailableError
from models.product_import import JobStatus
from services.import_job_service import ImportJobService, map_job_state


class TestMapJobState:
    """Tests for map_job_state()"""

    @pytest.mark.parametrize("state,expected", [
        ("PENDING", JobStatus.PENDING),
        ("RECEIVED", JobStatus.PENDING),
        ("RETRY", JobStatus.PENDING),
        ("STARTED", JobStatus.PROCESSING),
        ("SUCCESS", JobStatus.COMPLETED),
        ("FAILURE", JobStatus.FAILED),
        (None, JobStatus.PENDING),
    ])
    def test_state_mapping(self, state, expected):
        assert map_job_state(state) is expected


class TestImportJobServiceGetStatus:
    """Tests for ImportJobService.get_status()"""

    def test_pending_job(self, mock_queue):
        # Arrange
        job_id = mock_queue.enqueue({}, total=60)
        service = ImportJobService(mock_queue)

        # Act
        status = service.get_status(job_id)

        # Assert
        assert status.id == job_id
        assert status.status is JobStatus.PENDING
        assert status.progress == 0
        assert status.total == 60
        assert status.error is None

    def test_processing_job_reports_progress(self, mock_queue):
        job_id = mock_queue.enqueue({}, total=60)
        mock_queue.record_progress(job_id, 42, 25, ["Row 3: Name is required"])

        status = ImportJobService(mock_queue).get_status(job_id)

        assert status.status is JobStatus.PROCESSING
        assert status.progress == 42
        assert status.processed == 25
        assert status.errors == ["Row 3: Name is required"]

    def test_running_job_never_reports_100(self, mock_queue):
        job_id = mock_queue.enqueue({}, total=60)
        mock_queue.record_progress(job_id, 100, 60, [])

        status = ImportJobService(mock_queue).get_status(job_id)

        assert status.status is JobStatus.PROCESSING
        assert status.progress == 99

    def test_completed_job_uses_result(self, mock_queue):
        job_id = mock_queue.enqueue({}, total=60)
        mock_queue.record_progress(job_id, 98, 57, [])
        mock_queue.complete(job_id, {"total": 60, "processed": 58, "errors": ["Row 2: Name is required", "Row 9: Duplicate"]})

        status = ImportJobService(mock_queue).get_status(job_id)

        assert status.status is JobStatus.COMPLETED
        assert status.progress == 100
        assert status.processed == 58
        assert len(status.errors) == 2
        assert status.error is None

    def test_failed_job_has_error(self, mock_queue):
        job_id = mock_queue.enqueue({}, total=60)
        mock_queue.set_state(job_id, "FAILURE", failed_reason="Worker crashed", progress=30)

        status = ImportJobService(mock_queue).get_status(job_id)

        assert status.status is JobStatus.FAILED
        assert status.error == "Worker crashed"
        assert status.progress == 30

    def test_failed_job_without_reason(self, mock_queue):
        job_id = mock_queue.enqueue({}, total=60)
        mock_queue.set_state(job_id, "FAILURE")

        status = ImportJobService(mock_queue).get_status(job_id)

        assert status.error == "Job failed"

    def test_unknown_job_raises_not_found(self, mock_queue):
        with pytest.raises(ImportJobNotFoundError) as exc_info:
            ImportJobService(mock_queue).get_status("does-not-exist")

        assert exc_info.value.status_code == 404

    def test_no_queue_raises_unavailable(self):
        with pytest.raises(JobQueueUnavailableError) as exc_info:
            ImportJobService(None).get_status("job-1")

        assert exc_info.value.status_code == 503
