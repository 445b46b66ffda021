"""
Shared test fixtures.

Run: pytest tests/ -v
"""

import sys
from pathlib import Path

# Add project root to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from unittest.mock import MagicMock
from typing import Optional

from config.job_queue import JobSnapshot
from integrations.cms_client import CmsClient
from models.auth import AdminSession, AdminUser
from models.product_import import ProductField


# ===================
# MOCK JOB QUEUE
# ===================

class MockJobQueue:
    """
    In-memory job queue.

    Jobs stay PENDING until a test moves them with set_state(), or runs
    them through execute_import_job() and calls complete().
    """

    def __init__(self):
        self.jobs: dict[str, JobSnapshot] = {}
        self.payloads: dict[str, dict] = {}
        self.progress_history: dict[str, list[int]] = {}
        self.fail_enqueue = False
        self._counter = 0

    def enqueue(self, payload: dict, total: int, user_id: Optional[int] = None) -> str:
        if self.fail_enqueue:
            from exceptions import JobQueueUnavailableError
            raise JobQueueUnavailableError("Broker down")

        self._counter += 1
        job_id = f"job-{self._counter}"
        self.jobs[job_id] = JobSnapshot(id=job_id, state="PENDING", total=total)
        self.payloads[job_id] = payload
        self.progress_history[job_id] = []
        return job_id

    def get_job(self, job_id: str) -> Optional[JobSnapshot]:
        return self.jobs.get(job_id)

    def record_progress(self, job_id: str, progress: int, processed: int, errors: list[str]) -> None:
        job = self.jobs[job_id]
        job.state = "STARTED"
        job.progress = max(job.progress, progress)
        job.processed = processed
        job.errors = list(errors)
        self.progress_history[job_id].append(progress)

    def set_state(self, job_id: str, state: str, **fields) -> None:
        job = self.jobs[job_id]
        job.state = state
        for name, value in fields.items():
            setattr(job, name, value)

    def complete(self, job_id: str, result: dict) -> None:
        self.set_state(job_id, "SUCCESS", result=result)


@pytest.fixture
def mock_queue() -> MockJobQueue:
    """Empty in-memory job queue."""
    return MockJobQueue()


# ===================
# MOCK CMS CLIENT
# ===================

@pytest.fixture
def mock_cms() -> MagicMock:
    """
    CMS client mock that accepts every product.

    Usage:
        def test_something(mock_cms):
            mock_cms.create_product.side_effect = CmsError("Slug taken", 400)
    """
    client = MagicMock(spec=CmsClient)
    counter = {"n": 0}

    def create_product(data, token):
        counter["n"] += 1
        return str(counter["n"])

    client.create_product.side_effect = create_product
    return client


# ===================
# SAMPLE DATA
# ===================

@pytest.fixture
def admin_session() -> AdminSession:
    """Signed-in admin."""
    return AdminSession(
        token="cms-jwt-token",
        user=AdminUser(id=7, username="admin", email="admin@example.com", role="Admin"),
    )


@pytest.fixture
def sample_mapping() -> dict:
    """Mapping for the sample rows (Notes column skipped)."""
    return {
        "Product Name": ProductField.NAME,
        "Price": ProductField.PRICE,
        "Notes": ProductField.SKIP,
    }


@pytest.fixture
def sample_rows() -> list:
    """One valid row and one row with no name."""
    return [
        {"Product Name": "Chair A", "Price": "129.99", "Notes": "x"},
        {"Product Name": "", "Price": "50", "Notes": ""},
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(admin_session, mock_queue, mock_cms):
    """
    FastAPI test client signed in as admin, with the queue and CMS mocked.

    Usage:
        def test_endpoint(test_client, mock_queue):
            response = test_client.get("/api/admin/import/job-1")
    """
    from fastapi.testclient import TestClient
    from main import app
    from routes.auth import get_current_session
    from services.batch_runner import BatchRunner
    from services.import_job_service import ImportJobService, get_import_job_service
    from services.import_service import ImportService, get_import_service
    from services.product_importer import ProductImporter

    app.dependency_overrides[get_current_session] = lambda: admin_session
    app.dependency_overrides[get_import_service] = lambda: ImportService(
        queue=mock_queue,
        runner=BatchRunner(ProductImporter(mock_cms)),
    )
    app.dependency_overrides[get_import_job_service] = lambda: ImportJobService(mock_queue)

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """FastAPI test client with no session override."""
    from fastapi.testclient import TestClient
    from main import app

    app.dependency_overrides.clear()
    return TestClient(app)
