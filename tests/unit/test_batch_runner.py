"""
Unit tests for BatchRunner.

Run: pytest tests/unit/test_batch_runner.py -v
"""

from unittest.mock import MagicMock

from integrations.cms_client import CmsError
from services.batch_runner import BatchRunner, compute_progress
from services.product_importer import ProductImporter

from tests.factories import FULL_MAPPING, ImportRowFactory


class TestBatchRunnerRun:
    """Tests for BatchRunner.run()"""

    def test_valid_and_nameless_row(self, mock_cms, sample_rows, sample_mapping):
        """One created, one 'Name is required'."""
        # Arrange
        runner = BatchRunner(ProductImporter(mock_cms))

        # Act
        result = runner.run(sample_rows, sample_mapping, "token")

        # Assert
        assert result.processed == 1
        assert result.total == 2
        assert result.errors == ["Row 2: Name is required"]
        assert mock_cms.create_product.call_count == 1
        sent = mock_cms.create_product.call_args.args[0]
        assert sent["name"] == "Chair A"
        assert sent["slug"] == "chair-a"
        assert sent["price"] == 129.99

    def test_processed_plus_errors_equals_total(self, mock_cms):
        rows = [
            ImportRowFactory.create(),
            ImportRowFactory.create_nameless(),
            ImportRowFactory.create(),
            ImportRowFactory.create_nameless(),
        ]

        result = BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token")

        assert result.processed + len(result.errors) == result.total == 4

    def test_every_row_fails_batch_still_completes(self, mock_cms):
        """A batch where nothing imports is not a batch failure."""
        mock_cms.create_product.side_effect = CmsError("Forbidden", status_code=403)
        rows = ImportRowFactory.create_batch(3)

        result = BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token")

        assert result.processed == 0
        assert result.errors == ["Row 1: Forbidden", "Row 2: Forbidden", "Row 3: Forbidden"]

    def test_errors_in_row_order(self, mock_cms):
        mock_cms.create_product.side_effect = ["1", CmsError("Duplicate slug", status_code=400), "3"]
        rows = [
            ImportRowFactory.create_nameless(),
            ImportRowFactory.create(),
            ImportRowFactory.create(),
            ImportRowFactory.create(),
        ]

        result = BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token")

        assert result.errors == ["Row 1: Name is required", "Row 3: Duplicate slug"]
        assert result.processed == 2

    def test_rows_submitted_in_order(self, mock_cms):
        rows = [ImportRowFactory.create(name=f"Item {i}") for i in range(5)]

        BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token")

        names = [c.args[0]["name"] for c in mock_cms.create_product.call_args_list]
        assert names == [f"Item {i}" for i in range(5)]

    def test_progress_reported_after_each_row(self, mock_cms):
        rows = ImportRowFactory.create_batch(3)
        on_progress = MagicMock()

        BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token", on_progress=on_progress)

        progress = [c.args[0] for c in on_progress.call_args_list]
        assert progress == [33, 67, 100]
        assert on_progress.call_args_list[-1].args[1] == 3

    def test_pending_assets_summed(self, mock_cms):
        rows = [
            ImportRowFactory.create(images="https://a/1.jpg, https://a/2.jpg"),
            ImportRowFactory.create(images="https://a/3.jpg"),
        ]

        result = BatchRunner(ProductImporter(mock_cms)).run(rows, FULL_MAPPING, "token")

        assert result.pending_assets == 3

    def test_empty_batch(self, mock_cms):
        result = BatchRunner(ProductImporter(mock_cms)).run([], FULL_MAPPING, "token")

        assert result.total == 0
        assert result.processed == 0
        assert result.errors == []


class TestComputeProgress:
    """Tests for compute_progress()"""

    def test_rounds_half_up(self):
        assert compute_progress(1, 8) == 13  # 12.5
        assert compute_progress(1, 3) == 33
        assert compute_progress(2, 3) == 67

    def test_monotone_and_ends_at_100(self):
        values = [compute_progress(i, 60) for i in range(1, 61)]
        assert values == sorted(values)
        assert values[-1] == 100
