"""Tests for AuditStorage class.

Test coverage for audit log storage and retrieval with YAML format.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
import yaml

from cfcleaner.cleanup.audit import AuditStorage
from cfcleaner.models.cleanup_operation import CleanupOperation, OperationMode, OperationStatus
from cfcleaner.models.cleanup_record import CleanupRecord, RecordStatus


def _operation(operation_id: str, started_at: datetime) -> CleanupOperation:
    return CleanupOperation(
        operation_id=operation_id,
        mode=OperationMode.EXECUTE,
        status=OperationStatus.PARTIAL,
        api_url="https://api.example.com",
        started_at=started_at,
        completed_at=started_at,
        attempts=1,
        succeeded_count=1,
        failed_count=1,
    )


class TestAuditStorage:
    """Test suite for AuditStorage class."""

    @pytest.fixture
    def temp_storage_dir(self, tmp_path: Path) -> Path:
        """Create temporary storage directory for tests."""
        storage_dir = tmp_path / ".cfcleaner" / "audit-logs"
        storage_dir.mkdir(parents=True)
        return storage_dir

    @pytest.fixture
    def audit_storage(self, temp_storage_dir: Path) -> AuditStorage:
        """Create AuditStorage instance with temp directory."""
        return AuditStorage(storage_dir=str(temp_storage_dir))

    def test_init_creates_storage_directory(self, tmp_path: Path) -> None:
        """Test initialization creates audit-logs directory if missing."""
        storage_dir = tmp_path / "missing" / "audit-logs"

        AuditStorage(storage_dir=str(storage_dir))

        assert storage_dir.is_dir()

    def test_log_operation_creates_yaml_file(self, audit_storage: AuditStorage, temp_storage_dir: Path) -> None:
        """Test logging operation creates YAML file under year/month."""
        operation = _operation("op_123", datetime(2026, 10, 1, 12, 0, 0))
        records = [
            CleanupRecord(
                record_id="rec_001",
                operation_id="op_123",
                kind="spaces",
                resource_id="s-1",
                name="test-space-1",
                action="delete",
                status=RecordStatus.SUCCEEDED,
                timestamp=datetime(2026, 10, 1, 12, 0, 1),
            ),
            CleanupRecord(
                record_id="rec_002",
                operation_id="op_123",
                kind="spaces",
                resource_id="s-2",
                name="test-space-2",
                action="delete",
                status=RecordStatus.FAILED,
                timestamp=datetime(2026, 10, 1, 12, 0, 2),
                error_type="JobFailed",
                error_message="Job job-1 failed: Space is not empty",
            ),
        ]

        audit_file = audit_storage.log_operation(operation, records)

        assert audit_file == temp_storage_dir / "2026" / "10" / "operation-op_123.yaml"
        data = yaml.safe_load(audit_file.read_text())
        assert data["metadata"]["log_type"] == "environment_cleanup"
        assert data["operation"]["status"] == "partial"
        assert len(data["records"]) == 2
        assert data["records"][1]["error_type"] == "JobFailed"

    def test_get_operation(self, audit_storage: AuditStorage) -> None:
        """Test retrieving an operation by id."""
        audit_storage.log_operation(_operation("op_abc", datetime(2026, 9, 30)), [])

        data = audit_storage.get_operation("op_abc")

        assert data is not None
        assert data["operation"]["operation_id"] == "op_abc"

    def test_get_operation_missing(self, audit_storage: AuditStorage) -> None:
        """Test unknown operation ids return None."""
        assert audit_storage.get_operation("op_missing") is None

    def test_query_operations_by_date(self, audit_storage: AuditStorage) -> None:
        """Test date range filtering returns matching runs oldest first."""
        audit_storage.log_operation(_operation("op_3", datetime(2026, 10, 15)), [])
        audit_storage.log_operation(_operation("op_1", datetime(2026, 8, 1)), [])
        audit_storage.log_operation(_operation("op_2", datetime(2026, 9, 10)), [])

        everything = audit_storage.query_operations()
        recent = audit_storage.query_operations(since=datetime(2026, 9, 1))
        window = audit_storage.query_operations(since=datetime(2026, 9, 1), until=datetime(2026, 9, 30))

        assert [d["operation"]["operation_id"] for d in everything] == ["op_1", "op_2", "op_3"]
        assert [d["operation"]["operation_id"] for d in recent] == ["op_2", "op_3"]
        assert [d["operation"]["operation_id"] for d in window] == ["op_2"]

    def test_log_operation_overwrites_same_id(self, audit_storage: AuditStorage) -> None:
        """Test logging an operation twice keeps a single file."""
        operation = _operation("op_same", datetime(2026, 10, 1))
        audit_storage.log_operation(operation, [])
        operation.failed_count = 0
        audit_storage.log_operation(operation, [])

        assert len(audit_storage.query_operations()) == 1
        assert audit_storage.get_operation("op_same")["operation"]["failed_count"] == 0
