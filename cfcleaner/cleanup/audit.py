"""Audit storage for cleanup runs.

Stores and retrieves run audit logs in YAML format for troubleshooting failed
test environment resets.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from ..models.cleanup_operation import CleanupOperation
from ..models.cleanup_record import CleanupRecord


class AuditStorage:
    """Audit log storage and retrieval.

    Stores cleanup operation audit logs as YAML files organized by year/month.
    Supports querying operations by date range and retrieving a single
    operation log.

    Storage structure:
        ~/.cfcleaner/audit-logs/
            2026/
                10/
                    operation-op_123.yaml
                    operation-op_456.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.cfcleaner/audit-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".cfcleaner" / "audit-logs")

        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_operation(self, operation: CleanupOperation, records: list[CleanupRecord]) -> Path:
        """Log cleanup operation to audit storage.

        Creates a YAML file with operation metadata and every item record.
        Overwrites an existing log with the same operation ID.

        Args:
            operation: Cleanup operation to log
            records: Item records of the operation's final attempt

        Returns:
            Path of the written audit file
        """
        timestamp = operation.started_at or datetime.utcnow()
        year_month_dir = self.storage_dir / str(timestamp.year) / f"{timestamp.month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "environment_cleanup",
                "created_at": datetime.utcnow().isoformat() + "Z",
            },
            "operation": operation.to_dict(),
            "records": [record.to_dict() for record in records],
        }

        audit_file = year_month_dir / f"operation-{operation.operation_id}.yaml"
        with open(audit_file, "w") as f:
            yaml.safe_dump(audit_data, f, default_flow_style=False, sort_keys=False)

        return audit_file

    def get_operation(self, operation_id: str) -> Optional[dict]:
        """Retrieve operation audit log by ID.

        Args:
            operation_id: Operation ID to retrieve

        Returns:
            Audit log dictionary if found, None otherwise
        """
        for audit_file in self.storage_dir.glob(f"*/*/operation-{operation_id}.yaml"):
            with open(audit_file, "r") as f:
                return yaml.safe_load(f)

        return None

    def query_operations(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> list[dict]:
        """Query operations within date range.

        Args:
            since: Start date (inclusive), None for all
            until: End date (inclusive), None for all

        Returns:
            List of operation audit logs matching criteria, oldest first
        """
        results = []

        for audit_file in sorted(self.storage_dir.glob("*/*/operation-*.yaml")):
            with open(audit_file, "r") as f:
                audit_data = yaml.safe_load(f)

            started_at = audit_data["operation"].get("started_at")
            if started_at is None:
                continue
            timestamp = datetime.fromisoformat(started_at.rstrip("Z"))

            if since and timestamp < since:
                continue
            if until and timestamp > until:
                continue

            results.append(audit_data)

        results.sort(key=lambda data: data["operation"]["started_at"])
        return results
