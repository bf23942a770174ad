"""Cleanup record model.

Individual resource cleanup attempt with result and metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class RecordStatus(Enum):
    """Individual attempt status."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class CleanupRecord:
    """Cleanup record entity.

    Represents one attempted action (delete, unbind, set flag) on a single
    remote object. Each record belongs to a CleanupOperation.

    Validation rules:
        - status=succeeded: no error_type or error_message
        - status=failed: requires error_type
        - kind and resource_id must be non-empty

    Attributes:
        record_id: Unique identifier for this record
        operation_id: Parent operation identifier
        kind: Resource kind (e.g., "spaces")
        resource_id: Remote identifier
        name: Display name, if the resource has one
        action: Action attempted ("delete", "unbind", "set")
        status: Attempt outcome
        timestamp: When the attempt finished (UTC)
        error_type: Exception class name if failed
        error_message: Human-readable error if failed
    """

    record_id: str
    operation_id: str
    kind: str
    resource_id: str
    name: Optional[str]
    action: str
    status: RecordStatus
    timestamp: datetime
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def validate(self) -> bool:
        """Validate record invariants.

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.status == RecordStatus.FAILED:
            if not self.error_type:
                raise ValueError("Failed status requires error_type")
        elif self.error_type or self.error_message:
            raise ValueError("Succeeded status cannot have an error")

        if not self.kind or not self.resource_id:
            raise ValueError("Record requires kind and resource_id")

        return True

    def to_dict(self) -> dict:
        """Serialize for the audit log."""
        return {
            "record_id": self.record_id,
            "operation_id": self.operation_id,
            "kind": self.kind,
            "resource_id": self.resource_id,
            "name": self.name,
            "action": self.action,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat() + "Z",
            "error_type": self.error_type,
            "error_message": self.error_message,
        }
