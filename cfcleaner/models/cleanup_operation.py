"""Cleanup operation model.

Represents one invocation of the cleanup orchestrator with its progress and
outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class OperationMode(Enum):
    """Operation execution mode."""

    DRY_RUN = "dry-run"
    EXECUTE = "execute"


class OperationStatus(Enum):
    """Operation execution status with state transitions."""

    PLANNED = "planned"
    RUNNING = "running"
    COMPLETED = "completed"
    PARTIAL = "partial"
    FAILED = "failed"


_TRANSITIONS = {
    OperationStatus.PLANNED: {OperationStatus.RUNNING, OperationStatus.FAILED},
    OperationStatus.RUNNING: {
        OperationStatus.RUNNING,
        OperationStatus.COMPLETED,
        OperationStatus.PARTIAL,
        OperationStatus.FAILED,
    },
    OperationStatus.COMPLETED: set(),
    OperationStatus.PARTIAL: set(),
    OperationStatus.FAILED: set(),
}


@dataclass
class CleanupOperation:
    """Cleanup operation entity.

    State transitions:
        planned → running(kind₁) → … → running(kindₙ) → completed (no item failed)
        planned → running → … → partial (some items failed and were logged)
        planned → running → running (retry after a TLS fault, attempts += 1)
        planned → running → failed (deadline, retry budget, fatal transport error)

    Attributes:
        operation_id: Unique identifier for the operation
        mode: dry-run or execute
        status: Current execution status
        api_url: Target platform API endpoint
        started_at: When the operation started (UTC)
        completed_at: When the operation reached a terminal status (optional)
        attempts: Number of whole-run attempts started
        current_kind: Kind currently being cleaned (optional)
        kinds_completed: Kinds fully drained in the current attempt
        succeeded_count: Items handled successfully in the final attempt
        failed_count: Items whose failure was logged in the final attempt
        error: Terminal error description (optional)
    """

    operation_id: str
    mode: OperationMode
    status: OperationStatus
    api_url: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    attempts: int = 0
    current_kind: Optional[str] = None
    kinds_completed: list[str] = field(default_factory=list)
    succeeded_count: int = 0
    failed_count: int = 0
    error: Optional[str] = None

    def transition(self, status: OperationStatus) -> None:
        """Move to a new status.

        Raises:
            ValueError: If the transition is not allowed from the current status
        """
        if status not in _TRANSITIONS[self.status]:
            raise ValueError(f"Invalid transition {self.status.value} -> {status.value}")
        self.status = status

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.status]

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def validate(self) -> bool:
        """Validate operation invariants.

        Validation rules:
            - completed_at must be after started_at
            - dry-run mode must stay planned and never count deletions
            - terminal status requires completed_at

        Returns:
            True if validation passes

        Raises:
            ValueError: If any validation rule fails
        """
        if self.completed_at and self.started_at:
            if self.completed_at < self.started_at:
                raise ValueError("Completion time before start time")

        if self.mode == OperationMode.DRY_RUN and (self.succeeded_count or self.failed_count):
            raise ValueError("Dry-run operation cannot record deletions")

        if self.mode == OperationMode.DRY_RUN and self.status != OperationStatus.PLANNED:
            raise ValueError("Dry-run mode must have planned status")

        if self.is_terminal and self.completed_at is None:
            raise ValueError("Terminal operation requires completed_at")

        return True

    def to_dict(self) -> dict:
        """Serialize for the audit log."""
        return {
            "operation_id": self.operation_id,
            "mode": self.mode.value,
            "status": self.status.value,
            "api_url": self.api_url,
            "started_at": self.started_at.isoformat() + "Z" if self.started_at else None,
            "completed_at": self.completed_at.isoformat() + "Z" if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "attempts": self.attempts,
            "kinds_completed": list(self.kinds_completed),
            "succeeded_count": self.succeeded_count,
            "failed_count": self.failed_count,
            "error": self.error,
        }
