"""Uniform failure handling for per-item cleanup actions.

Every delete, unbind and flag update goes through ``attempt``, which records
the outcome and applies a failure policy instead of repeating try/except at
each call site.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..models.cleanup_record import CleanupRecord, RecordStatus
from ..models.resource import ResourceRecord

logger = logging.getLogger(__name__)


class FailurePolicy(Enum):
    """What to do when an item action fails."""

    LOG_AND_CONTINUE = "log-and-continue"
    PROPAGATE = "propagate"


class RunRecorder:
    """Collects the records of one cleanup attempt.

    Attributes:
        operation_id: Operation the records belong to
        records: Records in completion order
    """

    def __init__(self, operation_id: Optional[str] = None) -> None:
        self.operation_id = operation_id or f"op_{uuid.uuid4()}"
        self.records: list[CleanupRecord] = []

    def record(
        self,
        resource: ResourceRecord,
        action: str,
        error: Optional[BaseException] = None,
    ) -> CleanupRecord:
        """Append a record for a finished action."""
        record = CleanupRecord(
            record_id=f"rec_{uuid.uuid4()}",
            operation_id=self.operation_id,
            kind=resource.kind,
            resource_id=resource.resource_id,
            name=resource.name,
            action=action,
            status=RecordStatus.FAILED if error else RecordStatus.SUCCEEDED,
            timestamp=datetime.utcnow(),
            error_type=error.__class__.__name__ if error else None,
            error_message=str(error) if error else None,
        )
        record.validate()
        self.records.append(record)
        return record

    @property
    def succeeded_count(self) -> int:
        return sum(1 for r in self.records if r.status == RecordStatus.SUCCEEDED)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.records if r.status == RecordStatus.FAILED)


async def attempt(
    operation: Callable[[], Awaitable[Any]],
    resource: ResourceRecord,
    recorder: RunRecorder,
    *,
    action: str = "delete",
    description: Optional[str] = None,
    policy: FailurePolicy = FailurePolicy.LOG_AND_CONTINUE,
) -> bool:
    """Run one item action, record its outcome and apply the failure policy.

    Args:
        operation: Coroutine function performing the action
        resource: Resource the action applies to
        recorder: Recorder for the current attempt
        action: Action name for the record ("delete", "unbind", "set")
        description: Log message prefix on failure (default: "Unable to <action> <kind> <label>")
        policy: LOG_AND_CONTINUE suppresses the error, PROPAGATE re-raises it

    Returns:
        True if the action succeeded, False if it failed and was suppressed
    """
    try:
        await operation()
    except Exception as e:
        recorder.record(resource, action, error=e)
        message = description or f"Unable to {action} {resource.kind} {resource.label}"
        logger.error(f"{message}: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        if policy is FailurePolicy.PROPAGATE:
            raise
        return False

    recorder.record(resource, action)
    logger.debug(f"{action} {resource.kind} {resource.label} succeeded")
    return True
