"""Data models for resources, jobs and cleanup runs."""

from __future__ import annotations

from .cleanup_operation import CleanupOperation, OperationMode, OperationStatus
from .cleanup_record import CleanupRecord, RecordStatus
from .page import Page
from .resource import JobHandle, JobState, ResourceRecord

__all__ = [
    "CleanupOperation",
    "CleanupRecord",
    "JobHandle",
    "JobState",
    "OperationMode",
    "OperationStatus",
    "Page",
    "RecordStatus",
    "ResourceRecord",
]
