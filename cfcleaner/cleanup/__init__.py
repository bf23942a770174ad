"""Test environment cleanup.

Deletes every resource left behind by integration test runs and resets
platform feature flags.

Classes:
    CloudFoundryCleaner: Main orchestrator for cleanup runs
    ResourceCleaner: Base class of the per-kind cleaners
    PaginatedCollector: Lazy stream over paginated listings
    JobWaiter: Polls asynchronous delete jobs
    DependencyResolver: Membership-based deletion ordering for groups
    AuditStorage: Audit log storage and retrieval
"""

from __future__ import annotations

from .audit import AuditStorage
from .cleaners import ResourceCleaner
from .dependency import DependencyResolver
from .jobs import JobWaiter
from .orchestrator import CloudFoundryCleaner
from .pagination import PaginatedCollector

__all__ = [
    "CloudFoundryCleaner",
    "ResourceCleaner",
    "PaginatedCollector",
    "JobWaiter",
    "DependencyResolver",
    "AuditStorage",
]
