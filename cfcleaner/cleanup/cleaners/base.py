"""Base class for per-resource-kind cleaners."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Iterable

from ...models.resource import ResourceRecord
from ..attempt import RunRecorder, attempt
from ..jobs import JobWaiter
from ..naming import NameFactory

if TYPE_CHECKING:
    from ...client.cloudfoundry import CloudFoundryClient
    from ...client.uaa import UaaClient


@dataclass
class CleanupContext:
    """Dependencies shared by every cleaner of one run.

    Attributes:
        cloudfoundry: Cloud Controller client
        uaa: UAA client
        names: Fixture classifier
        job_waiter: Waiter for asynchronous deletes
        recorder: Recorder for the current attempt
    """

    cloudfoundry: CloudFoundryClient
    uaa: UaaClient
    names: NameFactory
    job_waiter: JobWaiter
    recorder: RunRecorder


class ResourceCleaner(ABC):
    """Abstract base class for all resource-kind cleaners.

    Each cleaner should:
    1. Have a unique kind
    2. Implement list_resources to stream every remote object of that kind
    3. Implement is_fixture to classify a single record
    4. Implement delete to remove one record (waiting for its job if any)

    ``clean`` lists everything, filters through ``is_fixture`` and only then
    deletes the matches concurrently; individual failures are logged and
    suppressed. Listing failures propagate.
    """

    #: Resource description used in failure messages
    label: str = "resource"
    #: Action name recorded for each item
    action: str = "delete"

    def __init__(self, context: CleanupContext) -> None:
        self.context = context
        self.logger = logging.getLogger(f"{__name__}.{self.kind}")

    @property
    @abstractmethod
    def kind(self) -> str:
        """Unique identifier for this resource kind (e.g., "spaces")."""

    @abstractmethod
    def list_resources(self) -> AsyncIterator[ResourceRecord]:
        """Stream every remote object of this kind."""

    @abstractmethod
    def is_fixture(self, record: ResourceRecord) -> bool:
        """Whether the record was created by a test run."""

    @abstractmethod
    async def delete(self, record: ResourceRecord) -> None:
        """Delete one record, waiting for its job when the delete is asynchronous."""

    async def discover(self) -> list[ResourceRecord]:
        """List every object of this kind and keep the fixtures.

        Returns:
            Records to clean, in listing order
        """
        candidates = [record async for record in self.list_resources()]
        fixtures = [record for record in candidates if self.is_fixture(record)]
        self.logger.debug(f"{len(fixtures)} of {len(candidates)} {self.kind} are test fixtures")
        return fixtures

    async def clean(self) -> None:
        """Delete every fixture of this kind; returns once all attempts finished."""
        fixtures = await self.discover()
        await self._delete_all(fixtures)

    async def _delete_all(self, records: Iterable[ResourceRecord]) -> None:
        await asyncio.gather(*(self._attempt_delete(record) for record in records))

    async def _attempt_delete(self, record: ResourceRecord) -> bool:
        return await attempt(
            lambda: self.delete(record),
            record,
            self.context.recorder,
            action=self.action,
            description=self.failure_message(record),
        )

    def failure_message(self, record: ResourceRecord) -> str:
        """Log message prefix when deleting ``record`` fails."""
        return f"Unable to delete {self.label} {record.label}"
