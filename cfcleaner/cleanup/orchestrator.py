"""Cleanup orchestrator.

Runs every resource-kind cleaner in an order that respects platform deletion
constraints, retries the whole run on TLS faults and bounds it with a
wall-clock deadline.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from ..exceptions import DeadlineExceeded, RetryBudgetExhausted, is_retryable
from ..models.cleanup_operation import CleanupOperation, OperationMode, OperationStatus
from ..models.cleanup_record import CleanupRecord
from ..models.resource import ResourceRecord
from .attempt import RunRecorder
from .cleaners import CLEANERS, CleanupContext, ResourceCleaner
from .jobs import JobWaiter
from .naming import NameFactory

if TYPE_CHECKING:
    from ..client.cloudfoundry import CloudFoundryClient
    from ..client.uaa import UaaClient
    from .audit import AuditStorage

logger = logging.getLogger(__name__)

# Each kind is cleaned only after everything that can still reference it
CLEANUP_ORDER = [
    "buildpacks",
    "feature_flags",
    "routes",
    "users",
    "applications_v2",
    "applications_v3",
    "packages",
    "security_groups",
    "service_instances",
    "user_provided_service_instances",
    "shared_domains",
    "private_domains",
    "identity_providers",
    "identity_zones",
    "groups",
    "uaa_users",
    "clients",
    "space_quota_definitions",
    "spaces",
    "organizations",
    "organization_quota_definitions",
]

DEFAULT_DEADLINE = 30 * 60.0
DEFAULT_MAX_ATTEMPTS = 5


def build_cleaners(context: CleanupContext) -> list[ResourceCleaner]:
    """Instantiate one cleaner per kind, in cleanup order."""
    return [CLEANERS[kind](context) for kind in CLEANUP_ORDER]


class CloudFoundryCleaner:
    """Cleanup orchestrator.

    Coordinates the per-kind cleaners of one target environment. Kinds run
    strictly one after another; items within a kind run concurrently. Per-item
    failures are logged by the cleaners and never fail the run.

    Attributes:
        cloudfoundry_client: Cloud Controller client
        uaa_client: UAA client
        name_factory: Fixture classifier
        job_waiter: Waiter for asynchronous deletes
        audit_storage: Audit log storage (optional)
        deadline: Wall-clock budget for the whole run, in seconds
        max_attempts: Maximum whole-run attempts on retryable faults
        last_operation: Operation of the most recent ``clean`` or ``preview`` call
    """

    def __init__(
        self,
        cloudfoundry_client: CloudFoundryClient,
        uaa_client: UaaClient,
        name_factory: NameFactory,
        job_waiter: Optional[JobWaiter] = None,
        audit_storage: Optional[AuditStorage] = None,
        deadline: float = DEFAULT_DEADLINE,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_predicate: Callable[[BaseException], bool] = is_retryable,
        cleaner_factory: Callable[[CleanupContext], list[ResourceCleaner]] = build_cleaners,
    ) -> None:
        """Initialize cleanup orchestrator.

        Args:
            cloudfoundry_client: Cloud Controller client
            uaa_client: UAA client
            name_factory: Fixture classifier
            job_waiter: Job waiter (default: polls the Cloud Controller client)
            audit_storage: Where to write the run audit log (optional)
            deadline: Wall-clock budget in seconds (default: 30 minutes)
            max_attempts: Whole-run attempts allowed on TLS faults (default: 5)
            retry_predicate: Decides whether a kind-level failure restarts the run
            cleaner_factory: Builds the ordered cleaners for one attempt
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.cloudfoundry_client = cloudfoundry_client
        self.uaa_client = uaa_client
        self.name_factory = name_factory
        self.job_waiter = job_waiter or JobWaiter(cloudfoundry_client)
        self.audit_storage = audit_storage
        self.deadline = deadline
        self.max_attempts = max_attempts
        self.retry_predicate = retry_predicate
        self.cleaner_factory = cleaner_factory
        self.last_operation: Optional[CleanupOperation] = None
        self._recorder: Optional[RunRecorder] = None

    @property
    def last_records(self) -> list[CleanupRecord]:
        """Item records of the final attempt of the most recent ``clean`` call."""
        return list(self._recorder.records) if self._recorder else []

    async def clean(self) -> None:
        """Delete every test fixture and reset feature flags.

        Returns normally even when individual items failed; those failures are
        logged and written to the audit log.

        Raises:
            DeadlineExceeded: If the run did not finish within the deadline
            RetryBudgetExhausted: If every attempt failed with a retryable fault
            CleanupError: For any other kind-level failure
        """
        operation = CleanupOperation(
            operation_id=f"op_{uuid.uuid4()}",
            mode=OperationMode.EXECUTE,
            status=OperationStatus.PLANNED,
            api_url=getattr(self.cloudfoundry_client, "api_url", None),
            started_at=datetime.utcnow(),
        )
        self.last_operation = operation
        self._recorder = RunRecorder(operation.operation_id)

        logger.debug(">> CLEANUP <<")
        try:
            await self._within_deadline(self._run_with_retry(operation))
        except DeadlineExceeded as e:
            self._finish(operation, OperationStatus.FAILED, e)
            logger.error(f"Cleanup aborted in {operation.current_kind}: {e}")
            raise
        except Exception as e:
            self._finish(operation, OperationStatus.FAILED, e)
            logger.error(f"Cleanup failed in {operation.current_kind}: {e}")
            raise

        status = OperationStatus.PARTIAL if self._recorder.failed_count else OperationStatus.COMPLETED
        self._finish(operation, status)
        logger.debug("<< CLEANUP >>")

    async def preview(self) -> dict[str, list[ResourceRecord]]:
        """List the fixtures each cleaner would act on, without changing anything.

        The dry-run operation is available as ``last_operation`` afterwards.

        Returns:
            Kind -> records to delete (feature flags: flags to reset), in cleanup order

        Raises:
            DeadlineExceeded: If discovery did not finish within the deadline
        """
        operation = CleanupOperation(
            operation_id=f"op_{uuid.uuid4()}",
            mode=OperationMode.DRY_RUN,
            status=OperationStatus.PLANNED,
            api_url=getattr(self.cloudfoundry_client, "api_url", None),
            started_at=datetime.utcnow(),
        )
        self.last_operation = operation
        self._recorder = None

        context = self._context(RunRecorder(operation.operation_id))
        plan: dict[str, list[ResourceRecord]] = {}

        async def discover_all() -> None:
            for cleaner in self.cleaner_factory(context):
                operation.current_kind = cleaner.kind
                plan[cleaner.kind] = await cleaner.discover()
                operation.kinds_completed.append(cleaner.kind)
            operation.current_kind = None

        await self._within_deadline(discover_all())
        operation.validate()

        return plan

    async def _within_deadline(self, run: Awaitable[None]) -> None:
        """Await ``run``, raising DeadlineExceeded only if the deadline itself expired."""
        task = asyncio.ensure_future(run)
        try:
            done, _ = await asyncio.wait({task}, timeout=self.deadline)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            task.cancel()
            await asyncio.wait({task})
            raise DeadlineExceeded(self.deadline)

        task.result()

    async def _run_with_retry(self, operation: CleanupOperation) -> None:
        last_error: Optional[BaseException] = None

        for attempt_number in range(1, self.max_attempts + 1):
            operation.attempts = attempt_number
            operation.transition(OperationStatus.RUNNING)
            self._recorder = RunRecorder(operation.operation_id)

            try:
                await self._run_once(operation, self._recorder)
                return
            except Exception as e:
                if not self.retry_predicate(e):
                    raise
                last_error = e
                logger.warning(
                    f"Cleanup attempt {attempt_number}/{self.max_attempts} failed in "
                    f"{operation.current_kind}: {e}"
                )

        raise RetryBudgetExhausted(self.max_attempts) from last_error

    async def _run_once(self, operation: CleanupOperation, recorder: RunRecorder) -> None:
        operation.kinds_completed = []

        for cleaner in self.cleaner_factory(self._context(recorder)):
            operation.current_kind = cleaner.kind
            logger.info(f"Cleaning {cleaner.kind}")
            await cleaner.clean()
            operation.kinds_completed.append(cleaner.kind)

        operation.current_kind = None

    def _context(self, recorder: RunRecorder) -> CleanupContext:
        return CleanupContext(
            cloudfoundry=self.cloudfoundry_client,
            uaa=self.uaa_client,
            names=self.name_factory,
            job_waiter=self.job_waiter,
            recorder=recorder,
        )

    def _finish(
        self,
        operation: CleanupOperation,
        status: OperationStatus,
        error: Optional[BaseException] = None,
    ) -> None:
        recorder = self._recorder or RunRecorder(operation.operation_id)

        operation.transition(status)
        operation.completed_at = datetime.utcnow()
        operation.succeeded_count = recorder.succeeded_count
        operation.failed_count = recorder.failed_count
        if error is not None:
            operation.error = f"{error.__class__.__name__}: {error}"
        operation.validate()

        if self.audit_storage is None:
            return

        try:
            self.audit_storage.log_operation(operation, recorder.records)
        except OSError as e:
            logger.warning(f"Unable to write audit log for {operation.operation_id}: {e}")
