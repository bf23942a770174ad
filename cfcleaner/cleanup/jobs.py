"""Waiting for asynchronous platform jobs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Protocol

from ..exceptions import JobFailed, JobTimeout
from ..models.resource import JobHandle, JobState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_JOB_TIMEOUT = 300.0


class JobSource(Protocol):
    async def get_job(self, job_id: str) -> JobHandle: ...


class JobWaiter:
    """Polls a job until it finishes or fails.

    Attributes:
        client: Anything exposing ``get_job(job_id)``
        poll_interval: Seconds between polls
        timeout: Seconds after which a still-running job raises JobTimeout
    """

    def __init__(
        self,
        client: JobSource,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_JOB_TIMEOUT,
    ) -> None:
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout

    async def wait(self, handle: Optional[JobHandle]) -> None:
        """Wait for a job to reach a terminal state.

        A missing handle (synchronous completion) or an already-finished job
        returns without polling.

        Args:
            handle: Job handle returned by a delete call

        Raises:
            JobFailed: If the job reports failure
            JobTimeout: If the job is still running after ``timeout`` seconds
            TransportError: If polling fails
        """
        if handle is None:
            return

        started = time.monotonic()
        current = handle

        while True:
            if current.state.is_terminal:
                if current.state is JobState.FAILED:
                    raise JobFailed(current.job_id, current.error or "unknown error")
                return

            if time.monotonic() - started >= self.timeout:
                raise JobTimeout(current.job_id, self.timeout)

            await asyncio.sleep(self.poll_interval)
            current = await self.client.get_job(current.job_id)
            logger.debug(f"Job {current.job_id} is {current.state.value}")
