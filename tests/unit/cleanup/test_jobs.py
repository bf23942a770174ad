"""Tests for asynchronous job waiting."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import pytest

from cfcleaner.cleanup.jobs import JobWaiter
from cfcleaner.exceptions import JobFailed, JobTimeout, TransportError
from cfcleaner.models.resource import JobHandle, JobState


def _handle(state: JobState, error: str = None) -> JobHandle:
    return JobHandle(job_id="job-1", state=state, error=error)


class TestJobWaiter:
    """Test suite for JobWaiter."""

    @pytest.fixture
    def client(self) -> Mock:
        client = Mock()
        client.get_job = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_none_handle_returns_immediately(self, client: Mock) -> None:
        """Test synchronous deletes (no job) need no polling."""
        await JobWaiter(client, poll_interval=0).wait(None)

        client.get_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_finished_handle_is_not_polled(self, client: Mock) -> None:
        """Test waiting on an already-finished job does nothing, however often."""
        waiter = JobWaiter(client, poll_interval=0)
        handle = _handle(JobState.FINISHED)

        await waiter.wait(handle)
        await waiter.wait(handle)

        client.get_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_polls_until_finished(self, client: Mock) -> None:
        """Test a running job is polled until it reports finished."""
        client.get_job.side_effect = [
            _handle(JobState.RUNNING),
            _handle(JobState.RUNNING),
            _handle(JobState.FINISHED),
        ]

        await JobWaiter(client, poll_interval=0).wait(_handle(JobState.RUNNING))

        assert client.get_job.await_count == 3
        client.get_job.assert_awaited_with("job-1")

    @pytest.mark.asyncio
    async def test_failed_job_raises_with_reason(self, client: Mock) -> None:
        """Test a failed job surfaces its error description."""
        client.get_job.return_value = _handle(JobState.FAILED, "Space is not empty")

        with pytest.raises(JobFailed, match="Space is not empty") as exc_info:
            await JobWaiter(client, poll_interval=0).wait(_handle(JobState.RUNNING))

        assert exc_info.value.job_id == "job-1"

    @pytest.mark.asyncio
    async def test_initially_failed_handle_raises(self, client: Mock) -> None:
        """Test a handle that is already failed raises without polling."""
        with pytest.raises(JobFailed):
            await JobWaiter(client, poll_interval=0).wait(_handle(JobState.FAILED, "boom"))

        client.get_job.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout(self, client: Mock) -> None:
        """Test a job that never finishes raises JobTimeout."""
        client.get_job.return_value = _handle(JobState.RUNNING)

        with pytest.raises(JobTimeout):
            await JobWaiter(client, poll_interval=0, timeout=0).wait(_handle(JobState.RUNNING))

    @pytest.mark.asyncio
    async def test_poll_failure_propagates(self, client: Mock) -> None:
        """Test transport errors while polling are not swallowed."""
        client.get_job.side_effect = TransportError("unreachable")

        with pytest.raises(TransportError):
            await JobWaiter(client, poll_interval=0).wait(_handle(JobState.RUNNING))
