"""Tests for the Cloud Controller and UAA clients."""

from __future__ import annotations

import json

import httpx
import pytest

from cfcleaner.client.cloudfoundry import CloudFoundryClient
from cfcleaner.client.transport import ApiTransport
from cfcleaner.client.uaa import UaaClient
from cfcleaner.models.resource import JobState


class RecordingHandler:
    """MockTransport handler returning canned responses by (method, path)."""

    def __init__(self, responses: dict) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses[(request.method, request.url.path)]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def _cloudfoundry(handler: RecordingHandler) -> CloudFoundryClient:
    return CloudFoundryClient(ApiTransport("https://api.example.com", transport=httpx.MockTransport(handler)))


def _uaa(handler: RecordingHandler) -> UaaClient:
    return UaaClient(ApiTransport("https://uaa.example.com", transport=httpx.MockTransport(handler)))


class TestCloudFoundryClient:
    """Test suite for CloudFoundryClient."""

    @pytest.mark.asyncio
    async def test_list_v2_page(self) -> None:
        """Test v2 listing parameters and page parsing."""
        handler = RecordingHandler(
            {
                ("GET", "/v2/spaces"): (
                    200,
                    {"total_results": 3, "total_pages": 2, "resources": [{"metadata": {"guid": "s-1"}}]},
                )
            }
        )
        client = _cloudfoundry(handler)

        page = await client.list_v2_page("/v2/spaces", 2)
        await client.aclose()

        assert page.total_pages == 2
        assert page.total_results == 3
        assert len(page.resources) == 1
        params = handler.requests[0].url.params
        assert params["page"] == "2"
        assert params["results-per-page"] == "100"

    @pytest.mark.asyncio
    async def test_list_v3_page(self) -> None:
        """Test v3 pagination block is read."""
        handler = RecordingHandler(
            {("GET", "/v3/apps"): (200, {"pagination": {"total_pages": 4, "total_results": 350}, "resources": []})}
        )
        client = _cloudfoundry(handler)

        page = await client.list_v3_page("/v3/apps", 1)
        await client.aclose()

        assert page.total_pages == 4
        assert handler.requests[0].url.params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_asynchronous_delete_returns_job(self) -> None:
        """Test async v2 deletes request async=true and return the job."""
        handler = RecordingHandler(
            {
                ("DELETE", "/v2/organizations/o-1"): (
                    202,
                    {"metadata": {"guid": "job-1"}, "entity": {"guid": "job-1", "status": "queued"}},
                )
            }
        )
        client = _cloudfoundry(handler)

        handle = await client.delete("/v2/organizations/o-1", asynchronous=True)
        await client.aclose()

        assert handler.requests[0].url.params["async"] == "true"
        assert handle.job_id == "job-1"
        assert handle.state is JobState.RUNNING

    @pytest.mark.asyncio
    async def test_synchronous_and_v3_deletes_return_no_job(self) -> None:
        """Test sync v2 and v3 deletes are not tracked."""
        handler = RecordingHandler(
            {
                ("DELETE", "/v2/security_groups/sg-1"): (204, None),
                ("DELETE", "/v3/apps/a-1"): (202, None),
            }
        )
        client = _cloudfoundry(handler)

        assert await client.delete("/v2/security_groups/sg-1") is None
        assert await client.delete("/v3/apps/a-1", v3=True) is None
        await client.aclose()

        assert "async" not in handler.requests[0].url.params
        assert "async" not in handler.requests[1].url.params

    @pytest.mark.asyncio
    async def test_delete_of_missing_resource_is_success(self) -> None:
        """Test a 404 delete returns no job instead of raising."""
        handler = RecordingHandler({("DELETE", "/v2/spaces/s-1"): (404, {"description": "not found"})})
        client = _cloudfoundry(handler)

        assert await client.delete("/v2/spaces/s-1", asynchronous=True) is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_get_job(self) -> None:
        """Test job polling parses the job state."""
        handler = RecordingHandler(
            {("GET", "/v2/jobs/job-1"): (200, {"entity": {"guid": "job-1", "status": "finished"}})}
        )
        client = _cloudfoundry(handler)

        handle = await client.get_job("job-1")
        await client.aclose()

        assert handle.state is JobState.FINISHED

    @pytest.mark.asyncio
    async def test_feature_flags(self) -> None:
        """Test listing and setting feature flags."""
        handler = RecordingHandler(
            {
                ("GET", "/v2/config/feature_flags"): (200, [{"name": "diego_docker", "enabled": False}]),
                ("PUT", "/v2/config/feature_flags/diego_docker"): (200, {"name": "diego_docker", "enabled": True}),
            }
        )
        client = _cloudfoundry(handler)

        flags = await client.list_feature_flags()
        await client.set_feature_flag("diego_docker", True)
        await client.aclose()

        assert flags == [{"name": "diego_docker", "enabled": False}]
        assert json.loads(handler.requests[1].content) == {"enabled": True}


class TestUaaClient:
    """Test suite for UaaClient."""

    @pytest.mark.asyncio
    async def test_list_page_uses_one_based_start_index(self) -> None:
        """Test the 0-based offset is sent as SCIM's 1-based startIndex."""
        handler = RecordingHandler(
            {("GET", "/Users"): (200, {"resources": [{"id": "u-1"}], "totalResults": 7, "startIndex": 3})}
        )
        client = _uaa(handler)

        page = await client.list_page("/Users", 2)
        await client.aclose()

        assert handler.requests[0].url.params["startIndex"] == "3"
        assert page.total_results == 7
        assert page.resources == [{"id": "u-1"}]

    @pytest.mark.asyncio
    async def test_list_all(self) -> None:
        """Test unpaginated listings return the raw list."""
        handler = RecordingHandler({("GET", "/identity-zones"): (200, [{"id": "uaa"}])})
        client = _uaa(handler)

        assert await client.list_all("/identity-zones") == [{"id": "uaa"}]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_delete_sends_if_match(self) -> None:
        """Test versioned deletes send If-Match and unversioned ones do not."""
        handler = RecordingHandler(
            {
                ("DELETE", "/Groups/g-1"): (200, {"id": "g-1"}),
                ("DELETE", "/oauth/clients/c-1"): (200, {"client_id": "c-1"}),
            }
        )
        client = _uaa(handler)

        await client.delete("/Groups/g-1", version="*")
        await client.delete("/oauth/clients/c-1")
        await client.aclose()

        assert handler.requests[0].headers["If-Match"] == "*"
        assert "If-Match" not in handler.requests[1].headers
