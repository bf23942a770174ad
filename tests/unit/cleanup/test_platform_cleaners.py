"""Tests for Cloud Controller resource cleaners."""

from __future__ import annotations

import logging

import pytest

from cfcleaner.cleanup.cleaners import CLEANERS
from cfcleaner.cleanup.cleaners.platform import PLATFORM_KINDS, PackageCleaner, PlatformCleaner, PlatformUserCleaner
from cfcleaner.exceptions import TransportError
from cfcleaner.models.resource import JobState
from tests.fixtures.fake_platform import FakeCloudFoundryClient, make_context, v2_resource, v3_resource


class TestPlatformCleaner:
    """Test suite for the table-driven platform cleaner."""

    @pytest.fixture
    def cloudfoundry(self) -> FakeCloudFoundryClient:
        return FakeCloudFoundryClient(page_size=2)

    def test_unknown_kind_is_rejected(self) -> None:
        """Test only registered kinds can be cleaned."""
        with pytest.raises(ValueError, match="Unsupported platform resource kind"):
            PlatformCleaner(make_context(), "widgets")

    def test_every_platform_kind_has_a_cleaner(self) -> None:
        """Test the registry covers the platform kind table."""
        assert set(PLATFORM_KINDS) <= set(CLEANERS)

    @pytest.mark.asyncio
    async def test_deletes_only_fixtures_across_pages(self, cloudfoundry: FakeCloudFoundryClient) -> None:
        """Test every page is listed and only fixture names are deleted."""
        cloudfoundry.add("/v2/spaces", v2_resource("s-1", name="test-space-1"))
        cloudfoundry.add("/v2/spaces", v2_resource("s-2", name="production"))
        cloudfoundry.add("/v2/spaces", v2_resource("s-3", name="test-space-3"))
        context = make_context(cloudfoundry)

        await PlatformCleaner(context, "spaces").clean()

        assert sorted(cloudfoundry.deleted) == ["/v2/spaces/s-1", "/v2/spaces/s-3"]
        assert cloudfoundry.ids("/v2/spaces") == ["s-2"]
        assert context.recorder.succeeded_count == 2

    @pytest.mark.asyncio
    async def test_discover_lists_everything_before_deleting(self, cloudfoundry: FakeCloudFoundryClient) -> None:
        """Test discovery does not delete and reports fixtures in listing order."""
        cloudfoundry.add("/v2/buildpacks", v2_resource("b-1", name="test-buildpack-1"))
        cloudfoundry.add("/v2/buildpacks", v2_resource("b-2", name="staticfile_buildpack"))
        cloudfoundry.add("/v2/buildpacks", v2_resource("b-3", name="test-buildpack-3"))

        fixtures = await PlatformCleaner(make_context(cloudfoundry), "buildpacks").discover()

        assert [r.resource_id for r in fixtures] == ["b-1", "b-3"]
        assert cloudfoundry.deleted == []

    @pytest.mark.asyncio
    async def test_asynchronous_delete_waits_for_job(self, cloudfoundry: FakeCloudFoundryClient) -> None:
        """Test asynchronous kinds poll their job to completion."""
        cloudfoundry.add("/v2/organizations", v2_resource("o-1", name="test-organization-1"))

        await PlatformCleaner(make_context(cloudfoundry), "organizations").clean()

        assert len(cloudfoundry.jobs) == 1
        assert list(cloudfoundry.jobs.values())[0] == [JobState.FINISHED]

    @pytest.mark.asyncio
    async def test_item_failure_does_not_stop_siblings(
        self, cloudfoundry: FakeCloudFoundryClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test one failed delete is logged while the others still happen."""
        cloudfoundry.add("/v2/security_groups", v2_resource("sg-1", name="test-security-group-1"))
        cloudfoundry.add("/v2/security_groups", v2_resource("sg-2", name="test-security-group-2"))
        cloudfoundry.failing_deletes["/v2/security_groups/sg-1"] = TransportError("in use", status_code=422)
        context = make_context(cloudfoundry)

        with caplog.at_level(logging.ERROR):
            await PlatformCleaner(context, "security_groups").clean()

        assert cloudfoundry.deleted == ["/v2/security_groups/sg-2"]
        assert "Unable to delete security group test-security-group-1: in use" in caplog.text
        assert context.recorder.failed_count == 1

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self, cloudfoundry: FakeCloudFoundryClient) -> None:
        """Test a failing listing ends the kind with its error."""
        cloudfoundry.failing_lists["/v2/spaces"] = [TransportError("boom", status_code=500)]

        with pytest.raises(TransportError):
            await PlatformCleaner(make_context(cloudfoundry), "spaces").clean()

    @pytest.mark.asyncio
    async def test_v3_kind_uses_v3_listing(self, cloudfoundry: FakeCloudFoundryClient) -> None:
        """Test v3 records are read from flat payloads."""
        cloudfoundry.add("/v3/apps", v3_resource("a-1", name="test-application-1"))
        cloudfoundry.add("/v3/apps", v3_resource("a-2", name="dora"))

        await CLEANERS["applications_v3"](make_context(cloudfoundry)).clean()

        assert cloudfoundry.deleted == ["/v3/apps/a-1"]
        assert cloudfoundry.jobs == {}


class TestPlatformUserCleaner:
    """Test suite for platform users."""

    @pytest.mark.asyncio
    async def test_users_are_classified_by_guid(self) -> None:
        """Test users are matched on their id, not a name."""
        cloudfoundry = FakeCloudFoundryClient()
        cloudfoundry.add("/v2/users", v2_resource("test-user-id-abc", username="whoever"))
        cloudfoundry.add("/v2/users", v2_resource("admin-guid", username="test-user-xyz"))

        await PlatformUserCleaner(make_context(cloudfoundry)).clean()

        assert cloudfoundry.deleted == ["/v2/users/test-user-id-abc"]


class TestPackageCleaner:
    """Test suite for packages."""

    @pytest.mark.asyncio
    async def test_every_package_is_deleted(self) -> None:
        """Test packages are deleted without classification."""
        cloudfoundry = FakeCloudFoundryClient()
        cloudfoundry.add("/v3/packages", v3_resource("p-1", type="bits"))
        cloudfoundry.add("/v3/packages", v3_resource("p-2", type="docker"))
        cloudfoundry.add("/v3/packages", v3_resource("p-3", type="bits"))

        await PackageCleaner(make_context(cloudfoundry)).clean()

        assert sorted(cloudfoundry.deleted) == ["/v3/packages/p-1", "/v3/packages/p-2", "/v3/packages/p-3"]
