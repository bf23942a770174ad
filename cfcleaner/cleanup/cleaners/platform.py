"""Cloud Controller resource cleaners.

Maps platform resource kinds to their collection path, API version, fixture
classifier and delete semantics.
"""

from __future__ import annotations

from typing import AsyncIterator

from ...models.resource import ResourceRecord
from ..pagination import PageNumberPagination, PaginatedCollector
from .base import CleanupContext, ResourceCleaner

# kind -> (collection path, v3 api, classifier method, asynchronous delete, label)
PLATFORM_KINDS = {
    "buildpacks": ("/v2/buildpacks", False, "is_buildpack_name", True, "buildpack"),
    "users": ("/v2/users", False, "is_user_id", True, "user"),
    "applications_v2": ("/v2/apps", False, "is_application_name", False, "V2 application"),
    "applications_v3": ("/v3/apps", True, "is_application_name", False, "V3 application"),
    "packages": ("/v3/packages", True, None, False, "package"),
    "routes": ("/v2/routes", False, None, True, "route"),
    "security_groups": ("/v2/security_groups", False, "is_security_group_name", False, "security group"),
    "service_instances": ("/v2/service_instances", False, "is_service_instance_name", True, "service instance"),
    "user_provided_service_instances": (
        "/v2/user_provided_service_instances",
        False,
        "is_service_instance_name",
        False,
        "user provided service instance",
    ),
    "shared_domains": ("/v2/shared_domains", False, "is_domain_name", True, "domain"),
    "private_domains": ("/v2/private_domains", False, "is_domain_name", True, "private domain"),
    "space_quota_definitions": (
        "/v2/space_quota_definitions",
        False,
        "is_quota_definition_name",
        True,
        "space quota definition",
    ),
    "spaces": ("/v2/spaces", False, "is_space_name", True, "space"),
    "organizations": ("/v2/organizations", False, "is_organization_name", True, "organization"),
    "organization_quota_definitions": (
        "/v2/quota_definitions",
        False,
        "is_quota_definition_name",
        True,
        "organization quota definition",
    ),
}


def list_platform_resources(context: CleanupContext, path: str, v3: bool = False) -> PaginatedCollector:
    """Collector over every page of a Cloud Controller collection."""
    client = context.cloudfoundry
    fetch = client.list_v3_page if v3 else client.list_v2_page
    return PaginatedCollector(lambda page: fetch(path, page), PageNumberPagination())


class PlatformCleaner(ResourceCleaner):
    """Standard list → classify → delete → wait cleaner for one platform kind.

    Attributes:
        path: Collection path
        v3: Whether the kind lives in the v3 API
        classifier: Name of the NameFactory predicate applied to the record name
        asynchronous: Whether deletes return a job that must be waited for
    """

    def __init__(self, context: CleanupContext, kind: str) -> None:
        if kind not in PLATFORM_KINDS:
            raise ValueError(f"Unsupported platform resource kind: {kind}")

        self._kind = kind
        self.path, self.v3, self.classifier, self.asynchronous, self.label = PLATFORM_KINDS[kind]
        super().__init__(context)

    @property
    def kind(self) -> str:
        return self._kind

    async def list_resources(self) -> AsyncIterator[ResourceRecord]:
        collector = list_platform_resources(self.context, self.path, v3=self.v3)
        async for payload in collector:
            yield self.to_record(payload)

    def to_record(self, payload: dict) -> ResourceRecord:
        if self.v3:
            return ResourceRecord.from_v3(self.kind, payload)
        return ResourceRecord.from_v2(self.kind, payload)

    def is_fixture(self, record: ResourceRecord) -> bool:
        predicate = getattr(self.context.names, self.classifier)
        return predicate(record.name)

    async def delete(self, record: ResourceRecord) -> None:
        handle = await self.context.cloudfoundry.delete(
            f"{self.path}/{record.resource_id}",
            asynchronous=self.asynchronous,
            v3=self.v3,
        )
        if self.asynchronous:
            await self.context.job_waiter.wait(handle)


class PlatformUserCleaner(PlatformCleaner):
    """Platform users carry no name; they are classified by their guid."""

    def __init__(self, context: CleanupContext, kind: str = "users") -> None:
        super().__init__(context, kind)

    def is_fixture(self, record: ResourceRecord) -> bool:
        return self.context.names.is_user_id(record.resource_id)

    def failure_message(self, record: ResourceRecord) -> str:
        return f"Unable to delete user {record.resource_id}"


class PackageCleaner(PlatformCleaner):
    """Packages are all removable; no classifier is applied."""

    def __init__(self, context: CleanupContext, kind: str = "packages") -> None:
        super().__init__(context, kind)

    def is_fixture(self, record: ResourceRecord) -> bool:
        return True

    def failure_message(self, record: ResourceRecord) -> str:
        return f"Unable to delete package {record.resource_id}"
