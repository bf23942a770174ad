"""Feature flag normalizer.

Not a deletion workflow: every flag named in the baseline is reset to its
baseline value. Flags missing from the baseline are never touched.
"""

from __future__ import annotations

from typing import AsyncIterator

from ...models.resource import ResourceRecord
from .base import CleanupContext, ResourceCleaner

STANDARD_FEATURE_FLAGS = {
    "app_bits_upload": True,
    "app_scaling": True,
    "diego_docker": True,
    "private_domain_creation": True,
    "route_creation": True,
    "service_instance_creation": True,
    "set_roles_by_username": True,
    "unset_roles_by_username": True,
    "user_org_creation": False,
}


class FeatureFlagCleaner(ResourceCleaner):
    """Reconciles platform feature flags with ``STANDARD_FEATURE_FLAGS``."""

    label = "feature flag"
    action = "set"

    def __init__(self, context: CleanupContext, baseline: dict[str, bool] = STANDARD_FEATURE_FLAGS) -> None:
        self.baseline = baseline
        super().__init__(context)

    @property
    def kind(self) -> str:
        return "feature_flags"

    async def list_resources(self) -> AsyncIterator[ResourceRecord]:
        for flag in await self.context.cloudfoundry.list_feature_flags():
            yield ResourceRecord(kind=self.kind, resource_id=flag["name"], name=flag["name"], entity=flag)

    def is_fixture(self, record: ResourceRecord) -> bool:
        """A flag needs resetting when it is in the baseline and differs from it."""
        if record.name not in self.baseline:
            return False
        return self.baseline[record.name] != record.entity.get("enabled")

    async def delete(self, record: ResourceRecord) -> None:
        await self.context.cloudfoundry.set_feature_flag(record.name, self.baseline[record.name])

    def failure_message(self, record: ResourceRecord) -> str:
        return f"Unable to set feature flag {record.name} to {self.baseline[record.name]}"
