"""Application cleaners.

v2 applications must lose their service bindings before they can be deleted;
v3 applications are deleted directly.
"""

from __future__ import annotations

import asyncio

from ...models.resource import ResourceRecord
from ..attempt import attempt
from .base import CleanupContext
from .platform import PlatformCleaner, list_platform_resources


class ApplicationV2Cleaner(PlatformCleaner):
    """Removes every service binding of a fixture application, then the application."""

    def __init__(self, context: CleanupContext, kind: str = "applications_v2") -> None:
        super().__init__(context, kind)

    async def delete(self, record: ResourceRecord) -> None:
        await self.remove_service_bindings(record)
        await super().delete(record)

    async def remove_service_bindings(self, application: ResourceRecord) -> None:
        """Detach all service bindings from an application.

        Each removal is attempted independently; a failed removal is logged and
        the application delete is still attempted.

        Args:
            application: Application record
        """
        bindings_path = f"{self.path}/{application.resource_id}/service_bindings"
        collector = list_platform_resources(self.context, bindings_path)
        bindings = [ResourceRecord.from_v2("service_bindings", payload) async for payload in collector]

        await asyncio.gather(
            *(
                attempt(
                    lambda binding=binding: self.context.cloudfoundry.delete(f"{bindings_path}/{binding.resource_id}"),
                    binding,
                    self.context.recorder,
                    action="unbind",
                    description=f"Unable to remove service binding {binding.resource_id} from {application.label}",
                )
                for binding in bindings
            )
        )


class ApplicationV3Cleaner(PlatformCleaner):
    def __init__(self, context: CleanupContext, kind: str = "applications_v3") -> None:
        super().__init__(context, kind)
