"""UAA (identity management) resource cleaners.

UAA deletes are synchronous; no job is returned.
"""

from __future__ import annotations

from typing import AsyncIterator, Iterable

from ...models.resource import ResourceRecord
from ..dependency import DependencyResolver
from ..pagination import PaginatedCollector, StartIndexPagination
from .base import CleanupContext, ResourceCleaner

# kind -> (path, paginated, name field, id field, classifier method, If-Match version, label)
UAA_KINDS = {
    "identity_providers": (
        "/identity-providers",
        False,
        "name",
        "id",
        "is_identity_provider_name",
        None,
        "identity provider",
    ),
    "identity_zones": ("/identity-zones", False, "name", "id", "is_identity_zone_name", None, "identity zone"),
    "groups": ("/Groups", True, "displayName", "id", "is_group_name", "*", "group"),
    "uaa_users": ("/Users", True, "userName", "id", "is_user_name", "*", "user"),
    "clients": ("/oauth/clients", True, "client_id", "client_id", "is_client_id", None, "client"),
}


class UaaCleaner(ResourceCleaner):
    """Standard list → classify → delete cleaner for one UAA kind."""

    def __init__(self, context: CleanupContext, kind: str) -> None:
        if kind not in UAA_KINDS:
            raise ValueError(f"Unsupported UAA resource kind: {kind}")

        self._kind = kind
        (
            self.path,
            self.paginated,
            self.name_field,
            self.id_field,
            self.classifier,
            self.version,
            self.label,
        ) = UAA_KINDS[kind]
        super().__init__(context)

    @property
    def kind(self) -> str:
        return self._kind

    async def list_resources(self) -> AsyncIterator[ResourceRecord]:
        uaa = self.context.uaa

        if self.paginated:
            payloads = PaginatedCollector(lambda offset: uaa.list_page(self.path, offset), StartIndexPagination())
            async for payload in payloads:
                yield self.to_record(payload)
        else:
            for payload in await uaa.list_all(self.path):
                yield self.to_record(payload)

    def to_record(self, payload: dict) -> ResourceRecord:
        return ResourceRecord.from_uaa(self.kind, payload, name_field=self.name_field, id_field=self.id_field)

    def is_fixture(self, record: ResourceRecord) -> bool:
        predicate = getattr(self.context.names, self.classifier)
        return predicate(record.name)

    async def delete(self, record: ResourceRecord) -> None:
        await self.context.uaa.delete(f"{self.path}/{record.resource_id}", version=self.version)


class GroupCleaner(UaaCleaner):
    """Deletes fixture groups one at a time, member groups before their containers.

    A group that lists another fixture group as a member would leave a dangling
    membership behind if deleted first, which the identity store may reject.
    """

    def __init__(self, context: CleanupContext, kind: str = "groups") -> None:
        super().__init__(context, kind)

    async def discover(self) -> list[ResourceRecord]:
        groups = await super().discover()
        return self.order_for_deletion(groups)

    def order_for_deletion(self, groups: list[ResourceRecord]) -> list[ResourceRecord]:
        """Topologically sort groups by membership.

        Groups caught in a membership cycle are released in listing order.
        """
        resolver = DependencyResolver()
        resolver.build_graph_from_groups(groups)
        by_id = {group.resource_id: group for group in groups}
        order = resolver.compute_deletion_order([group.resource_id for group in groups])

        return [by_id[group_id] for group_id in order]

    async def _delete_all(self, records: Iterable[ResourceRecord]) -> None:
        for record in records:
            await self._attempt_delete(record)
