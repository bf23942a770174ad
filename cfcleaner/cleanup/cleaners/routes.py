"""Route cleaner.

Routes are classified through their domain as well as their host, so the
cleaner first builds a domain id → name lookup table from the private and
shared domain listings.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from ...models.resource import ResourceRecord
from .base import CleanupContext
from .platform import PlatformCleaner, list_platform_resources

DOMAIN_PATHS = ("/v2/private_domains", "/v2/shared_domains")


def format_route(entity: dict, domain: Optional[str]) -> str:
    """Render a route as ``host.domain:port/path`` for log messages."""
    host = entity.get("host") or ""
    address = f"{host}.{domain}" if host else f"{domain}"
    if entity.get("port"):
        address += f":{entity['port']}"
    return address + (entity.get("path") or "")


class RouteCleaner(PlatformCleaner):
    """Deletes routes on fixture domains or with fixture host names.

    Attributes:
        domains: Domain id -> name, built once per discovery
    """

    def __init__(self, context: CleanupContext, kind: str = "routes") -> None:
        super().__init__(context, kind)
        self.domains: dict[str, str] = {}

    async def build_domain_table(self) -> dict[str, str]:
        """Merge private and shared domains into an id → name table."""
        listings = await asyncio.gather(
            *(list_platform_resources(self.context, path).collect() for path in DOMAIN_PATHS)
        )

        domains: dict[str, str] = {}
        for listing in listings:
            for payload in listing:
                record = ResourceRecord.from_v2("domains", payload)
                domains[record.resource_id] = record.name
        return domains

    async def discover(self) -> list[ResourceRecord]:
        self.domains = await self.build_domain_table()
        return await super().discover()

    def is_fixture(self, record: ResourceRecord) -> bool:
        names = self.context.names
        host = record.entity.get("host")
        domain = self.domains.get(record.entity.get("domain_guid"))

        return names.is_domain_name(domain) or names.is_application_name(host) or names.is_host_name(host)

    def failure_message(self, record: ResourceRecord) -> str:
        domain = self.domains.get(record.entity.get("domain_guid"))
        return f"Unable to delete route {format_route(record.entity, domain)}"
