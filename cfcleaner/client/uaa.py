"""UAA (identity management) API client."""

from __future__ import annotations

from typing import Optional

from ..models.page import Page
from .transport import ApiTransport

ITEMS_PER_PAGE = 500


class UaaClient:
    """UAA SCIM/OAuth admin client.

    Attributes:
        transport: Authenticated transport bound to the UAA root
    """

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    async def list_page(self, path: str, offset: int) -> Page:
        """Fetch one page of a SCIM-style listing.

        Args:
            path: Collection path (e.g., "/Users", "/Groups", "/oauth/clients")
            offset: 0-based offset; sent as SCIM's 1-based ``startIndex``

        Returns:
            Page with resources and total result count
        """
        payload = await self.transport.get_json(path, params={"startIndex": offset + 1, "count": ITEMS_PER_PAGE})
        return Page(
            resources=payload.get("resources", []),
            total_results=payload.get("totalResults"),
        )

    async def list_all(self, path: str) -> list[dict]:
        """Fetch an unpaginated listing (identity providers, identity zones)."""
        return await self.transport.get_json(path) or []

    async def delete(self, path: str, version: Optional[str] = None) -> None:
        """Delete a resource; ``version`` is sent as ``If-Match``.

        Raises:
            TransportError: If the request fails
        """
        headers = {"If-Match": version} if version is not None else None
        await self.transport.request("DELETE", path, headers=headers, allow_missing=True)

    async def aclose(self) -> None:
        await self.transport.aclose()
