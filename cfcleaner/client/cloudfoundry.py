"""Cloud Controller (platform API) client.

Exposes only what the cleaner needs: paged listing for v2 and v3 collections,
deletes that may return a job, job status, and feature flags.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models.page import Page
from ..models.resource import JobHandle
from .transport import ApiTransport

logger = logging.getLogger(__name__)

RESULTS_PER_PAGE = 100


class CloudFoundryClient:
    """Cloud Controller API client.

    Attributes:
        transport: Authenticated transport bound to the API root
    """

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    @property
    def api_url(self) -> str:
        return self.transport.base_url

    async def get_info(self) -> dict:
        """Fetch ``/v2/info`` (contains the UAA ``token_endpoint``)."""
        return await self.transport.get_json("/v2/info")

    async def list_v2_page(self, path: str, page: int) -> Page:
        """Fetch one page of a v2 collection.

        Args:
            path: Collection path (e.g., "/v2/organizations")
            page: 1-based page number

        Returns:
            Page with resources and total page count
        """
        payload = await self.transport.get_json(
            path,
            params={"page": page, "results-per-page": RESULTS_PER_PAGE, "order-direction": "asc"},
        )
        return Page(
            resources=payload.get("resources", []),
            total_pages=payload.get("total_pages"),
            total_results=payload.get("total_results"),
        )

    async def list_v3_page(self, path: str, page: int) -> Page:
        """Fetch one page of a v3 collection.

        Args:
            path: Collection path (e.g., "/v3/apps")
            page: 1-based page number

        Returns:
            Page with resources and total page count
        """
        payload = await self.transport.get_json(path, params={"page": page, "per_page": RESULTS_PER_PAGE})
        pagination = payload.get("pagination", {}) or {}
        return Page(
            resources=payload.get("resources", []),
            total_pages=pagination.get("total_pages"),
            total_results=pagination.get("total_results"),
        )

    async def delete(self, path: str, asynchronous: bool = False, v3: bool = False) -> Optional[JobHandle]:
        """Delete a resource.

        v2 asynchronous deletes return a job; v3 deletes are accepted by the
        platform and not tracked further. A missing resource counts as deleted.

        Args:
            path: Resource path (e.g., "/v2/spaces/<guid>")
            asynchronous: Request an asynchronous v2 delete
            v3: Resource lives in the v3 API

        Returns:
            JobHandle for asynchronous v2 deletes, None otherwise

        Raises:
            TransportError: If the request fails
        """
        params = {"async": "true"} if asynchronous and not v3 else None
        response = await self.transport.request("DELETE", path, params=params, allow_missing=True)

        if response is None or v3 or not asynchronous or response.status_code == 204 or not response.content:
            return None

        return JobHandle.from_v2(response.json())

    async def get_job(self, job_id: str) -> JobHandle:
        """Fetch the current state of a v2 job."""
        payload = await self.transport.get_json(f"/v2/jobs/{job_id}")
        return JobHandle.from_v2(payload)

    async def list_feature_flags(self) -> list[dict]:
        """List all feature flags (name, enabled)."""
        return await self.transport.get_json("/v2/config/feature_flags") or []

    async def set_feature_flag(self, name: str, enabled: bool) -> None:
        """Set a feature flag."""
        await self.transport.request("PUT", f"/v2/config/feature_flags/{name}", json={"enabled": enabled})

    async def aclose(self) -> None:
        await self.transport.aclose()
