"""Shared HTTP transport for the platform and UAA clients.

Wraps an ``httpx.AsyncClient`` and maps every httpx failure onto the cleanup
error taxonomy so callers only ever see ``TransportError`` (or its TLS
subclass).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .. import __version__
from ..exceptions import TLSHandshakeError, TransportError, is_tls_fault
from .auth import TokenProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def translate_error(exc: httpx.HTTPError, method: str, url: str) -> TransportError:
    """Convert an httpx error into a TransportError.

    Args:
        exc: Error raised by httpx
        method: HTTP method of the failed request
        url: Request URL or path

    Returns:
        TransportError (TLSHandshakeError for TLS-layer faults)
    """
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        body = response.text[:500] if response.text else ""
        return TransportError(
            f"{method} {url} returned {response.status_code}: {body}",
            status_code=response.status_code,
        )

    if is_tls_fault(exc):
        return TLSHandshakeError(f"{method} {url} failed during TLS negotiation: {exc}")

    return TransportError(f"{method} {url} failed: {exc.__class__.__name__}: {exc}")


class ApiTransport:
    """Authenticated JSON transport bound to one API root.

    Attributes:
        base_url: API root URL
        token_provider: Supplies the Authorization header (optional)
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        verify: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize transport.

        Args:
            base_url: API root URL
            token_provider: OAuth token provider (optional)
            verify: Verify TLS certificates
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            verify=verify,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": f"cf-test-cleaner/{__version__}", "Accept": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
        headers: Optional[dict] = None,
        allow_missing: bool = False,
    ) -> Optional[httpx.Response]:
        """Send a request and raise TransportError on any failure.

        A 401 invalidates the cached token and is retried once.

        Args:
            method: HTTP method
            path: Path relative to the API root
            params: Query parameters
            json: JSON body
            headers: Extra headers
            allow_missing: Return None instead of raising on 404

        Returns:
            Response, or None for a tolerated 404

        Raises:
            TransportError: If the request fails
        """
        for attempt in range(2):
            request_headers = dict(headers or {})
            if self.token_provider is not None:
                request_headers["Authorization"] = await self.token_provider.authorization()

            try:
                response = await self._client.request(method, path, params=params, json=json, headers=request_headers)
            except httpx.HTTPError as e:
                raise translate_error(e, method, path) from e

            if response.status_code == 401 and self.token_provider is not None and attempt == 0:
                logger.debug(f"{method} {path} unauthorized, refreshing token")
                self.token_provider.invalidate()
                continue

            if response.status_code == 404 and allow_missing:
                logger.info(f"{path} not found, treating as already deleted")
                return None

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise translate_error(e, method, path) from e

            return response

        return None

    async def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """GET a path and decode the JSON body."""
        response = await self.request("GET", path, params=params)
        return response.json() if response is not None else None

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> ApiTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
