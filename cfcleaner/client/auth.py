"""OAuth2 token acquisition against the UAA token endpoint."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import httpx

from ..exceptions import TransportError

logger = logging.getLogger(__name__)

# Refresh this many seconds before the token actually expires
EXPIRY_MARGIN = 30.0


class TokenProvider:
    """Fetches and caches a bearer token.

    Uses the password grant when a username is configured, client credentials
    otherwise.

    Attributes:
        token_url: UAA ``/oauth/token`` endpoint
        client_id: OAuth client id
        grant_type: "password" or "client_credentials"
    """

    def __init__(
        self,
        token_url: str,
        client_id: str = "cf",
        client_secret: str = "",
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify: bool = True,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.username = username
        self.password = password
        self.grant_type = "password" if username else "client_credentials"
        self._verify = verify
        self._timeout = timeout
        self._transport = transport
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    async def authorization(self) -> str:
        """Return an ``Authorization`` header value, fetching a token if needed."""
        async with self._lock:
            if self._token is None or time.monotonic() >= self._expires_at:
                await self._refresh()
            return f"bearer {self._token}"

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a new one."""
        self._token = None

    async def _refresh(self) -> None:
        # Imported here to avoid a cycle with transport.translate_error
        from .transport import translate_error

        data = {"grant_type": self.grant_type, "response_type": "token"}
        if self.grant_type == "password":
            data["username"] = self.username or ""
            data["password"] = self.password or ""

        logger.debug(f"Requesting {self.grant_type} token for client {self.client_id}")
        try:
            async with httpx.AsyncClient(
                verify=self._verify, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    auth=(self.client_id, self.client_secret),
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise translate_error(e, "POST", self.token_url) from e

        payload = response.json()
        token = payload.get("access_token")
        if not token:
            raise TransportError(f"Token response from {self.token_url} did not contain an access token")

        self._token = token
        self._expires_at = time.monotonic() + max(float(payload.get("expires_in", 0)) - EXPIRY_MARGIN, 0.0)
