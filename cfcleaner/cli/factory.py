"""Builds clients and the orchestrator from configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..cleanup.audit import AuditStorage
from ..cleanup.jobs import JobWaiter
from ..cleanup.naming import RandomNameFactory
from ..cleanup.orchestrator import CloudFoundryCleaner
from ..client.auth import TokenProvider
from ..client.cloudfoundry import CloudFoundryClient
from ..client.transport import ApiTransport
from ..client.uaa import UaaClient
from ..exceptions import TransportError
from .config import Config

logger = logging.getLogger(__name__)


async def discover_uaa_url(config: Config) -> str:
    """Read the UAA root advertised by the Cloud Controller ``/v2/info``.

    Raises:
        TransportError: If the endpoint is unreachable or advertises no UAA
    """
    async with ApiTransport(
        config.api_url,
        verify=not config.skip_ssl_validation,
        timeout=config.request_timeout,
    ) as transport:
        info = await transport.get_json("/v2/info") or {}

    token_endpoint = info.get("token_endpoint")
    if not token_endpoint:
        raise TransportError(f"{config.api_url}/v2/info does not advertise a token endpoint")

    logger.debug(f"Discovered UAA at {token_endpoint}")
    return token_endpoint


async def create_clients(config: Config) -> tuple[CloudFoundryClient, UaaClient]:
    """Create authenticated Cloud Controller and UAA clients.

    The platform client uses the configured user (password grant). UAA admin
    calls use ``uaa_client_id`` (client credentials) when configured and the
    platform user's token otherwise.
    """
    config.validate()
    verify = not config.skip_ssl_validation
    uaa_url = (config.uaa_url or await discover_uaa_url(config)).rstrip("/")
    token_url = f"{uaa_url}/oauth/token"

    if config.username:
        platform_tokens = TokenProvider(
            token_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            username=config.username,
            password=config.password,
            verify=verify,
            timeout=config.request_timeout,
        )
    else:
        platform_tokens = TokenProvider(
            token_url,
            client_id=config.uaa_client_id,
            client_secret=config.uaa_client_secret,
            verify=verify,
            timeout=config.request_timeout,
        )

    if config.uaa_client_id:
        uaa_tokens = TokenProvider(
            token_url,
            client_id=config.uaa_client_id,
            client_secret=config.uaa_client_secret,
            verify=verify,
            timeout=config.request_timeout,
        )
    else:
        uaa_tokens = platform_tokens

    cloudfoundry = CloudFoundryClient(
        ApiTransport(config.api_url, platform_tokens, verify=verify, timeout=config.request_timeout)
    )
    uaa = UaaClient(ApiTransport(uaa_url, uaa_tokens, verify=verify, timeout=config.request_timeout))
    return cloudfoundry, uaa


def audit_dir(config: Config) -> Optional[str]:
    """Audit log directory under the configured storage path, if any."""
    return str(Path(config.storage_path) / "audit-logs") if config.storage_path else None


def create_cleaner(config: Config, cloudfoundry: CloudFoundryClient, uaa: UaaClient) -> CloudFoundryCleaner:
    """Create the orchestrator for already-built clients."""
    return CloudFoundryCleaner(
        cloudfoundry_client=cloudfoundry,
        uaa_client=uaa,
        name_factory=RandomNameFactory(config.name_prefix),
        job_waiter=JobWaiter(cloudfoundry, poll_interval=config.job_poll_interval, timeout=config.job_timeout),
        audit_storage=AuditStorage(audit_dir(config)),
        deadline=config.deadline_minutes * 60,
        max_attempts=config.max_attempts,
    )
