"""HTTP clients for the Cloud Controller and UAA APIs."""

from __future__ import annotations

from .auth import TokenProvider
from .cloudfoundry import CloudFoundryClient
from .transport import ApiTransport
from .uaa import UaaClient

__all__ = [
    "ApiTransport",
    "CloudFoundryClient",
    "TokenProvider",
    "UaaClient",
]
