"""Naming convention used by integration tests for the fixtures they create.

The cleaner deletes nothing it cannot positively classify through one of these
predicates (packages excepted).
"""

from __future__ import annotations

import secrets
from typing import Optional, Protocol


class NameFactory(Protocol):
    """Fixture classifier: one predicate per resource kind."""

    def is_application_name(self, candidate: Optional[str]) -> bool: ...

    def is_buildpack_name(self, candidate: Optional[str]) -> bool: ...

    def is_client_id(self, candidate: Optional[str]) -> bool: ...

    def is_domain_name(self, candidate: Optional[str]) -> bool: ...

    def is_group_name(self, candidate: Optional[str]) -> bool: ...

    def is_host_name(self, candidate: Optional[str]) -> bool: ...

    def is_identity_provider_name(self, candidate: Optional[str]) -> bool: ...

    def is_identity_zone_name(self, candidate: Optional[str]) -> bool: ...

    def is_organization_name(self, candidate: Optional[str]) -> bool: ...

    def is_quota_definition_name(self, candidate: Optional[str]) -> bool: ...

    def is_security_group_name(self, candidate: Optional[str]) -> bool: ...

    def is_service_instance_name(self, candidate: Optional[str]) -> bool: ...

    def is_space_name(self, candidate: Optional[str]) -> bool: ...

    def is_user_id(self, candidate: Optional[str]) -> bool: ...

    def is_user_name(self, candidate: Optional[str]) -> bool: ...


class RandomNameFactory:
    """Prefix-based classifier and generator of fixture names.

    Names look like ``<prefix>-<kind>-<random hex>``; domains are
    ``<prefix>.domain.<random hex>`` so that they stay valid DNS labels.

    Attributes:
        prefix: Common prefix of every fixture name
    """

    def __init__(self, prefix: str = "test") -> None:
        self.prefix = prefix
        self.prefixes = {
            "application": f"{prefix}-application-",
            "buildpack": f"{prefix}-buildpack-",
            "client_id": f"{prefix}-client-id-",
            "domain": f"{prefix}.domain.",
            "group": f"{prefix}-group-",
            "host": f"{prefix}-host-",
            "identity_provider": f"{prefix}-identity-provider-",
            "identity_zone": f"{prefix}-identity-zone-",
            "organization": f"{prefix}-organization-",
            "quota_definition": f"{prefix}-quota-definition-",
            "security_group": f"{prefix}-security-group-",
            "service_instance": f"{prefix}-service-instance-",
            "space": f"{prefix}-space-",
            "user_id": f"{prefix}-user-id-",
            "user": f"{prefix}-user-",
        }

    def get_name(self, kind: str) -> str:
        """Generate a fresh fixture name for a kind (e.g., "space")."""
        return f"{self.prefixes[kind]}{secrets.token_hex(5)}"

    def _matches(self, kind: str, candidate: Optional[str]) -> bool:
        return candidate is not None and candidate.startswith(self.prefixes[kind])

    def is_application_name(self, candidate: Optional[str]) -> bool:
        return self._matches("application", candidate)

    def is_buildpack_name(self, candidate: Optional[str]) -> bool:
        return self._matches("buildpack", candidate)

    def is_client_id(self, candidate: Optional[str]) -> bool:
        return self._matches("client_id", candidate)

    def is_domain_name(self, candidate: Optional[str]) -> bool:
        return self._matches("domain", candidate)

    def is_group_name(self, candidate: Optional[str]) -> bool:
        return self._matches("group", candidate)

    def is_host_name(self, candidate: Optional[str]) -> bool:
        return self._matches("host", candidate)

    def is_identity_provider_name(self, candidate: Optional[str]) -> bool:
        return self._matches("identity_provider", candidate)

    def is_identity_zone_name(self, candidate: Optional[str]) -> bool:
        return self._matches("identity_zone", candidate)

    def is_organization_name(self, candidate: Optional[str]) -> bool:
        return self._matches("organization", candidate)

    def is_quota_definition_name(self, candidate: Optional[str]) -> bool:
        return self._matches("quota_definition", candidate)

    def is_security_group_name(self, candidate: Optional[str]) -> bool:
        return self._matches("security_group", candidate)

    def is_service_instance_name(self, candidate: Optional[str]) -> bool:
        return self._matches("service_instance", candidate)

    def is_space_name(self, candidate: Optional[str]) -> bool:
        return self._matches("space", candidate)

    def is_user_id(self, candidate: Optional[str]) -> bool:
        return self._matches("user_id", candidate)

    def is_user_name(self, candidate: Optional[str]) -> bool:
        # "test-user-id-..." also starts with "test-user-"; user ids are not user names
        return self._matches("user", candidate) and not self._matches("user_id", candidate)
