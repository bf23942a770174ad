"""Per-resource-kind cleaners and their registry."""

from __future__ import annotations

from functools import partial
from typing import Callable

from .applications import ApplicationV2Cleaner, ApplicationV3Cleaner
from .base import CleanupContext, ResourceCleaner
from .feature_flags import STANDARD_FEATURE_FLAGS, FeatureFlagCleaner
from .platform import PackageCleaner, PlatformCleaner, PlatformUserCleaner
from .routes import RouteCleaner
from .uaa import GroupCleaner, UaaCleaner

CleanerFactory = Callable[[CleanupContext], ResourceCleaner]

# kind -> factory
CLEANERS: dict[str, CleanerFactory] = {
    "buildpacks": partial(PlatformCleaner, kind="buildpacks"),
    "feature_flags": FeatureFlagCleaner,
    "routes": RouteCleaner,
    "users": PlatformUserCleaner,
    "applications_v2": ApplicationV2Cleaner,
    "applications_v3": ApplicationV3Cleaner,
    "packages": PackageCleaner,
    "security_groups": partial(PlatformCleaner, kind="security_groups"),
    "service_instances": partial(PlatformCleaner, kind="service_instances"),
    "user_provided_service_instances": partial(PlatformCleaner, kind="user_provided_service_instances"),
    "shared_domains": partial(PlatformCleaner, kind="shared_domains"),
    "private_domains": partial(PlatformCleaner, kind="private_domains"),
    "identity_providers": partial(UaaCleaner, kind="identity_providers"),
    "identity_zones": partial(UaaCleaner, kind="identity_zones"),
    "groups": GroupCleaner,
    "uaa_users": partial(UaaCleaner, kind="uaa_users"),
    "clients": partial(UaaCleaner, kind="clients"),
    "space_quota_definitions": partial(PlatformCleaner, kind="space_quota_definitions"),
    "spaces": partial(PlatformCleaner, kind="spaces"),
    "organizations": partial(PlatformCleaner, kind="organizations"),
    "organization_quota_definitions": partial(PlatformCleaner, kind="organization_quota_definitions"),
}

__all__ = [
    "CLEANERS",
    "STANDARD_FEATURE_FLAGS",
    "ApplicationV2Cleaner",
    "ApplicationV3Cleaner",
    "CleanupContext",
    "FeatureFlagCleaner",
    "GroupCleaner",
    "PackageCleaner",
    "PlatformCleaner",
    "PlatformUserCleaner",
    "ResourceCleaner",
    "RouteCleaner",
    "UaaCleaner",
]
