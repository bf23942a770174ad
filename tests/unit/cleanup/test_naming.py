"""Tests for the fixture naming convention."""

from __future__ import annotations

import pytest

from cfcleaner.cleanup.naming import RandomNameFactory


class TestRandomNameFactory:
    """Test suite for RandomNameFactory."""

    @pytest.fixture
    def names(self) -> RandomNameFactory:
        return RandomNameFactory()

    @pytest.mark.parametrize(
        "kind,predicate",
        [
            ("application", "is_application_name"),
            ("buildpack", "is_buildpack_name"),
            ("client_id", "is_client_id"),
            ("domain", "is_domain_name"),
            ("group", "is_group_name"),
            ("host", "is_host_name"),
            ("identity_provider", "is_identity_provider_name"),
            ("identity_zone", "is_identity_zone_name"),
            ("organization", "is_organization_name"),
            ("quota_definition", "is_quota_definition_name"),
            ("security_group", "is_security_group_name"),
            ("service_instance", "is_service_instance_name"),
            ("space", "is_space_name"),
            ("user_id", "is_user_id"),
            ("user", "is_user_name"),
        ],
    )
    def test_generated_names_are_classified(self, names: RandomNameFactory, kind: str, predicate: str) -> None:
        """Test every generated name is recognized by its own predicate."""
        assert getattr(names, predicate)(names.get_name(kind))

    def test_generated_names_are_unique(self, names: RandomNameFactory) -> None:
        """Test two generated names differ."""
        assert names.get_name("space") != names.get_name("space")

    def test_foreign_names_are_not_fixtures(self, names: RandomNameFactory) -> None:
        """Test production-looking names are never classified as fixtures."""
        assert not names.is_organization_name("system")
        assert not names.is_space_name("production")
        assert not names.is_domain_name("apps.example.com")
        assert not names.is_group_name("cloud_controller.admin")

    def test_none_is_never_a_fixture(self, names: RandomNameFactory) -> None:
        """Test missing names are not classified."""
        assert not names.is_application_name(None)
        assert not names.is_host_name(None)

    def test_names_of_other_kinds_do_not_match(self, names: RandomNameFactory) -> None:
        """Test predicates are kind-specific."""
        assert not names.is_organization_name(names.get_name("space"))
        assert not names.is_application_name(names.get_name("host"))

    def test_user_ids_are_not_user_names(self, names: RandomNameFactory) -> None:
        """Test user-id prefixes are excluded from user name matching."""
        assert not names.is_user_name(names.get_name("user_id"))
        assert names.is_user_name(names.get_name("user"))

    def test_domain_names_are_dns_labels(self, names: RandomNameFactory) -> None:
        """Test domains use dots rather than dashes between parts."""
        assert names.get_name("domain").startswith("test.domain.")

    def test_custom_prefix(self) -> None:
        """Test a custom prefix changes what is classified."""
        names = RandomNameFactory(prefix="ci")

        assert names.is_space_name("ci-space-123")
        assert not names.is_space_name("test-space-123")
