"""
Enum count and property assertions.

Anti-overfitting: Count assertions catch silent additions/removals.
"""

import pytest

from core.models.enums import (
    ResourceSensitivity,
    ResourceKind,
    ResourceState,
    SeedPhase,
    TransportMode,
    ConsistencyLevel,
)


class TestResourceSensitivityEnum:
    def test_has_exactly_4_values(self):
        assert len(ResourceSensitivity) == 4

    def test_protection_levels_are_strictly_increasing(self):
        levels = [s.protection_level for s in (
            ResourceSensitivity.PUBLIC, ResourceSensitivity.INTERNAL,
            ResourceSensitivity.CONFIDENTIAL, ResourceSensitivity.RESTRICTED,
        )]
        assert levels == sorted(levels)
        assert len(set(levels)) == 4

    def test_is_str_enum(self):
        assert isinstance(ResourceSensitivity.PUBLIC, str)

    def test_rejects_invalid_string(self):
        with pytest.raises(ValueError):
            ResourceSensitivity("top_secret")


class TestResourceKindEnum:
    def test_has_exactly_6_values(self):
        assert len(ResourceKind) == 6

    def test_accounts(self):
        assert {k for k in ResourceKind if k.is_account} == {
            ResourceKind.COSMOS_ACCOUNT, ResourceKind.STORAGE_ACCOUNT,
        }

    def test_namespaces(self):
        assert {k for k in ResourceKind if k.is_namespace} == {
            ResourceKind.COSMOS_CONTAINER, ResourceKind.BLOB_CONTAINER, ResourceKind.QUEUE,
        }

    def test_database_is_neither_account_nor_namespace(self):
        assert not ResourceKind.COSMOS_DATABASE.is_account
        assert not ResourceKind.COSMOS_DATABASE.is_namespace


class TestResourceStateEnum:
    def test_has_exactly_6_values(self):
        assert len(ResourceState) == 6

    def test_all_values_are_lowercase(self):
        for state in ResourceState:
            assert state.value == state.value.lower()


class TestSmallEnums:
    def test_seed_phases_in_execution_order(self):
        assert [p.value for p in SeedPhase] == ["connect", "ensure", "import"]

    def test_transport_modes(self):
        assert {m.name for m in TransportMode} == {"GATEWAY", "DIRECT"}

    def test_consistency_values_match_sdk_strings(self):
        assert ConsistencyLevel.EVENTUAL.value == "Eventual"
        assert len(ConsistencyLevel) == 5
