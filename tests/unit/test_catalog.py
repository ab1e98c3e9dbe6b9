"""Unit tests for the permission catalog."""

import pytest

from hrauthz.domain.catalog import PermissionCatalog, ResourceDefinition
from hrauthz.domain.defaults import RESOURCES
from hrauthz.domain.exceptions import ConfigurationError, InvalidRequest, NotFound
from hrauthz.domain.value_objects import Action


@pytest.fixture
def catalog() -> PermissionCatalog:
    return PermissionCatalog.from_definitions(RESOURCES)


def _definition(**overrides) -> ResourceDefinition:
    fields = {
        "name": "goals",
        "label": "Goal Management",
        "description": "Goals",
        "actions": ("view", "create"),
    }
    fields.update(overrides)
    return ResourceDefinition(**fields)


def test_default_catalog_lists_resources_in_declaration_order(catalog) -> None:
    names = [r.name for r in catalog.list_resources()]
    assert names[0] == "users"
    assert names[-1] == "settings"
    assert len(catalog) == 10


def test_get_resource(catalog) -> None:
    resource = catalog.get_resource("settings")
    assert resource.label == "System Settings"
    assert resource.actions == frozenset({Action.VIEW, Action.UPDATE, Action.ADMIN})


def test_get_resource_unknown_raises_not_found(catalog) -> None:
    with pytest.raises(NotFound):
        catalog.get_resource("payroll")
    assert catalog.find_resource("payroll") is None


def test_is_action_valid_for_resource(catalog) -> None:
    assert catalog.is_action_valid_for_resource("goals", "assign")
    assert catalog.is_action_valid_for_resource("goals", Action.VIEW)
    assert not catalog.is_action_valid_for_resource("settings", "delete")
    assert not catalog.is_action_valid_for_resource("goals", "fly")
    assert not catalog.is_action_valid_for_resource("nonexistent_resource", "view")


def test_each_pair_maps_to_one_permission(catalog) -> None:
    first = catalog.permission("users", "delete")
    second = catalog.permission("users", Action.DELETE)
    assert first is second
    assert first.id == "users:delete"
    assert first.description == "Delete access to User Management"

    ids = [p.id for p in catalog.list_permissions()]
    assert len(ids) == len(set(ids))


def test_permission_for_invalid_pair_raises(catalog) -> None:
    with pytest.raises(InvalidRequest):
        catalog.permission("settings", "delete")


def test_resource_without_actions_is_fatal() -> None:
    with pytest.raises(ConfigurationError, match="no actions"):
        PermissionCatalog.from_definitions([_definition(actions=())])


def test_unknown_action_is_fatal() -> None:
    with pytest.raises(ConfigurationError, match="unknown action 'archive'"):
        PermissionCatalog.from_definitions([_definition(actions=("view", "archive"))])


def test_duplicate_resource_is_fatal() -> None:
    with pytest.raises(ConfigurationError, match="Duplicate"):
        PermissionCatalog.from_definitions([_definition(), _definition()])


def test_deprecated_action_must_be_declared() -> None:
    with pytest.raises(ConfigurationError, match="deprecates"):
        PermissionCatalog.from_definitions([_definition(deprecated_actions=("delete",))])


def test_deprecated_permission_is_kept_and_flagged() -> None:
    catalog = PermissionCatalog.from_definitions(
        [_definition(actions=("view", "create"), deprecated_actions=("create",))]
    )
    assert catalog.is_action_valid_for_resource("goals", "create")
    assert catalog.permission("goals", "create").deprecated
    assert not catalog.permission("goals", "view").deprecated
