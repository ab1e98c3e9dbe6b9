"""Permission catalog - the resources and the actions valid for each of them."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from hrauthz.domain.entities import Permission, Resource
from hrauthz.domain.exceptions import ConfigurationError, InvalidRequest, NotFound
from hrauthz.domain.value_objects import Action


@dataclass(frozen=True)
class ResourceDefinition:
    """Raw, unvalidated resource declaration."""

    name: str
    label: str
    description: str
    actions: Sequence[str]
    deprecated_actions: Sequence[str] = ()


def _parse_actions(resource_name: str, raw: Sequence[str]) -> frozenset[Action]:
    actions = set()
    for value in raw:
        try:
            actions.add(Action(value))
        except ValueError:
            raise ConfigurationError(
                f"Resource '{resource_name}' declares unknown action '{value}'"
            ) from None
    return frozenset(actions)


class PermissionCatalog:
    """Immutable set of resources with one Permission per (resource, action) pair.

    Built once at startup. Any malformed declaration raises ConfigurationError
    from the constructor, never at query time.
    """

    def __init__(self, resources: Iterable[Resource]) -> None:
        self._resources: dict[str, Resource] = {}
        self._permissions: dict[tuple[str, Action], Permission] = {}
        for resource in resources:
            if not resource.name:
                raise ConfigurationError("Resource name must not be empty")
            if resource.name in self._resources:
                raise ConfigurationError(f"Duplicate resource '{resource.name}'")
            if not resource.actions:
                raise ConfigurationError(f"Resource '{resource.name}' declares no actions")
            undeclared = resource.deprecated_actions - resource.actions
            if undeclared:
                raise ConfigurationError(
                    f"Resource '{resource.name}' deprecates undeclared actions: "
                    f"{sorted(undeclared)}"
                )
            self._resources[resource.name] = resource
            for action in sorted(resource.actions):
                self._permissions[(resource.name, action)] = Permission(
                    resource=resource.name,
                    action=action,
                    description=f"{action.value.capitalize()} access to {resource.label}",
                    deprecated=action in resource.deprecated_actions,
                )

    @classmethod
    def from_definitions(cls, definitions: Iterable[ResourceDefinition]) -> "PermissionCatalog":
        """Validate raw definitions and build the catalog."""
        resources = []
        for definition in definitions:
            resources.append(
                Resource(
                    name=definition.name,
                    label=definition.label,
                    description=definition.description,
                    actions=_parse_actions(definition.name, definition.actions),
                    deprecated_actions=_parse_actions(
                        definition.name, definition.deprecated_actions
                    ),
                )
            )
        return cls(resources)

    def __len__(self) -> int:
        return len(self._resources)

    def list_resources(self) -> list[Resource]:
        """Resources in declaration order."""
        return list(self._resources.values())

    def find_resource(self, name: str) -> Resource | None:
        return self._resources.get(name)

    def get_resource(self, name: str) -> Resource:
        """Get resource by name, raise NotFound if it is not in the catalog."""
        resource = self._resources.get(name)
        if resource is None:
            raise NotFound("Resource", name)
        return resource

    def is_action_valid_for_resource(self, resource: str, action: "str | Action") -> bool:
        """Check that resource exists and declares action."""
        found = self._resources.get(resource)
        if found is None:
            return False
        try:
            return found.supports(Action(action))
        except ValueError:
            return False

    def permission(self, resource: str, action: "str | Action") -> Permission:
        """Get the single Permission for (resource, action), raise InvalidRequest otherwise."""
        if not self.is_action_valid_for_resource(resource, action):
            raise InvalidRequest(f"'{action}' is not a valid action on '{resource}'")
        return self._permissions[(resource, Action(action))]

    def list_permissions(self) -> list[Permission]:
        """All permissions, grouped by resource in declaration order."""
        return list(self._permissions.values())
