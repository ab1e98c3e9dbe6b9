"""Role hierarchy - role inheritance and each role's direct permissions."""

from collections.abc import Iterable, Mapping, Sequence

from hrauthz.domain.catalog import PermissionCatalog
from hrauthz.domain.entities import Permission, Role, RolePermission
from hrauthz.domain.exceptions import ConfigurationError
from hrauthz.domain.value_objects import RoleName


def _parse_role(value: str) -> RoleName:
    role = RoleName.parse(value)
    if role is None:
        raise ConfigurationError(f"Unknown role '{value}'")
    return role


def _check_acyclic(parents: Mapping[RoleName, tuple[RoleName, ...]]) -> None:
    visiting: set[RoleName] = set()
    done: set[RoleName] = set()

    def visit(role: RoleName, path: list[RoleName]) -> None:
        if role in done:
            return
        if role in visiting:
            chain = " -> ".join([*path, role])
            raise ConfigurationError(f"Role hierarchy contains a cycle: {chain}")
        visiting.add(role)
        for parent in parents.get(role, ()):
            visit(parent, [*path, role])
        visiting.discard(role)
        done.add(role)

    for role in parents:
        visit(role, [])


class RoleHierarchy:
    """Inheritance graph over RoleName plus direct grants per role.

    Every RoleName has an entry; roles without declared parents inherit nothing.
    The graph is validated to be acyclic when built.
    """

    def __init__(self, roles: Iterable[Role]) -> None:
        self._roles: dict[RoleName, Role] = {role.name: role for role in roles}
        for name in RoleName:
            self._roles.setdefault(name, Role(name=name, permissions=frozenset()))
        for role in self._roles.values():
            for parent in role.parents:
                if parent not in self._roles:
                    raise ConfigurationError(f"Role '{role.name}' inherits unknown role '{parent}'")
        _check_acyclic({name: role.parents for name, role in self._roles.items()})

    @classmethod
    def build(
        cls,
        catalog: PermissionCatalog,
        parents: Mapping[str, Sequence[str]],
        grants: Mapping[str, Mapping[str, Sequence[str]]],
    ) -> "RoleHierarchy":
        """Build from raw role -> parents and role -> resource -> actions mappings."""
        direct: dict[RoleName, set[Permission]] = {name: set() for name in RoleName}
        for raw_role, by_resource in grants.items():
            role = _parse_role(raw_role)
            for resource, actions in by_resource.items():
                for action in actions:
                    if not catalog.is_action_valid_for_resource(resource, action):
                        raise ConfigurationError(
                            f"Role '{role}' is granted '{resource}:{action}' "
                            "which is not in the catalog"
                        )
                    direct[role].add(catalog.permission(resource, action))

        role_parents: dict[RoleName, tuple[RoleName, ...]] = {}
        for raw_role, raw_parents in parents.items():
            role_parents[_parse_role(raw_role)] = tuple(_parse_role(p) for p in raw_parents)

        return cls(
            Role(
                name=name,
                permissions=frozenset(direct[name]),
                parents=role_parents.get(name, ()),
            )
            for name in RoleName
        )

    @classmethod
    def from_role_permissions(
        cls,
        catalog: PermissionCatalog,
        parents: Mapping[str, Sequence[str]],
        rows: Iterable[RolePermission],
    ) -> "RoleHierarchy":
        """Build from persisted RolePermission rows."""
        grants: dict[str, dict[str, list[str]]] = {}
        for row in rows:
            grants.setdefault(row.role, {}).setdefault(row.resource, []).append(row.action)
        return cls.build(catalog, parents, grants)

    def roles(self) -> list[Role]:
        return [self._roles[name] for name in RoleName]

    def get_direct_permissions(self, role: RoleName) -> frozenset[Permission]:
        found = self._roles.get(role)
        return found.permissions if found else frozenset()

    def get_ancestors(self, role: RoleName) -> list[RoleName]:
        """Ancestors of role, nearest first. Unknown roles have none."""
        found = self._roles.get(role)
        if found is None:
            return []
        ancestors: list[RoleName] = []
        queue = list(found.parents)
        while queue:
            current = queue.pop(0)
            if current in ancestors:
                continue
            ancestors.append(current)
            queue.extend(self._roles[current].parents)
        return ancestors
