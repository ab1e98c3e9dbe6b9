"""Role permission resolver - effective permissions through inheritance."""

from dataclasses import dataclass

from hrauthz.domain.entities import Permission
from hrauthz.domain.hierarchy import RoleHierarchy
from hrauthz.domain.value_objects import Action, RoleName


@dataclass(frozen=True)
class RolePermissionsView:
    """Direct, inherited and effective permissions of one role."""

    role: RoleName
    ancestors: list[RoleName]
    direct: frozenset[Permission]
    inherited: frozenset[Permission]
    effective: frozenset[Permission]


class RolePermissionResolver:
    """Computes effective = direct(role) | direct(ancestor) for every ancestor.

    Inheritance only adds capability; revoking an inherited grant for one user is
    done with a denying UserOverride. Results are memoized per role for the
    lifetime of the hierarchy snapshot. Concurrent first calls may both compute
    and write the same value.
    """

    def __init__(self, hierarchy: RoleHierarchy) -> None:
        self._hierarchy = hierarchy
        self._resolved: dict[RoleName, frozenset[Permission]] = {}

    def resolve(self, role: "RoleName | str | None") -> frozenset[Permission]:
        """Effective permissions for role. Unknown roles resolve to the empty set."""
        parsed = RoleName.parse(role)
        if parsed is None:
            return frozenset()
        cached = self._resolved.get(parsed)
        if cached is not None:
            return cached
        effective = set(self._hierarchy.get_direct_permissions(parsed))
        for ancestor in self._hierarchy.get_ancestors(parsed):
            effective |= self._hierarchy.get_direct_permissions(ancestor)
        resolved = frozenset(effective)
        self._resolved[parsed] = resolved
        return resolved

    def has_effective_permission(
        self, role: "RoleName | str | None", resource: str, action: "Action | str"
    ) -> bool:
        try:
            permission = Permission(resource=resource, action=Action(action))
        except ValueError:
            return False
        return permission in self.resolve(role)

    def describe(self, role: RoleName) -> RolePermissionsView:
        direct = self._hierarchy.get_direct_permissions(role)
        effective = self.resolve(role)
        return RolePermissionsView(
            role=role,
            ancestors=self._hierarchy.get_ancestors(role),
            direct=direct,
            inherited=effective - direct,
            effective=effective,
        )
