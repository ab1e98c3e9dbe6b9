"""Role entity for RBAC."""

from dataclasses import dataclass

from hrauthz.domain.entities.permission import Permission
from hrauthz.domain.value_objects import RoleName


@dataclass(frozen=True)
class Role:
    """Role - direct permissions plus the roles it inherits from."""

    name: RoleName
    permissions: frozenset[Permission]
    parents: tuple[RoleName, ...] = ()
