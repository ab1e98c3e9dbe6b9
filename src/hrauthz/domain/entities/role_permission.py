"""RolePermission entity - persisted assignment of a permission to a role."""

from dataclasses import dataclass

from hrauthz.domain.value_objects import Action, RoleName


@dataclass(frozen=True)
class RolePermission:
    """Role is directly granted action on resource."""

    role: RoleName
    resource: str
    action: Action
