"""Domain entities."""

from hrauthz.domain.entities.decision import Decision
from hrauthz.domain.entities.permission import Permission
from hrauthz.domain.entities.resource import Resource
from hrauthz.domain.entities.role import Role
from hrauthz.domain.entities.role_permission import RolePermission
from hrauthz.domain.entities.user_override import UserOverride

__all__ = [
    "Decision",
    "Permission",
    "Resource",
    "Role",
    "RolePermission",
    "UserOverride",
]
