"""Repository ports."""

from hrauthz.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from hrauthz.application.ports.repositories.role_permission_repository import (
    RolePermissionRepository,
)

__all__ = [
    "OverrideRepository",
    "RolePermissionRepository",
]
