"""Application ports - interfaces for external adapters."""

from hrauthz.application.ports.permission_decider import PermissionDecider
from hrauthz.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "PermissionDecider",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
