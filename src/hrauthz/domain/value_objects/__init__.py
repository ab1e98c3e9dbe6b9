"""Domain value objects."""

from hrauthz.domain.value_objects.action import Action
from hrauthz.domain.value_objects.decision_reason import DecisionReason
from hrauthz.domain.value_objects.role_name import RoleName

__all__ = [
    "Action",
    "DecisionReason",
    "RoleName",
]
