"""Permission entity - a (resource, action) pair."""

from dataclasses import dataclass, field

from hrauthz.domain.value_objects import Action


@dataclass(frozen=True)
class Permission:
    """Permission - action on resource, identified as "resource:action"."""

    resource: str
    action: Action
    description: str = field(default="", compare=False)
    deprecated: bool = field(default=False, compare=False)

    @property
    def id(self) -> str:
        return f"{self.resource}:{self.action}"

    def __str__(self) -> str:
        return self.id
