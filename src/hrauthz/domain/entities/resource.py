"""Resource entity - a protectable module of the HR application."""

from dataclasses import dataclass

from hrauthz.domain.value_objects import Action


@dataclass(frozen=True)
class Resource:
    """Resource with the actions that are meaningful for it."""

    name: str
    label: str
    description: str
    actions: frozenset[Action]
    deprecated_actions: frozenset[Action] = frozenset()

    def supports(self, action: Action) -> bool:
        """Check if action is declared for this resource."""
        return action in self.actions
