"""UserOverride entity - per-user grant or denial of a permission."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from hrauthz.domain.value_objects import Action


@dataclass(frozen=True)
class UserOverride:
    """Explicit allow (granted=True) or deny (granted=False) for one user.

    Overrides are never patched: they are created and removed. An override whose
    expires_at has passed is inert.
    """

    id: UUID
    user_id: str
    resource: str
    action: Action
    granted: bool
    granted_by: str
    granted_at: datetime
    expires_at: datetime | None = None

    def is_active(self, at: datetime) -> bool:
        """Check if override is in effect at the given instant."""
        return self.expires_at is None or self.expires_at > at
