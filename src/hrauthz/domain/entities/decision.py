"""Decision - the ephemeral result of a permission query."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from hrauthz.domain.value_objects import DecisionReason


@dataclass(frozen=True)
class Decision:
    """Allow/deny result with enough metadata to explain it."""

    allowed: bool
    reason: DecisionReason
    resource: str
    action: str
    role: str | None = None
    override_id: UUID | None = None
    valid_until: datetime | None = None
