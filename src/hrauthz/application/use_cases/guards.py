"""Shared authorization guard for administrative use cases."""

from hrauthz.application.ports import PermissionDecider
from hrauthz.domain.exceptions import PermissionDenied


async def require_any(
    decider: PermissionDecider,
    actor_id: str,
    actor_role: str | None,
    checks: list[tuple[str, str]],
) -> None:
    """Raise PermissionDenied unless the actor is allowed at least one of checks."""
    for resource, action in checks:
        decision = await decider.decide(actor_id, actor_role, resource, action)
        if decision.allowed:
            return
    wanted = " or ".join(f"{resource}:{action}" for resource, action in checks)
    raise PermissionDenied(f"User requires {wanted}")
