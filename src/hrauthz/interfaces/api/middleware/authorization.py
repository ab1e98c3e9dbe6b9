"""Authorization middleware - gates routed resources on a permission decision."""

import falcon
import falcon.asgi
import structlog

from hrauthz.application.ports import PermissionDecider
from hrauthz.domain.entities import Decision
from hrauthz.domain.value_objects import DecisionReason

logger = structlog.get_logger(__name__)

DENIAL_MESSAGES = {
    DecisionReason.NO_GRANT: "Your role does not allow {action} on {resource}",
    DecisionReason.OVERRIDE_DENIED: "Access to {action} on {resource} has been revoked for your account",
}


def denial_message(decision: Decision) -> str:
    template = DENIAL_MESSAGES.get(decision.reason, "Permission denied")
    return template.format(action=decision.action, resource=decision.resource)


class AuthorizationMiddleware:
    """Checks resource.permission_map[req.method] = (resource, action) before the responder.

    Resources without an entry for the method are not gated here. Denials answer
    403, a permission_map naming something outside the catalog answers 500, and a
    failure while deciding answers 503. No failure path lets the request through.
    """

    def __init__(self, permission_decider: PermissionDecider) -> None:
        self._decider = permission_decider

    async def process_resource(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        resource: object,
        params: dict,
    ) -> None:
        required = getattr(resource, "permission_map", {}).get(req.method)
        if required is None:
            return

        user = getattr(req.context, "user", None)
        if not user:
            self._reject(resp, falcon.HTTP_401, "Unauthorized")
            return

        target, action = required
        try:
            decision = await self._decider.decide(user.user_id, user.role, target, action)
        except Exception:
            logger.exception(
                "authorization_failed",
                user_id=user.user_id,
                resource=target,
                action=str(action),
            )
            self._reject(resp, falcon.HTTP_503, "Authorization unavailable")
            return

        if decision.reason == DecisionReason.INVALID_REQUEST:
            self._reject(resp, falcon.HTTP_500, "Authorization misconfigured")
            return
        if not decision.allowed:
            self._reject(resp, falcon.HTTP_403, denial_message(decision))
            return
        req.context.decision = decision

    @staticmethod
    def _reject(resp: falcon.asgi.Response, status: str, message: str) -> None:
        resp.status = status
        resp.media = {"error": message}
        resp.complete = True
