"""Permission check API resources."""

import falcon.asgi

from hrauthz.application.services.decision_engine import PermissionDecisionEngine
from hrauthz.domain.entities import Decision


def decision_media(decision: Decision) -> dict:
    return {
        "resource": decision.resource,
        "action": decision.action,
        "allowed": decision.allowed,
        "reason": decision.reason.value,
        "override_id": str(decision.override_id) if decision.override_id else None,
    }


class PermissionCheckResource:
    """POST /v1/permissions/check - can the caller do {action} on {resource}?"""

    def __init__(self, engine: PermissionDecisionEngine) -> None:
        self._engine = engine

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await req.get_media()
            resource = body["resource"]
            action = body["action"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        decision = await self._engine.decide(user.user_id, user.role, resource, action)
        resp.media = decision_media(decision)
        resp.status = falcon.HTTP_200


class PermissionCheckManyResource:
    """POST /v1/permissions/check-many - ordered decisions for a list of checks."""

    def __init__(self, engine: PermissionDecisionEngine) -> None:
        self._engine = engine

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await req.get_media()
            checks = [(c["resource"], c["action"]) for c in body["checks"]]
        except (KeyError, TypeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Invalid checks: {e}"}
            return

        decisions = await self._engine.decide_many(user.user_id, user.role, checks)
        resp.media = {"items": [decision_media(d) for d in decisions]}
        resp.status = falcon.HTTP_200


class MyPermissionsResource:
    """GET /v1/permissions/me - capability matrix for the caller."""

    def __init__(self, engine: PermissionDecisionEngine) -> None:
        self._engine = engine

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        matrix = await self._engine.capability_matrix(user.user_id, user.role)
        resp.media = {"user_id": user.user_id, "role": user.role, "permissions": matrix}
        resp.status = falcon.HTTP_200
