"""User override API resources."""

from datetime import UTC, datetime
from uuid import UUID

import falcon.asgi

from hrauthz.application.use_cases.override.grant_override import GrantOverrideUseCase
from hrauthz.application.use_cases.override.list_overrides import ListOverridesUseCase
from hrauthz.application.use_cases.override.revoke_override import RevokeOverrideUseCase
from hrauthz.domain.entities import UserOverride
from hrauthz.domain.exceptions import (
    DuplicateOverride,
    InvalidRequest,
    PermissionDenied,
    ValidationError,
)


def override_media(override: UserOverride, now: datetime | None = None) -> dict:
    media = {
        "id": str(override.id),
        "user_id": override.user_id,
        "resource": override.resource,
        "action": override.action.value,
        "granted": override.granted,
        "granted_by": override.granted_by,
        "granted_at": override.granted_at.isoformat(),
        "expires_at": override.expires_at.isoformat() if override.expires_at else None,
    }
    if now is not None:
        media["active"] = override.is_active(now)
    return media


class UserOverridesResource:
    """GET/POST /v1/users/{user_id}/overrides - list and create overrides."""

    def __init__(
        self,
        list_overrides: ListOverridesUseCase,
        grant_override: GrantOverrideUseCase,
    ) -> None:
        self._list = list_overrides
        self._grant = grant_override

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        """List all overrides of user, flagged active or expired."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            overrides = await self._list.execute(user.user_id, user.role, user_id)
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        now = datetime.now(UTC)
        resp.media = {"items": [override_media(o, now) for o in overrides]}
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        """Grant (granted=true) or deny (granted=false) {resource, action} to user."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await req.get_media()
            resource = body["resource"]
            action = body["action"]
            granted = bool(body.get("granted", True))
            raw_expires = body.get("expires_at")
            expires_at = datetime.fromisoformat(raw_expires) if raw_expires else None
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return
        except (TypeError, ValueError):
            resp.status = falcon.HTTP_400
            resp.media = {"error": "expires_at must be an ISO 8601 timestamp"}
            return

        try:
            override = await self._grant.execute(
                user.user_id, user.role, user_id, resource, action, granted, expires_at
            )
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return
        except DuplicateOverride as e:
            resp.status = falcon.HTTP_409
            resp.media = {"error": str(e)}
            return
        except (InvalidRequest, ValidationError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        resp.media = override_media(override)
        resp.status = falcon.HTTP_201


class OverrideResource:
    """DELETE /v1/overrides/{override_id} - remove an override."""

    def __init__(self, revoke_override: RevokeOverrideUseCase) -> None:
        self._revoke = revoke_override

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, override_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            oid = UUID(override_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid override ID"}
            return

        try:
            await self._revoke.execute(user.user_id, user.role, oid)
            resp.status = falcon.HTTP_204
        except PermissionDenied:
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
