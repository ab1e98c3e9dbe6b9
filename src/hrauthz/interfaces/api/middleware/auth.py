"""Auth middleware - resolves the request principal (user id and role)."""

from dataclasses import dataclass

import falcon.asgi

from hrauthz.infrastructure.auth.keycloak_provider import KeycloakProvider


@dataclass
class RequestUser:
    """User from request context. role is None when no application role is held."""

    user_id: str
    role: str | None = None
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Middleware that introspects the bearer token and sets req.context.user.

    Requests without a bearer token, or with one that cannot be verified, get
    req.context.user = None and are answered 401 by gated resources. There is no
    anonymous principal.
    """

    def __init__(self, keycloak_provider: KeycloakProvider | None = None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract user from Authorization header."""
        auth = req.get_header("Authorization")
        req.context.user = None
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = self._keycloak.decode_token(auth[7:])
        if user and user.user_id:
            role = user.role
            req.context.user = RequestUser(
                user_id=user.user_id,
                role=role.value if role else None,
                email=user.email,
                username=user.username,
            )
