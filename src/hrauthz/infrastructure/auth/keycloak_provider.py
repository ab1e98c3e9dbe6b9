"""Keycloak OIDC provider - resolves the request principal from a bearer token."""

from dataclasses import dataclass

import structlog
from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

from hrauthz.domain.value_objects import RoleName

logger = structlog.get_logger(__name__)


@dataclass
class OIDCUser:
    """Authenticated user from OIDC token."""

    user_id: str
    email: str | None
    username: str | None
    realm_roles: list[str]

    @property
    def role(self) -> RoleName | None:
        """Most privileged application role among the realm roles, if any."""
        held = {RoleName.parse(r) for r in self.realm_roles} - {None}
        for role in reversed(RoleName):
            if role in held:
                return role
        return None


class KeycloakProvider:
    """Keycloak OIDC - introspects tokens and extracts user id and roles.

    Token issuance and refresh are Keycloak's business; this only reads.
    """

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect token, return user info or None if inactive or unverifiable."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as exc:
            logger.warning("token_introspection_failed", error=str(exc))
            return None
        if not token_info.get("active"):
            return None
        return OIDCUser(
            user_id=token_info.get("sub", ""),
            email=token_info.get("email"),
            username=token_info.get("preferred_username"),
            realm_roles=token_info.get("realm_access", {}).get("roles", []),
        )
