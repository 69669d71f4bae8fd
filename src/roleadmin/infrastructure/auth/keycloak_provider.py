"""Keycloak OIDC provider for token introspection."""

from dataclasses import dataclass, field

import structlog
from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = structlog.get_logger(__name__)


@dataclass
class OIDCUser:
    """Authenticated user from OIDC token."""

    user_id: str
    email: str | None
    username: str | None
    authorities: frozenset[str] = field(default_factory=frozenset)


def authorities_from_token(token_info: dict, client_id: str) -> frozenset[str]:
    """Realm roles plus the roles granted on this client (e.g. ``role:read``)."""
    realm_roles = token_info.get("realm_access", {}).get("roles", [])
    client_roles = (
        token_info.get("resource_access", {}).get(client_id, {}).get("roles", [])
    )
    return frozenset(realm_roles) | frozenset(client_roles)


class KeycloakProvider:
    """Keycloak OIDC - validates tokens and extracts user authorities."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
    ) -> None:
        self._client_id = client_id
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )

    def decode_token(self, token: str) -> OIDCUser | None:
        """Introspect token, return user info or None when inactive or rejected."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("token_introspection_failed", error=str(e))
            return None
        if not token_info.get("active"):
            return None
        return OIDCUser(
            user_id=token_info.get("sub", ""),
            email=token_info.get("email"),
            username=token_info.get("preferred_username"),
            authorities=authorities_from_token(token_info, self._client_id),
        )

    def login(self, username: str, password: str) -> OIDCUser | None:
        """Password grant for the login form; None when credentials are rejected."""
        try:
            tokens = self._keycloak.token(username, password)
        except KeycloakError as e:
            logger.info("login_rejected", username=username, error=str(e))
            return None
        return self.decode_token(tokens["access_token"])
