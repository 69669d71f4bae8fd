"""Auth middleware - resolves the request user and its authorities."""

import asyncio
from dataclasses import dataclass, field

import falcon.asgi

from roleadmin.interfaces.web.middleware.session import SESSION_COOKIE, SessionStore


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None
    authorities: frozenset[str] = field(default_factory=frozenset)


def request_user(oidc_user) -> RequestUser:
    """Map an introspected OIDC user to the request user."""
    return RequestUser(
        user_id=oidc_user.user_id,
        email=oidc_user.email,
        username=oidc_user.username,
        authorities=oidc_user.authorities,
    )


class AuthMiddleware:
    """Middleware that sets req.context.user.

    A Bearer token is introspected on every request; otherwise the user of
    the login session named by the session cookie is used. Without a
    Keycloak provider every request runs as an anonymous user holding
    ``anonymous_authorities``.
    """

    def __init__(
        self,
        keycloak_provider=None,
        anonymous_authorities: frozenset[str] = frozenset(),
        session_store: SessionStore | None = None,
    ) -> None:
        self._keycloak = keycloak_provider
        self._anonymous_authorities = anonymous_authorities
        self._sessions = session_store

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract user from Authorization header or session cookie."""
        if self._keycloak is None:
            req.context.user = RequestUser(
                user_id="anonymous", authorities=self._anonymous_authorities
            )
            return

        req.context.user = None
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            loop = asyncio.get_running_loop()
            user = await loop.run_in_executor(None, self._keycloak.decode_token, auth[7:])
            if user:
                req.context.user = request_user(user)
            return

        if self._sessions is not None:
            values = req.get_cookie_values(SESSION_COOKIE)
            req.context.user = self._sessions.get(values[0] if values else None)
