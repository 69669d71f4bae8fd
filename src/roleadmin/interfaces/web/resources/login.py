"""Login and logout for the HTML screens."""

import asyncio

import falcon
import falcon.asgi
import structlog

from roleadmin.interfaces.web.http import redirect
from roleadmin.interfaces.web.middleware.auth import request_user
from roleadmin.interfaces.web.middleware.session import SESSION_COOKIE, SessionStore
from roleadmin.interfaces.web.templates import render

logger = structlog.get_logger(__name__)

VIEW_LOGIN = "login.html"
DEFAULT_NEXT = "/roles/find"
LOGIN_FAILED = "Invalid username or password"


def _safe_next(value: str | None) -> str:
    """Only same-site paths are followed after login."""
    if value and value.startswith("/") and not value.startswith("//"):
        return value
    return DEFAULT_NEXT


class LoginResource:
    """GET/POST /login and POST /logout (suffix ``logout``)."""

    def __init__(
        self, keycloak_provider, session_store: SessionStore, secure_cookies: bool = True
    ) -> None:
        self._keycloak = keycloak_provider
        self._sessions = session_store
        self._secure = secure_cookies

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Login form."""
        self._render(resp, next_url=_safe_next(req.get_param("next")))

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Authenticate with Keycloak and open a session."""
        media = await req.get_media(default_when_empty={})
        username = str(media.get("username") or "").strip()
        password = str(media.get("password") or "")
        next_url = _safe_next(media.get("next"))

        user = None
        if username and password:
            loop = asyncio.get_running_loop()
            user = await loop.run_in_executor(None, self._keycloak.login, username, password)
        if user is None:
            self._render(resp, next_url=next_url, username=username, error=LOGIN_FAILED)
            return

        session_id = self._sessions.create(request_user(user))
        resp.set_cookie(
            SESSION_COOKIE,
            session_id,
            max_age=self._sessions.ttl_seconds,
            path="/",
            secure=self._secure,
            http_only=True,
            same_site="Lax",
        )
        redirect(resp, next_url)

    async def on_post_logout(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Close the session and return to the login form."""
        values = req.get_cookie_values(SESSION_COOKIE)
        self._sessions.delete(values[0] if values else None)
        resp.unset_cookie(SESSION_COOKIE, path="/")
        redirect(resp, "/login")

    def _render(self, resp: falcon.asgi.Response, **context) -> None:
        resp.status = falcon.HTTP_200
        resp.content_type = falcon.MEDIA_HTML
        resp.text = render(VIEW_LOGIN, user=None, success_message=None, **context)
