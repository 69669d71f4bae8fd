"""Flash middleware - data that survives exactly one redirect."""

import secrets
import time
from typing import Any

import falcon.asgi

FLASH_COOKIE = "flash"


class FlashStore:
    """In-memory flash entries keyed by a random cookie value."""

    def __init__(self, ttl_seconds: int = 300) -> None:
        self._ttl = ttl_seconds
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}

    def put(self, data: dict[str, Any]) -> str:
        """Store data and return its key."""
        self._purge_expired()
        key = secrets.token_urlsafe(24)
        self._entries[key] = (time.monotonic() + self._ttl, data)
        return key

    def pop(self, key: str) -> dict[str, Any]:
        """Remove and return the entry; empty when unknown or expired."""
        entry = self._entries.pop(key, None)
        if not entry or entry[0] < time.monotonic():
            return {}
        return entry[1]

    def __len__(self) -> int:
        return len(self._entries)

    def _purge_expired(self) -> None:
        now = time.monotonic()
        for key in [k for k, (expires, _) in self._entries.items() if expires < now]:
            del self._entries[key]


def flash(req: falcon.asgi.Request, **data: Any) -> None:
    """Queue data for the next request of this client."""
    if not hasattr(req.context, "flash_out"):
        req.context.flash_out = {}
    req.context.flash_out.update(data)


class FlashMiddleware:
    """Loads incoming flash data into req.context.flash and stores outgoing data."""

    def __init__(self, store: FlashStore, secure_cookies: bool = True) -> None:
        self._store = store
        self._secure = secure_cookies

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        values = req.get_cookie_values(FLASH_COOKIE)
        req.context.flash_key = values[0] if values else None
        req.context.flash = self._store.pop(values[0]) if values else {}
        req.context.flash_out = {}

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        out = getattr(req.context, "flash_out", None)
        if out:
            resp.set_cookie(
                FLASH_COOKIE,
                self._store.put(out),
                path="/",
                secure=self._secure,
                http_only=True,
                same_site="Lax",
            )
        elif getattr(req.context, "flash_key", None):
            resp.unset_cookie(FLASH_COOKIE, path="/")
