"""Global error handlers - render the error page."""

import falcon
import falcon.asgi
import structlog

from roleadmin.domain.exceptions import (
    DuplicateRole,
    InvalidArgument,
    NotFound,
    OptimisticLockFailure,
    PermissionDenied,
)
from roleadmin.interfaces.web.templates import render

logger = structlog.get_logger(__name__)

_STATUS_BY_EXCEPTION: dict[type[Exception], tuple[str, str]] = {
    InvalidArgument: (falcon.HTTP_400, "Bad Request"),
    PermissionDenied: (falcon.HTTP_403, "Forbidden"),
    NotFound: (falcon.HTTP_404, "Not Found"),
    DuplicateRole: (falcon.HTTP_409, "Conflict"),
    OptimisticLockFailure: (falcon.HTTP_409, "Conflict"),
}


def _render_error(resp: falcon.asgi.Response, status: str, title: str, description: str | None) -> None:
    resp.status = status
    resp.content_type = falcon.MEDIA_HTML
    resp.text = render("error.html", status=status, title=title, description=description)


async def handle_domain_error(req: falcon.asgi.Request, resp: falcon.asgi.Response, ex, params) -> None:
    """Map domain exceptions to status codes."""
    status, title = next(
        v for exc_type, v in _STATUS_BY_EXCEPTION.items() if isinstance(ex, exc_type)
    )
    logger.info("request_failed", path=req.path, status=status, error=str(ex))
    _render_error(resp, status, title, str(ex))


async def handle_unexpected(req: falcon.asgi.Request, resp: falcon.asgi.Response, ex, params) -> None:
    """Log anything unhandled and answer 500."""
    logger.error("unhandled_exception", path=req.path, method=req.method, exc_info=ex)
    _render_error(resp, falcon.HTTP_500, "Internal Server Error", None)


def serialize_http_error(req: falcon.asgi.Request, resp: falcon.asgi.Response, exception: falcon.HTTPError) -> None:
    """Render falcon HTTPError (401, 403 from hooks, 404 routes) as HTML."""
    _render_error(resp, exception.status, exception.title, exception.description)


def register_error_handlers(app: falcon.asgi.App) -> None:
    app.add_error_handler(Exception, handle_unexpected)
    for exc_type in _STATUS_BY_EXCEPTION:
        app.add_error_handler(exc_type, handle_domain_error)
    app.set_error_serializer(serialize_http_error)
