"""Health check endpoints."""

import falcon
import falcon.asgi
import structlog

from roleadmin.domain.value_objects import Pageable, PermissionCriteria

logger = structlog.get_logger(__name__)


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, unit_of_work_factory=None) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /health/ready - readiness (database reachable)."""
        if self._uow_factory is not None:
            try:
                async with self._uow_factory(read_only=True) as uow:
                    await uow.permissions.find_all(PermissionCriteria(), Pageable(size=1))
            except Exception as e:
                logger.warning("readiness_check_failed", error=str(e))
                resp.media = {"status": "unavailable"}
                resp.status = falcon.HTTP_503
                return
        resp.media = {"status": "ready"}
        resp.status = falcon.HTTP_200
