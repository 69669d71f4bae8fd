"""Application entry point and composition root."""

import structlog

from roleadmin import __version__
from roleadmin.application.services import PermissionService, RoleService
from roleadmin.application.validators import RoleFormValidator
from roleadmin.config import get_settings
from roleadmin.infrastructure.auth.keycloak_provider import KeycloakProvider
from roleadmin.infrastructure.export.csv_writer import StandardCsvWriter
from roleadmin.infrastructure.persistence.postgres.connection import create_pool
from roleadmin.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from roleadmin.interfaces.web.app import create_app
from roleadmin.interfaces.web.middleware.auth import AuthMiddleware
from roleadmin.interfaces.web.middleware.flash import FlashMiddleware, FlashStore
from roleadmin.interfaces.web.middleware.pool_lifespan import PoolLifespanMiddleware
from roleadmin.interfaces.web.middleware.session import SessionStore
from roleadmin.interfaces.web.resources.health import HealthResource
from roleadmin.interfaces.web.resources.login import LoginResource
from roleadmin.interfaces.web.resources.roles import RoleResource
from roleadmin.logging import configure_logging

logger = structlog.get_logger(__name__)


def create_roleadmin_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    pool = create_pool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning(
            "keycloak_disabled",
            anonymous_authorities=sorted(settings.anonymous_authority_set),
        )

    role_service = RoleService(
        unit_of_work_factory=uow_factory,
        csv_writer=StandardCsvWriter(),
    )
    permission_service = PermissionService(unit_of_work_factory=uow_factory)
    role_form_validator = RoleFormValidator(unit_of_work_factory=uow_factory)

    role_resource = RoleResource(
        role_service,
        permission_service,
        role_form_validator,
        page_size=settings.page_size,
    )
    health_resource = HealthResource(uow_factory)
    session_store = SessionStore(ttl_seconds=settings.session_ttl_seconds)
    login_resource = (
        LoginResource(keycloak, session_store, secure_cookies=settings.secure_cookies)
        if keycloak
        else None
    )

    app = create_app(
        role_resource,
        health_resource,
        middleware=[
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak, settings.anonymous_authority_set, session_store),
            FlashMiddleware(
                FlashStore(ttl_seconds=settings.flash_ttl_seconds),
                secure_cookies=settings.secure_cookies,
            ),
        ],
        login_resource=login_resource,
    )
    logger.info("app_created", version=__version__, environment=settings.environment)
    return app


def main() -> None:
    """CLI entry point - run uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "roleadmin.main:create_roleadmin_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
