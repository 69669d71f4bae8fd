"""Fixtures for API tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from roleadmin.application.services import PermissionService, RoleService
from roleadmin.application.validators import RoleFormValidator
from roleadmin.infrastructure.export.csv_writer import StandardCsvWriter
from roleadmin.interfaces.web.app import create_app
from roleadmin.interfaces.web.hooks import ROLE_READ, ROLE_SAVE
from roleadmin.interfaces.web.middleware.auth import RequestUser
from roleadmin.interfaces.web.middleware.flash import FlashMiddleware, FlashStore
from roleadmin.interfaces.web.resources.health import HealthResource
from roleadmin.interfaces.web.resources.roles import RoleResource


class AuthBypassMiddleware:
    """Middleware that sets context.user for testing."""

    def __init__(self, authorities=frozenset({ROLE_READ, ROLE_SAVE})) -> None:
        self._authorities = authorities

    async def process_request(self, req, resp):
        req.context.user = (
            RequestUser(user_id="test-user-1", authorities=frozenset(self._authorities))
            if self._authorities is not None
            else None
        )


@pytest.fixture
def authorities():
    """Authorities of the test user; None means unauthenticated."""
    return frozenset({ROLE_READ, ROLE_SAVE})


@pytest.fixture
def app(uow_factory, authorities):
    """Falcon ASGI app with role resources over the fake unit of work."""
    role_resource = RoleResource(
        RoleService(uow_factory, StandardCsvWriter(), csv_fetch_size=2),
        PermissionService(uow_factory),
        RoleFormValidator(uow_factory),
        page_size=2,
    )
    return create_app(
        role_resource,
        HealthResource(uow_factory),
        middleware=[
            AuthBypassMiddleware(authorities),
            FlashMiddleware(FlashStore(), secure_cookies=False),
        ],
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)
