"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from roleadmin.interfaces.web.errors import register_error_handlers
from roleadmin.interfaces.web.resources.health import HealthResource
from roleadmin.interfaces.web.resources.login import LoginResource
from roleadmin.interfaces.web.resources.roles import RoleResource


def create_app(
    role_resource: RoleResource,
    health_resource: HealthResource,
    middleware: list | None = None,
    login_resource: LoginResource | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app)
    app.add_route("/health", health_resource)
    app.add_route("/health/ready", health_resource, suffix="ready")
    if login_resource is not None:
        app.add_route("/login", login_resource)
        app.add_route("/logout", login_resource, suffix="logout")
    app.add_route("/roles/new", role_resource, suffix="new")
    app.add_route("/roles/find", role_resource, suffix="find")
    app.add_route("/roles/show/{role_id}", role_resource, suffix="show")
    app.add_route("/roles/edit/{role_id}", role_resource, suffix="edit")
    app.add_route("/roles/remove/{role_id}", role_resource, suffix="remove")
    app.add_route("/roles/download/{filename}", role_resource, suffix="download")
    return app
