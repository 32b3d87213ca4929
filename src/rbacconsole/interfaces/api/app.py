"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.application.use_cases.assignment.toggle_assignment import (
    ToggleAssignmentUseCase,
)
from rbacconsole.application.use_cases.assistant.dispatch_command import (
    DispatchCommandUseCase,
)
from rbacconsole.interfaces.api.errors import register_error_handlers
from rbacconsole.interfaces.api.resources.assistant import AssistantResource
from rbacconsole.interfaces.api.resources.dashboard import DashboardResource, RefreshResource
from rbacconsole.interfaces.api.resources.health import HealthResource
from rbacconsole.interfaces.api.resources.permissions import (
    PermissionResource,
    PermissionRolesResource,
    PermissionsResource,
)
from rbacconsole.interfaces.api.resources.roles import (
    AssignmentToggleResource,
    RolePermissionResource,
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)


def create_app(
    cache: RBACCache,
    dispatch_command: DispatchCommandUseCase,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    toggle_assignment = ToggleAssignmentUseCase(cache)
    health = HealthResource(cache)

    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app)
    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")
    app.add_route("/v1/dashboard", DashboardResource(cache))
    app.add_route("/v1/refresh", RefreshResource(cache))
    app.add_route("/v1/permissions", PermissionsResource(cache))
    app.add_route("/v1/permissions/{permission_id:uuid}", PermissionResource(cache))
    app.add_route("/v1/permissions/{permission_id:uuid}/roles", PermissionRolesResource(cache))
    app.add_route("/v1/roles", RolesResource(cache))
    app.add_route("/v1/roles/{role_id:uuid}", RoleResource(cache))
    app.add_route("/v1/roles/{role_id:uuid}/permissions", RolePermissionsResource(cache))
    app.add_route(
        "/v1/roles/{role_id:uuid}/permissions/{permission_id:uuid}",
        RolePermissionResource(cache),
    )
    app.add_route(
        "/v1/roles/{role_id:uuid}/permissions/{permission_id:uuid}/toggle",
        AssignmentToggleResource(toggle_assignment),
    )
    app.add_route("/v1/assistant", AssistantResource(dispatch_command))
    return app
