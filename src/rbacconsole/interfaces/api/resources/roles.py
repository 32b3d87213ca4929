"""Roles and role assignment API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.application.use_cases.assignment.toggle_assignment import (
    ToggleAssignmentUseCase,
)
from rbacconsole.interfaces.api.middleware.auth import require_user
from rbacconsole.interfaces.api.resources._body import (
    name_and_description,
    read_json,
    uuid_field,
)
from rbacconsole.interfaces.api.serializers import (
    assignment_media,
    permission_media,
    role_media,
)


class RolesResource:
    """GET/POST /v1/roles - list (optionally filtered by ?q=) and create."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        items = self._cache.search_roles(req.get_param("q", default=""))
        resp.media = {"items": [role_media(r) for r in items]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        name, description = name_and_description(await read_json(req))
        role = await self._cache.create_role(name, description)
        resp.media = role_media(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET/PUT/DELETE /v1/roles/{role_id}."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        require_user(req)
        role = self._cache.get_role(role_id)
        resp.media = {
            **role_media(role),
            "permissions": [
                permission_media(p) for p in self._cache.permissions_for_role(role_id)
            ],
        }
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        require_user(req)
        name, description = name_and_description(await read_json(req))
        role = await self._cache.update_role(role_id, name, description)
        resp.media = role_media(role)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        require_user(req)
        await self._cache.delete_role(role_id)
        resp.status = falcon.HTTP_204


class RolePermissionsResource:
    """GET/POST /v1/roles/{role_id}/permissions - list and assign."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        require_user(req)
        self._cache.get_role(role_id)
        items = self._cache.permissions_for_role(role_id)
        resp.media = {"items": [permission_media(p) for p in items]}
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: UUID
    ) -> None:
        require_user(req)
        permission_id = uuid_field(await read_json(req), "permission_id")
        self._cache.get_role(role_id)
        self._cache.get_permission(permission_id)
        assignment = await self._cache.assign_permission_to_role(role_id, permission_id)
        resp.media = assignment_media(assignment)
        resp.status = falcon.HTTP_201


class RolePermissionResource:
    """DELETE /v1/roles/{role_id}/permissions/{permission_id} - unassign (idempotent)."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: UUID,
        permission_id: UUID,
    ) -> None:
        require_user(req)
        removed = await self._cache.remove_permission_from_role(role_id, permission_id)
        resp.media = {"removed": removed}
        resp.status = falcon.HTTP_200


class AssignmentToggleResource:
    """POST /v1/roles/{role_id}/permissions/{permission_id}/toggle."""

    def __init__(self, toggle_assignment: ToggleAssignmentUseCase) -> None:
        self._toggle = toggle_assignment

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: UUID,
        permission_id: UUID,
    ) -> None:
        require_user(req)
        result = await self._toggle.execute(role_id, permission_id)
        resp.media = {
            "role_id": str(result.role_id),
            "permission_id": str(result.permission_id),
            "assigned": result.assigned,
        }
        resp.status = falcon.HTTP_200
