"""Permissions API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.interfaces.api.middleware.auth import require_user
from rbacconsole.interfaces.api.resources._body import name_and_description, read_json
from rbacconsole.interfaces.api.serializers import permission_media, role_media


class PermissionsResource:
    """GET/POST /v1/permissions - list (optionally filtered by ?q=) and create."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        query = req.get_param("q", default="")
        items = self._cache.search_permissions(query)
        resp.media = {"items": [permission_media(p) for p in items]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        name, description = name_and_description(await read_json(req))
        permission = await self._cache.create_permission(name, description)
        resp.media = permission_media(permission)
        resp.status = falcon.HTTP_201


class PermissionResource:
    """GET/PUT/DELETE /v1/permissions/{permission_id}."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: UUID
    ) -> None:
        require_user(req)
        permission = self._cache.get_permission(permission_id)
        resp.media = {
            **permission_media(permission),
            "roles": [role_media(r) for r in self._cache.roles_for_permission(permission_id)],
        }
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: UUID
    ) -> None:
        require_user(req)
        name, description = name_and_description(await read_json(req))
        permission = await self._cache.update_permission(permission_id, name, description)
        resp.media = permission_media(permission)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: UUID
    ) -> None:
        require_user(req)
        await self._cache.delete_permission(permission_id)
        resp.status = falcon.HTTP_204


class PermissionRolesResource:
    """GET /v1/permissions/{permission_id}/roles - roles granting the permission."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: UUID
    ) -> None:
        require_user(req)
        self._cache.get_permission(permission_id)
        roles = self._cache.roles_for_permission(permission_id)
        resp.media = {"items": [role_media(r) for r in roles]}
        resp.status = falcon.HTTP_200
