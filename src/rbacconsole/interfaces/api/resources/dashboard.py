"""Dashboard and refresh resources."""

import falcon
import falcon.asgi

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.interfaces.api.middleware.auth import require_user
from rbacconsole.interfaces.api.serializers import dashboard_media


class DashboardResource:
    """GET /v1/dashboard - totals, coverage and recent entries."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        resp.media = dashboard_media(self._cache.stats())
        resp.status = falcon.HTTP_200


class RefreshResource:
    """POST /v1/refresh - rebuild the mirror from the store."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        require_user(req)
        await self._cache.load()
        resp.media = {
            "permissions": len(self._cache.permissions),
            "roles": len(self._cache.roles),
            "assignments": len(self._cache.assignments),
        }
        resp.status = falcon.HTTP_200
