"""Health check endpoints."""

import falcon
import falcon.asgi

from rbacconsole.application.rbac_cache import RBACCache


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - ready once the mirror has been loaded."""
        if self._cache.loaded:
            resp.media = {"status": "ready"}
            resp.status = falcon.HTTP_200
        else:
            resp.media = {"status": "loading"}
            resp.status = falcon.HTTP_503
