"""Store lifespan middleware - opens the pool and loads the mirror on startup."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.domain.exceptions import RefreshFailed

logger = logging.getLogger(__name__)


class StoreLifespanMiddleware:
    """Open the connection pool and run the initial refresh; close pool on shutdown."""

    def __init__(self, pool: AsyncConnectionPool, cache: RBACCache) -> None:
        self._pool = pool
        self._cache = cache

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Open pool and load the mirror. A failed load leaves the app unready."""
        await self._pool.open()
        try:
            await self._cache.load()
        except RefreshFailed as e:
            logger.error("Initial RBAC load failed: %s", e)

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close pool when ASGI server shuts down."""
        await self._pool.close()
