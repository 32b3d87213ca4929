"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rbacconsole.domain.entities import Permission
from rbacconsole.domain.exceptions import NotFound
from rbacconsole.infrastructure.persistence.postgres.errors import store_errors

_COLUMNS = "id, name, description, created_at"


def _to_permission(r: tuple) -> Permission:
    return Permission(id=r[0], name=r[1], description=r[2], created_at=r[3])


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_all(self) -> list[Permission]:
        """List all permissions ordered by name."""
        with store_errors():
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM permissions ORDER BY name"
            )
            rows = await cur.fetchall()
        return [_to_permission(r) for r in rows]

    async def create(self, name: str, description: str | None = None) -> Permission:
        """Insert permission; id and created_at are assigned by the store."""
        with store_errors(duplicate_message=f'Permission "{name}" already exists'):
            cur = await self._conn.execute(
                f"INSERT INTO permissions (name, description) VALUES (%s, %s) RETURNING {_COLUMNS}",
                (name, description),
            )
            r = await cur.fetchone()
        return _to_permission(r)

    async def update(
        self, permission_id: UUID, name: str, description: str | None = None
    ) -> Permission:
        """Update name and description."""
        with store_errors(duplicate_message=f'Permission "{name}" already exists'):
            cur = await self._conn.execute(
                f"UPDATE permissions SET name = %s, description = %s WHERE id = %s "
                f"RETURNING {_COLUMNS}",
                (name, description, permission_id),
            )
            r = await cur.fetchone()
        if not r:
            raise NotFound("Permission", permission_id)
        return _to_permission(r)

    async def delete(self, permission_id: UUID) -> None:
        """Delete permission. role_permissions rows cascade in the database."""
        with store_errors():
            await self._conn.execute(
                "DELETE FROM permissions WHERE id = %s",
                (permission_id,),
            )
