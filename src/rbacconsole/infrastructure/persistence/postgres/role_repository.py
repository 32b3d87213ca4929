"""PostgreSQL role repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rbacconsole.domain.entities import Role
from rbacconsole.domain.exceptions import NotFound
from rbacconsole.infrastructure.persistence.postgres.errors import store_errors

_COLUMNS = "id, name, description, created_at"


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_all(self) -> list[Role]:
        """List all roles ordered by name."""
        with store_errors():
            cur = await self._conn.execute(f"SELECT {_COLUMNS} FROM roles ORDER BY name")
            rows = await cur.fetchall()
        return [Role(id=r[0], name=r[1], description=r[2], created_at=r[3]) for r in rows]

    async def create(self, name: str, description: str | None = None) -> Role:
        """Insert role."""
        with store_errors(duplicate_message=f'Role "{name}" already exists'):
            cur = await self._conn.execute(
                f"INSERT INTO roles (name, description) VALUES (%s, %s) RETURNING {_COLUMNS}",
                (name, description),
            )
            r = await cur.fetchone()
        return Role(id=r[0], name=r[1], description=r[2], created_at=r[3])

    async def update(self, role_id: UUID, name: str, description: str | None = None) -> Role:
        """Update name and description."""
        with store_errors(duplicate_message=f'Role "{name}" already exists'):
            cur = await self._conn.execute(
                f"UPDATE roles SET name = %s, description = %s WHERE id = %s RETURNING {_COLUMNS}",
                (name, description, role_id),
            )
            r = await cur.fetchone()
        if not r:
            raise NotFound("Role", role_id)
        return Role(id=r[0], name=r[1], description=r[2], created_at=r[3])

    async def delete(self, role_id: UUID) -> None:
        """Delete role. role_permissions rows cascade in the database."""
        with store_errors():
            await self._conn.execute("DELETE FROM roles WHERE id = %s", (role_id,))
