"""PostgreSQL assignment (role_permissions) repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from rbacconsole.domain.entities import Assignment
from rbacconsole.domain.exceptions import AlreadyAssigned
from rbacconsole.infrastructure.persistence.postgres.errors import store_errors

_COLUMNS = "id, role_id, permission_id, created_at"


class PostgresAssignmentRepository:
    """Assignment repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_all(self) -> list[Assignment]:
        """List all role/permission links."""
        with store_errors():
            cur = await self._conn.execute(f"SELECT {_COLUMNS} FROM role_permissions")
            rows = await cur.fetchall()
        return [
            Assignment(id=r[0], role_id=r[1], permission_id=r[2], created_at=r[3])
            for r in rows
        ]

    async def create(self, role_id: UUID, permission_id: UUID) -> Assignment:
        """Link permission to role. The unique (role_id, permission_id) index rejects duplicates."""
        with store_errors(
            duplicate=AlreadyAssigned,
            duplicate_message="This permission is already assigned to the role.",
        ):
            cur = await self._conn.execute(
                "INSERT INTO role_permissions (role_id, permission_id) VALUES (%s, %s) "
                f"RETURNING {_COLUMNS}",
                (role_id, permission_id),
            )
            r = await cur.fetchone()
        return Assignment(id=r[0], role_id=r[1], permission_id=r[2], created_at=r[3])

    async def delete(self, role_id: UUID, permission_id: UUID) -> bool:
        """Unlink permission from role. Returns False when no row matched."""
        with store_errors():
            cur = await self._conn.execute(
                "DELETE FROM role_permissions WHERE role_id = %s AND permission_id = %s",
                (role_id, permission_id),
            )
        return cur.rowcount > 0
