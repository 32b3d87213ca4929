"""Assignment repository port."""

from typing import Protocol
from uuid import UUID

from rbacconsole.domain.entities import Assignment


class AssignmentRepository(Protocol):
    """Port for the role_permissions link table.

    create raises AlreadyAssigned for a duplicate (role_id, permission_id).
    delete returns True when a row was removed.
    """

    async def list_all(self) -> list[Assignment]: ...

    async def create(self, role_id: UUID, permission_id: UUID) -> Assignment: ...

    async def delete(self, role_id: UUID, permission_id: UUID) -> bool: ...
