"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from rbacconsole.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for the permissions table."""

    async def list_all(self) -> list[Permission]: ...

    async def create(self, name: str, description: str | None = None) -> Permission: ...

    async def update(
        self, permission_id: UUID, name: str, description: str | None = None
    ) -> Permission: ...

    async def delete(self, permission_id: UUID) -> None: ...
