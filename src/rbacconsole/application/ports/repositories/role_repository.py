"""Role repository port."""

from typing import Protocol
from uuid import UUID

from rbacconsole.domain.entities import Role


class RoleRepository(Protocol):
    """Port for the roles table."""

    async def list_all(self) -> list[Role]: ...

    async def create(self, name: str, description: str | None = None) -> Role: ...

    async def update(self, role_id: UUID, name: str, description: str | None = None) -> Role: ...

    async def delete(self, role_id: UUID) -> None: ...
