"""Role entity for RBAC."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Role:
    """Role - named bundle of permissions."""

    id: UUID
    name: str
    created_at: datetime
    description: str | None = None
