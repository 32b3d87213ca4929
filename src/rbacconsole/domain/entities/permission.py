"""Permission entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Permission:
    """Permission - atomic named capability that can be granted to a role."""

    id: UUID
    name: str
    created_at: datetime
    description: str | None = None
