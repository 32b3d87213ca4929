"""Assignment entity - role to permission link."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Assignment:
    """Role grants permission. (role_id, permission_id) is unique."""

    id: UUID
    role_id: UUID
    permission_id: UUID
    created_at: datetime

    def links(self, role_id: UUID, permission_id: UUID) -> bool:
        return self.role_id == role_id and self.permission_id == permission_id
