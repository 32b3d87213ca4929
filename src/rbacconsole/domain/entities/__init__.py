"""Domain entities."""

from rbacconsole.domain.entities.assignment import Assignment
from rbacconsole.domain.entities.permission import Permission
from rbacconsole.domain.entities.role import Role

__all__ = [
    "Assignment",
    "Permission",
    "Role",
]
