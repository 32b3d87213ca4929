"""Repository ports."""

from rbacconsole.application.ports.repositories.assignment_repository import (
    AssignmentRepository,
)
from rbacconsole.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from rbacconsole.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "AssignmentRepository",
    "PermissionRepository",
    "RoleRepository",
]
