"""Dashboard DTOs."""

from dataclasses import dataclass
from uuid import UUID

from rbacconsole.domain.entities import Permission, Role


@dataclass
class DashboardStats:
    """Summary of the current mirror for the dashboard."""

    total_permissions: int
    total_roles: int
    total_assignments: int
    coverage_percent: int
    recent_permissions: list[Permission]
    recent_roles: list[Role]
    permission_counts: dict[UUID, int]
