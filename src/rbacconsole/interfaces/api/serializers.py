"""Entity to JSON media conversion."""

from typing import Any

from rbacconsole.application.dto.assistant_dto import DispatchResult
from rbacconsole.application.dto.dashboard_dto import DashboardStats
from rbacconsole.domain.entities import Assignment, Permission, Role


def permission_media(p: Permission) -> dict[str, Any]:
    return {
        "id": str(p.id),
        "name": p.name,
        "description": p.description,
        "created_at": p.created_at.isoformat(),
    }


def role_media(r: Role) -> dict[str, Any]:
    return {
        "id": str(r.id),
        "name": r.name,
        "description": r.description,
        "created_at": r.created_at.isoformat(),
    }


def assignment_media(a: Assignment) -> dict[str, Any]:
    return {
        "id": str(a.id),
        "role_id": str(a.role_id),
        "permission_id": str(a.permission_id),
        "created_at": a.created_at.isoformat(),
    }


def dashboard_media(stats: DashboardStats) -> dict[str, Any]:
    return {
        "total_permissions": stats.total_permissions,
        "total_roles": stats.total_roles,
        "total_assignments": stats.total_assignments,
        "coverage_percent": stats.coverage_percent,
        "recent_permissions": [permission_media(p) for p in stats.recent_permissions],
        "recent_roles": [
            {**role_media(r), "permission_count": stats.permission_counts.get(r.id, 0)}
            for r in stats.recent_roles
        ],
    }


def dispatch_media(result: DispatchResult) -> dict[str, Any]:
    return {
        "success": result.success,
        "message": result.message,
        "action": result.action.value,
    }
