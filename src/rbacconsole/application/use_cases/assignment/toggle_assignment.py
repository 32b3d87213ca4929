"""Toggle assignment use case."""

from dataclasses import dataclass
from uuid import UUID

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.domain.exceptions import Busy


@dataclass
class ToggleResult:
    """Whether the pair is linked after the toggle."""

    role_id: UUID
    permission_id: UUID
    assigned: bool


class ToggleAssignmentUseCase:
    """Flip a single cell of the role/permission matrix."""

    def __init__(self, cache: RBACCache) -> None:
        self._cache = cache

    async def execute(self, role_id: UUID, permission_id: UUID) -> ToggleResult:
        """Remove the link if present, otherwise create it.

        Both ids must exist in the mirror. A second toggle on a permission
        whose previous call is still outstanding raises Busy.
        """
        self._cache.get_role(role_id)
        self._cache.get_permission(permission_id)
        if self._cache.is_busy(permission_id):
            raise Busy(f"Permission {permission_id} has a pending change")

        if self._cache.has_assignment(role_id, permission_id):
            await self._cache.remove_permission_from_role(role_id, permission_id)
            return ToggleResult(role_id=role_id, permission_id=permission_id, assigned=False)

        await self._cache.assign_permission_to_role(role_id, permission_id)
        return ToggleResult(role_id=role_id, permission_id=permission_id, assigned=True)
