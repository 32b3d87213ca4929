"""RBAC cache - in-process mirror of permissions, roles and assignments.

Writes go to the store first. The mirror is only changed after the unit of
work has committed, by one of the pure functions in ``reconcile``; a failed
write leaves it exactly as it was.
"""

import asyncio
import logging
import math
from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar
from uuid import UUID

from rbacconsole.application import reconcile
from rbacconsole.application.dto.dashboard_dto import DashboardStats
from rbacconsole.application.ports import UnitOfWork, UnitOfWorkFactory
from rbacconsole.application.reconcile import RBACMirror
from rbacconsole.domain.entities import Assignment, Permission, Role
from rbacconsole.domain.exceptions import (
    NotFound,
    RBACConsoleError,
    RefreshFailed,
    RemoteStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECENT_LIMIT = 5


def _require_name(kind: str, name: str) -> None:
    if not name or not name.strip():
        raise ValidationError(f"{kind} name is required")


class RBACCache:
    """Single in-process authority for the best-known RBAC state of a session."""

    def __init__(self, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = unit_of_work_factory
        self._mirror = RBACMirror()
        self._pending: Counter[UUID] = Counter()
        self._loaded = False

    # --- Snapshots ---

    @property
    def mirror(self) -> RBACMirror:
        return self._mirror

    @property
    def permissions(self) -> tuple[Permission, ...]:
        return self._mirror.permissions

    @property
    def roles(self) -> tuple[Role, ...]:
        return self._mirror.roles

    @property
    def assignments(self) -> tuple[Assignment, ...]:
        return self._mirror.assignments

    @property
    def loaded(self) -> bool:
        """True once a full refresh has succeeded."""
        return self._loaded

    def is_busy(self, entity_id: UUID) -> bool:
        """True while a write targeting entity_id is awaiting the store."""
        return self._pending[entity_id] > 0

    # --- Refresh ---

    async def load(self) -> None:
        """Rebuild the whole mirror from the store.

        The three reads run concurrently on separate units of work. If any of
        them fails the previous mirror is kept and RefreshFailed is raised.
        """
        try:
            permissions, roles, assignments = await asyncio.gather(
                self._read(lambda uow: uow.permissions.list_all()),
                self._read(lambda uow: uow.roles.list_all()),
                self._read(lambda uow: uow.assignments.list_all()),
            )
        except RemoteStoreError as e:
            logger.warning("RBAC refresh failed, keeping previous mirror: %s", e)
            raise RefreshFailed(str(e)) from e

        self._mirror = reconcile.build_mirror(permissions, roles, assignments)
        self._loaded = True
        logger.info(
            "RBAC mirror loaded: %d permissions, %d roles, %d assignments",
            len(self._mirror.permissions),
            len(self._mirror.roles),
            len(self._mirror.assignments),
        )

    # --- Permissions ---

    async def create_permission(self, name: str, description: str | None = None) -> Permission:
        _require_name("Permission", name)
        permission = await self._write(
            (), lambda uow: uow.permissions.create(name, description)
        )
        self._mirror = reconcile.permission_created(self._mirror, permission)
        logger.info("Permission created: %s (%s)", permission.name, permission.id)
        return permission

    async def update_permission(
        self, permission_id: UUID, name: str, description: str | None = None
    ) -> Permission:
        _require_name("Permission", name)
        self.get_permission(permission_id)
        try:
            permission = await self._write(
                (permission_id,),
                lambda uow: uow.permissions.update(permission_id, name, description),
            )
        except NotFound:
            # deleted by another client since the last refresh
            self._mirror = reconcile.permission_deleted(self._mirror, permission_id)
            raise
        self._mirror = reconcile.permission_updated(self._mirror, permission)
        logger.info("Permission updated: %s (%s)", permission.name, permission.id)
        return permission

    async def delete_permission(self, permission_id: UUID) -> None:
        """Delete permission; its assignments go with it (store cascades too)."""
        permission = self.get_permission(permission_id)
        await self._write((permission_id,), lambda uow: uow.permissions.delete(permission_id))
        self._mirror = reconcile.permission_deleted(self._mirror, permission_id)
        logger.info("Permission deleted: %s (%s)", permission.name, permission_id)

    # --- Roles ---

    async def create_role(self, name: str, description: str | None = None) -> Role:
        _require_name("Role", name)
        role = await self._write((), lambda uow: uow.roles.create(name, description))
        self._mirror = reconcile.role_created(self._mirror, role)
        logger.info("Role created: %s (%s)", role.name, role.id)
        return role

    async def update_role(self, role_id: UUID, name: str, description: str | None = None) -> Role:
        _require_name("Role", name)
        self.get_role(role_id)
        try:
            role = await self._write(
                (role_id,), lambda uow: uow.roles.update(role_id, name, description)
            )
        except NotFound:
            self._mirror = reconcile.role_deleted(self._mirror, role_id)
            raise
        self._mirror = reconcile.role_updated(self._mirror, role)
        logger.info("Role updated: %s (%s)", role.name, role.id)
        return role

    async def delete_role(self, role_id: UUID) -> None:
        """Delete role; its assignments go with it (store cascades too)."""
        role = self.get_role(role_id)
        await self._write((role_id,), lambda uow: uow.roles.delete(role_id))
        self._mirror = reconcile.role_deleted(self._mirror, role_id)
        logger.info("Role deleted: %s (%s)", role.name, role_id)

    # --- Assignments ---

    async def assign_permission_to_role(self, role_id: UUID, permission_id: UUID) -> Assignment:
        """Link permission to role. Raises AlreadyAssigned for an existing pair."""
        assignment = await self._write(
            (role_id, permission_id),
            lambda uow: uow.assignments.create(role_id, permission_id),
        )
        self._mirror = reconcile.assignment_created(self._mirror, assignment)
        logger.info("Permission %s assigned to role %s", permission_id, role_id)
        return assignment

    async def remove_permission_from_role(self, role_id: UUID, permission_id: UUID) -> bool:
        """Unlink permission from role.

        Succeeds when there was nothing to remove; the return value tells
        whether the store actually deleted a row.
        """
        removed = await self._write(
            (role_id, permission_id),
            lambda uow: uow.assignments.delete(role_id, permission_id),
        )
        self._mirror = reconcile.assignment_removed(self._mirror, role_id, permission_id)
        logger.info(
            "Permission %s removed from role %s (%s)",
            permission_id,
            role_id,
            "deleted" if removed else "no-op",
        )
        return removed

    # --- Queries ---

    def get_permission(self, permission_id: UUID) -> Permission:
        permission = reconcile.find_by_id(self._mirror.permissions, permission_id)
        if permission is None:
            raise NotFound("Permission", permission_id)
        return permission

    def get_role(self, role_id: UUID) -> Role:
        role = reconcile.find_by_id(self._mirror.roles, role_id)
        if role is None:
            raise NotFound("Role", role_id)
        return role

    def find_permission_by_name(self, name: str) -> Permission | None:
        return reconcile.find_by_name(self._mirror.permissions, name)

    def find_role_by_name(self, name: str) -> Role | None:
        return reconcile.find_by_name(self._mirror.roles, name)

    def search_permissions(self, query: str) -> tuple[Permission, ...]:
        return reconcile.search(self._mirror.permissions, query)

    def search_roles(self, query: str) -> tuple[Role, ...]:
        return reconcile.search(self._mirror.roles, query)

    def permissions_for_role(self, role_id: UUID) -> tuple[Permission, ...]:
        return reconcile.permissions_for_role(self._mirror, role_id)

    def roles_for_permission(self, permission_id: UUID) -> tuple[Role, ...]:
        return reconcile.roles_for_permission(self._mirror, permission_id)

    def has_assignment(self, role_id: UUID, permission_id: UUID) -> bool:
        return reconcile.has_assignment(self._mirror, role_id, permission_id)

    def stats(self) -> DashboardStats:
        """Totals, assignment density and the first few entries of each list."""
        mirror = self._mirror
        n_perms, n_roles, n_links = (
            len(mirror.permissions),
            len(mirror.roles),
            len(mirror.assignments),
        )
        coverage = 0
        if n_roles:
            # half-up rounding
            coverage = math.floor(n_links / (n_roles * n_perms or 1) * 100 + 0.5)
        counts = {role.id: 0 for role in mirror.roles}
        for a in mirror.assignments:
            if a.role_id in counts:
                counts[a.role_id] += 1
        return DashboardStats(
            total_permissions=n_perms,
            total_roles=n_roles,
            total_assignments=n_links,
            coverage_percent=coverage,
            recent_permissions=list(mirror.permissions[:RECENT_LIMIT]),
            recent_roles=list(mirror.roles[:RECENT_LIMIT]),
            permission_counts=counts,
        )

    # --- Store access ---

    async def _read(self, operation: Callable[[UnitOfWork], Awaitable[T]]) -> T:
        async with self._uow_factory() as uow:
            return await operation(uow)

    async def _write(
        self,
        targets: tuple[UUID, ...],
        operation: Callable[[UnitOfWork], Awaitable[T]],
    ) -> T:
        """Run operation in its own unit of work; the result is committed on return."""
        async with self._busy(targets):
            try:
                async with self._uow_factory() as uow:
                    result = await operation(uow)
            except RBACConsoleError as e:
                logger.warning("RBAC write rejected: %s", e)
                raise
        return result

    @asynccontextmanager
    async def _busy(self, targets: tuple[UUID, ...]) -> AsyncIterator[None]:
        self._pending.update(targets)
        try:
            yield
        finally:
            self._pending.subtract(targets)
            for entity_id in targets:
                if self._pending[entity_id] <= 0:
                    self._pending.pop(entity_id, None)
