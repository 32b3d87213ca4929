"""Pytest fixtures for RBAC Console tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.domain.entities import Assignment, Permission, Role
from rbacconsole.domain.exceptions import (
    AlreadyAssigned,
    AlreadyExists,
    NotFound,
    RemoteStoreError,
)


# --- Fake remote store ---


class FakeStore:
    """In-memory stand-in for the three remote tables.

    Shared by every FakeUnitOfWork so state survives between units of work,
    the way rows do in the real database. Enforces unique names, the unique
    (role_id, permission_id) pair and cascade delete.
    """

    def __init__(self) -> None:
        self.permissions: dict[UUID, Permission] = {}
        self.roles: dict[UUID, Role] = {}
        self.assignments: dict[UUID, Assignment] = {}
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self._clock = datetime(2026, 1, 1, tzinfo=UTC)

    def fail(self, *operations: str) -> None:
        """Make the named operations (e.g. "roles.create") raise RemoteStoreError."""
        self.failing.update(operations)

    def record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise RemoteStoreError(f"{operation} failed: connection reset")

    def now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def mutations(self) -> list[str]:
        return [c for c in self.calls if not c.endswith(".list_all")]


class FakePermissionRepository:
    """In-memory permission repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def list_all(self) -> list[Permission]:
        self._store.record("permissions.list_all")
        return sorted(self._store.permissions.values(), key=lambda p: p.name)

    async def create(self, name: str, description: str | None = None) -> Permission:
        self._store.record("permissions.create")
        if any(p.name == name for p in self._store.permissions.values()):
            raise AlreadyExists(f'Permission "{name}" already exists')
        permission = Permission(
            id=uuid4(), name=name, description=description, created_at=self._store.now()
        )
        self._store.permissions[permission.id] = permission
        return permission

    async def update(
        self, permission_id: UUID, name: str, description: str | None = None
    ) -> Permission:
        self._store.record("permissions.update")
        current = self._store.permissions.get(permission_id)
        if current is None:
            raise NotFound("Permission", permission_id)
        if any(p.name == name and p.id != permission_id for p in self._store.permissions.values()):
            raise AlreadyExists(f'Permission "{name}" already exists')
        updated = Permission(
            id=current.id, name=name, description=description, created_at=current.created_at
        )
        self._store.permissions[permission_id] = updated
        return updated

    async def delete(self, permission_id: UUID) -> None:
        self._store.record("permissions.delete")
        self._store.permissions.pop(permission_id, None)
        for a in list(self._store.assignments.values()):
            if a.permission_id == permission_id:
                del self._store.assignments[a.id]


class FakeRoleRepository:
    """In-memory role repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def list_all(self) -> list[Role]:
        self._store.record("roles.list_all")
        return sorted(self._store.roles.values(), key=lambda r: r.name)

    async def create(self, name: str, description: str | None = None) -> Role:
        self._store.record("roles.create")
        if any(r.name == name for r in self._store.roles.values()):
            raise AlreadyExists(f'Role "{name}" already exists')
        role = Role(id=uuid4(), name=name, description=description, created_at=self._store.now())
        self._store.roles[role.id] = role
        return role

    async def update(self, role_id: UUID, name: str, description: str | None = None) -> Role:
        self._store.record("roles.update")
        current = self._store.roles.get(role_id)
        if current is None:
            raise NotFound("Role", role_id)
        if any(r.name == name and r.id != role_id for r in self._store.roles.values()):
            raise AlreadyExists(f'Role "{name}" already exists')
        updated = Role(id=current.id, name=name, description=description, created_at=current.created_at)
        self._store.roles[role_id] = updated
        return updated

    async def delete(self, role_id: UUID) -> None:
        self._store.record("roles.delete")
        self._store.roles.pop(role_id, None)
        for a in list(self._store.assignments.values()):
            if a.role_id == role_id:
                del self._store.assignments[a.id]


class FakeAssignmentRepository:
    """In-memory role_permissions repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def list_all(self) -> list[Assignment]:
        self._store.record("assignments.list_all")
        return list(self._store.assignments.values())

    async def create(self, role_id: UUID, permission_id: UUID) -> Assignment:
        self._store.record("assignments.create")
        if any(a.links(role_id, permission_id) for a in self._store.assignments.values()):
            raise AlreadyAssigned("This permission is already assigned to the role.")
        assignment = Assignment(
            id=uuid4(), role_id=role_id, permission_id=permission_id, created_at=self._store.now()
        )
        self._store.assignments[assignment.id] = assignment
        return assignment

    async def delete(self, role_id: UUID, permission_id: UUID) -> bool:
        self._store.record("assignments.delete")
        for a in list(self._store.assignments.values()):
            if a.links(role_id, permission_id):
                del self._store.assignments[a.id]
                return True
        return False


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work over a shared FakeStore."""

    def __init__(self, store: FakeStore) -> None:
        self.permissions = FakePermissionRepository(store)
        self.roles = FakeRoleRepository(store)
        self.assignments = FakeAssignmentRepository(store)

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


def make_uow_factory(store: FakeStore):
    """Factory that yields a FakeUnitOfWork bound to store per call."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield FakeUnitOfWork(store)

    return _factory


# --- Fixtures ---


@pytest.fixture
def store() -> FakeStore:
    """Fresh empty remote store for each test."""
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore):
    return make_uow_factory(store)


@pytest.fixture
def cache(uow_factory) -> RBACCache:
    """Cache over the fake store (not yet loaded)."""
    return RBACCache(uow_factory)


@pytest.fixture
def mock_interpreter():
    """AsyncMock for CommandInterpreter; set interpret.return_value per test."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    return mock
