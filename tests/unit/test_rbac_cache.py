"""Unit tests for RBACCache against the in-memory store."""

import asyncio
from uuid import uuid4

import pytest

from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.domain.exceptions import (
    AlreadyAssigned,
    AlreadyExists,
    NotFound,
    RefreshFailed,
    RemoteStoreError,
    ValidationError,
)

from tests.conftest import FakeStore


def _names(items) -> list[str]:
    return [i.name for i in items]


def _is_sorted(items) -> bool:
    names = _names(items)
    return names == sorted(names)


# --- load ---


@pytest.mark.asyncio
async def test_load_replaces_mirror(cache: RBACCache, store: FakeStore) -> None:
    """load() reads all three tables and mirrors them."""
    other = RBACCache(cache._uow_factory)
    role = await other.create_role("Viewer")
    perm = await other.create_permission("can_view_reports")
    await other.assign_permission_to_role(role.id, perm.id)

    assert not cache.loaded
    await cache.load()

    assert cache.loaded
    assert _names(cache.roles) == ["Viewer"]
    assert _names(cache.permissions) == ["can_view_reports"]
    assert len(cache.assignments) == 1
    assert {"permissions.list_all", "roles.list_all", "assignments.list_all"} <= set(store.calls)


@pytest.mark.asyncio
async def test_load_failure_keeps_previous_mirror(cache: RBACCache, store: FakeStore) -> None:
    """A failing read fails the whole refresh; nothing is partially replaced."""
    await cache.create_permission("can_view_reports")
    await cache.load()
    before = cache.mirror

    # store changes behind the cache's back, then one read fails
    await RBACCache(cache._uow_factory).create_role("Admin")
    store.fail("assignments.list_all")

    with pytest.raises(RefreshFailed, match="assignments.list_all"):
        await cache.load()

    assert cache.mirror is before
    assert cache.roles == ()


@pytest.mark.asyncio
async def test_refresh_failed_is_remote_store_error(cache: RBACCache, store: FakeStore) -> None:
    store.fail("roles.list_all")
    with pytest.raises(RemoteStoreError):
        await cache.load()
    assert not cache.loaded


@pytest.mark.asyncio
async def test_create_then_load_round_trip(cache: RBACCache, store: FakeStore) -> None:
    """create_permission then a full refresh yields exactly one store-assigned record."""
    created = await cache.create_permission("can_view_reports")
    await cache.load()

    matches = [p for p in cache.permissions if p.name == "can_view_reports"]
    assert len(matches) == 1
    assert matches[0].id == created.id
    assert created.id in store.permissions


# --- permissions ---


@pytest.mark.asyncio
async def test_create_permission_returns_record_and_sorts(cache: RBACCache) -> None:
    for name in ["can_view", "can_delete", "Can_Admin", "can_edit"]:
        await cache.create_permission(name)
        assert _is_sorted(cache.permissions)
    assert _names(cache.permissions) == ["Can_Admin", "can_delete", "can_edit", "can_view"]


@pytest.mark.asyncio
async def test_create_permission_with_description(cache: RBACCache) -> None:
    perm = await cache.create_permission("can_publish_content", "Publish to site")
    assert perm.description == "Publish to site"
    assert cache.get_permission(perm.id) == perm


@pytest.mark.parametrize("name", ["", "   ", "\t"])
@pytest.mark.asyncio
async def test_create_permission_rejects_blank_name(
    cache: RBACCache, store: FakeStore, name: str
) -> None:
    with pytest.raises(ValidationError, match="name is required"):
        await cache.create_permission(name)
    assert store.calls == []


@pytest.mark.asyncio
async def test_create_permission_duplicate_name(cache: RBACCache) -> None:
    """Store uniqueness violation surfaces as AlreadyExists; mirror untouched."""
    await cache.create_permission("can_delete")
    before = cache.mirror
    with pytest.raises(AlreadyExists):
        await cache.create_permission("can_delete")
    assert cache.mirror == before


@pytest.mark.asyncio
async def test_create_permission_store_failure(cache: RBACCache, store: FakeStore) -> None:
    store.fail("permissions.create")
    with pytest.raises(RemoteStoreError):
        await cache.create_permission("can_delete")
    assert cache.permissions == ()


@pytest.mark.asyncio
async def test_update_permission_renames_and_resorts(cache: RBACCache) -> None:
    a = await cache.create_permission("a")
    await cache.create_permission("b")

    updated = await cache.update_permission(a.id, "c", "now last")

    assert updated.id == a.id
    assert updated.created_at == a.created_at
    assert _names(cache.permissions) == ["b", "c"]
    assert cache.get_permission(a.id).description == "now last"


@pytest.mark.asyncio
async def test_update_permission_unknown_id(cache: RBACCache, store: FakeStore) -> None:
    """Unknown id fails locally without a store call."""
    with pytest.raises(NotFound, match="Permission"):
        await cache.update_permission(uuid4(), "x")
    assert store.mutations() == []


@pytest.mark.asyncio
async def test_update_permission_store_failure_keeps_mirror(
    cache: RBACCache, store: FakeStore
) -> None:
    perm = await cache.create_permission("a")
    store.fail("permissions.update")
    with pytest.raises(RemoteStoreError):
        await cache.update_permission(perm.id, "b")
    assert _names(cache.permissions) == ["a"]


@pytest.mark.asyncio
async def test_delete_permission_cascades(cache: RBACCache) -> None:
    """Deleting a permission removes its assignments locally as well."""
    role = await cache.create_role("Editor")
    keep = await cache.create_permission("can_edit")
    drop = await cache.create_permission("can_delete")
    await cache.assign_permission_to_role(role.id, keep.id)
    await cache.assign_permission_to_role(role.id, drop.id)

    await cache.delete_permission(drop.id)

    assert _names(cache.permissions) == ["can_edit"]
    assert all(a.permission_id != drop.id for a in cache.assignments)
    assert _names(cache.permissions_for_role(role.id)) == ["can_edit"]
    assert cache.roles_for_permission(drop.id) == ()


@pytest.mark.asyncio
async def test_delete_permission_failure_changes_nothing(
    cache: RBACCache, store: FakeStore
) -> None:
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    await cache.assign_permission_to_role(role.id, perm.id)
    before = cache.mirror
    store.fail("permissions.delete")

    with pytest.raises(RemoteStoreError):
        await cache.delete_permission(perm.id)

    assert cache.mirror == before


@pytest.mark.asyncio
async def test_delete_permission_unknown_id(cache: RBACCache, store: FakeStore) -> None:
    with pytest.raises(NotFound):
        await cache.delete_permission(uuid4())
    assert store.mutations() == []


# --- roles ---


@pytest.mark.asyncio
async def test_role_crud_keeps_order(cache: RBACCache) -> None:
    viewer = await cache.create_role("Viewer", "Read only")
    await cache.create_role("Admin")
    assert _names(cache.roles) == ["Admin", "Viewer"]

    await cache.update_role(viewer.id, "Auditor", "Reads logs")
    assert _names(cache.roles) == ["Admin", "Auditor"]
    assert cache.get_role(viewer.id).description == "Reads logs"

    await cache.delete_role(viewer.id)
    assert _names(cache.roles) == ["Admin"]


@pytest.mark.asyncio
async def test_create_role_rejects_blank_name(cache: RBACCache) -> None:
    with pytest.raises(ValidationError, match="Role name"):
        await cache.create_role(" ")


@pytest.mark.asyncio
async def test_delete_role_cascades(cache: RBACCache, store: FakeStore) -> None:
    """Deleting a role removes its assignments locally and in the store."""
    admin = await cache.create_role("Admin")
    viewer = await cache.create_role("Viewer")
    perm = await cache.create_permission("can_view_reports")
    await cache.assign_permission_to_role(admin.id, perm.id)
    await cache.assign_permission_to_role(viewer.id, perm.id)

    await cache.delete_role(admin.id)

    assert _names(cache.roles_for_permission(perm.id)) == ["Viewer"]
    assert cache.permissions_for_role(admin.id) == ()
    assert all(a.role_id != admin.id for a in cache.assignments)
    assert all(a.role_id != admin.id for a in store.assignments.values())


# --- assignments ---


@pytest.mark.asyncio
async def test_marketing_manager_scenario(cache: RBACCache) -> None:
    """Empty mirror -> role, permission, assignment, derived queries."""
    await cache.load()
    assert cache.roles == () and cache.permissions == ()

    role = await cache.create_role("Marketing Manager")
    assert _names(cache.roles) == ["Marketing Manager"]
    perm = await cache.create_permission("can_publish_content")
    assert len(cache.permissions) == 1

    assignment = await cache.assign_permission_to_role(role.id, perm.id)

    assert assignment.role_id == role.id and assignment.permission_id == perm.id
    assert _names(cache.permissions_for_role(role.id)) == ["can_publish_content"]
    assert _names(cache.roles_for_permission(perm.id)) == ["Marketing Manager"]


@pytest.mark.asyncio
async def test_assign_twice_reports_already_assigned(cache: RBACCache) -> None:
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    await cache.assign_permission_to_role(role.id, perm.id)

    with pytest.raises(AlreadyAssigned):
        await cache.assign_permission_to_role(role.id, perm.id)

    pairs = [a for a in cache.assignments if a.links(role.id, perm.id)]
    assert len(pairs) == 1


@pytest.mark.asyncio
async def test_already_assigned_is_already_exists(cache: RBACCache) -> None:
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    await cache.assign_permission_to_role(role.id, perm.id)
    with pytest.raises(AlreadyExists):
        await cache.assign_permission_to_role(role.id, perm.id)


@pytest.mark.asyncio
async def test_remove_permission_from_role(cache: RBACCache) -> None:
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    await cache.assign_permission_to_role(role.id, perm.id)

    removed = await cache.remove_permission_from_role(role.id, perm.id)

    assert removed is True
    assert cache.assignments == ()
    assert cache.permissions_for_role(role.id) == ()


@pytest.mark.asyncio
async def test_remove_missing_assignment_is_noop(cache: RBACCache) -> None:
    """Removing a link that does not exist succeeds without changing the mirror."""
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    before = cache.mirror

    removed = await cache.remove_permission_from_role(role.id, perm.id)

    assert removed is False
    assert cache.mirror == before


@pytest.mark.asyncio
async def test_remove_failure_keeps_assignment(cache: RBACCache, store: FakeStore) -> None:
    role = await cache.create_role("Editor")
    perm = await cache.create_permission("can_edit")
    await cache.assign_permission_to_role(role.id, perm.id)
    store.fail("assignments.delete")

    with pytest.raises(RemoteStoreError):
        await cache.remove_permission_from_role(role.id, perm.id)

    assert cache.has_assignment(role.id, perm.id)


# --- busy tracking ---


@pytest.mark.asyncio
async def test_is_busy_while_write_outstanding(store: FakeStore) -> None:
    """Targeted ids are busy only while the store call is pending."""
    gate = asyncio.Event()
    from contextlib import asynccontextmanager

    from tests.conftest import FakeUnitOfWork

    @asynccontextmanager
    async def slow_factory():
        await gate.wait()
        yield FakeUnitOfWork(store)

    seeded = RBACCache(slow_factory)
    gate.set()
    role = await seeded.create_role("Editor")
    gate.clear()

    task = asyncio.create_task(seeded.update_role(role.id, "Writer"))
    await asyncio.sleep(0)
    assert seeded.is_busy(role.id)

    gate.set()
    await task
    assert not seeded.is_busy(role.id)
    assert _names(seeded.roles) == ["Writer"]


@pytest.mark.asyncio
async def test_is_busy_until_last_overlapping_write_finishes(store: FakeStore) -> None:
    """Two writes on one id: finishing the first keeps the id busy."""
    from contextlib import asynccontextmanager

    from tests.conftest import FakeUnitOfWork

    gates: list[asyncio.Event] = []

    @asynccontextmanager
    async def gated_factory():
        gate = asyncio.Event()
        gates.append(gate)
        await gate.wait()
        yield FakeUnitOfWork(store)

    seeded = RBACCache(gated_factory)
    creating = asyncio.create_task(seeded.create_role("Editor"))
    await asyncio.sleep(0)
    gates[0].set()
    role = await creating

    first = asyncio.create_task(seeded.update_role(role.id, "Writer"))
    second = asyncio.create_task(seeded.update_role(role.id, "Author"))
    await asyncio.sleep(0)
    assert len(gates) == 3

    gates[1].set()
    await first
    assert not second.done()
    assert seeded.is_busy(role.id)

    gates[2].set()
    await second
    assert not seeded.is_busy(role.id)
    assert _names(seeded.roles) == ["Author"]


# --- stale mirror ---


@pytest.mark.asyncio
async def test_update_permission_deleted_remotely_drops_it(
    cache: RBACCache, store: FakeStore
) -> None:
    """Store says the row is gone: the mirror forgets it and its links."""
    role = await cache.create_role("Admin")
    perm = await cache.create_permission("can_x")
    await cache.assign_permission_to_role(role.id, perm.id)
    del store.permissions[perm.id]
    store.assignments.clear()

    with pytest.raises(NotFound):
        await cache.update_permission(perm.id, "can_y")

    assert cache.permissions == ()
    assert cache.assignments == ()
    assert _names(cache.roles) == ["Admin"]


@pytest.mark.asyncio
async def test_update_role_deleted_remotely_drops_it(cache: RBACCache, store: FakeStore) -> None:
    role = await cache.create_role("Viewer")
    perm = await cache.create_permission("can_view_reports")
    await cache.assign_permission_to_role(role.id, perm.id)
    del store.roles[role.id]
    store.assignments.clear()

    with pytest.raises(NotFound):
        await cache.update_role(role.id, "Reader")

    assert cache.roles == ()
    assert cache.assignments == ()
    assert cache.permissions_for_role(role.id) == ()


@pytest.mark.asyncio
async def test_update_failure_other_than_not_found_keeps_entry(
    cache: RBACCache, store: FakeStore
) -> None:
    role = await cache.create_role("Viewer")
    store.fail("roles.update")

    with pytest.raises(RemoteStoreError):
        await cache.update_role(role.id, "Reader")

    assert _names(cache.roles) == ["Viewer"]


# --- ordering across mixed sequences ---


@pytest.mark.asyncio
async def test_sorted_after_every_step_of_mixed_sequence(
    cache: RBACCache, store: FakeStore
) -> None:
    names = ["m", "B", "z", "a", "Q", "c", "k", "Z", "b", "x"]
    roles = {}
    permissions = {}
    for i, name in enumerate(names):
        roles[name] = await cache.create_role(f"role_{name}")
        permissions[name] = await cache.create_permission(f"perm_{name}")
        assert _is_sorted(cache.roles) and _is_sorted(cache.permissions)

        if i % 3 == 1:
            renamed = names[(i * 7) % len(names)] + f"_{i}"
            await cache.update_role(roles[name].id, renamed)
            await cache.update_permission(permissions[name].id, renamed)
            assert _is_sorted(cache.roles) and _is_sorted(cache.permissions)

        if i % 4 == 3:
            victim = names[i - 2]
            await cache.delete_role(roles.pop(victim).id)
            await cache.delete_permission(permissions.pop(victim).id)
            assert _is_sorted(cache.roles) and _is_sorted(cache.permissions)

    assert len(cache.roles) == len(roles) == len(store.roles)
    assert len(cache.permissions) == len(permissions) == len(store.permissions)
    await cache.load()
    assert _is_sorted(cache.roles) and _is_sorted(cache.permissions)


# --- queries ---


@pytest.mark.asyncio
async def test_find_by_name_and_search(cache: RBACCache) -> None:
    await cache.create_role("Content Editor", "Edits articles")
    await cache.create_permission("can_edit_articles", "Edit existing articles")
    await cache.create_permission("can_delete")

    assert cache.find_role_by_name("content editor").name == "Content Editor"
    assert cache.find_permission_by_name("CAN_DELETE").name == "can_delete"
    assert cache.find_role_by_name("Viewer") is None
    assert _names(cache.search_permissions("article")) == ["can_edit_articles"]
    assert _names(cache.search_roles("edits")) == ["Content Editor"]


@pytest.mark.asyncio
async def test_stats(cache: RBACCache) -> None:
    admin = await cache.create_role("Admin")
    await cache.create_role("Viewer")
    perms = [await cache.create_permission(f"p{i}") for i in range(3)]
    for p in perms:
        await cache.assign_permission_to_role(admin.id, p.id)

    stats = cache.stats()

    assert stats.total_permissions == 3
    assert stats.total_roles == 2
    assert stats.total_assignments == 3
    assert stats.coverage_percent == 50
    assert stats.permission_counts[admin.id] == 3
    assert _names(stats.recent_roles) == ["Admin", "Viewer"]


def test_stats_empty(cache: RBACCache) -> None:
    stats = cache.stats()
    assert stats.coverage_percent == 0
    assert stats.recent_permissions == []


@pytest.mark.asyncio
async def test_stats_coverage_without_permissions(cache: RBACCache) -> None:
    """Roles but no permissions: denominator falls back to 1."""
    await cache.create_role("Admin")
    assert cache.stats().coverage_percent == 0
