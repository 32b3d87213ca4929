"""Pure transformations of the local RBAC mirror.

Every function takes a mirror (or a collection from one) and returns a new
value; nothing here touches the store. RBACCache applies these only after the
store has accepted the corresponding write.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TypeVar
from uuid import UUID

from rbacconsole.domain.entities import Assignment, Permission, Role

Named = TypeVar("Named", Permission, Role)


@dataclass(frozen=True)
class RBACMirror:
    """Immutable snapshot of the three mirrored tables."""

    permissions: tuple[Permission, ...] = ()
    roles: tuple[Role, ...] = ()
    assignments: tuple[Assignment, ...] = ()


def sort_by_name(items: Iterable[Named]) -> tuple[Named, ...]:
    """Case-sensitive lexical order by name (stable for equal names)."""
    return tuple(sorted(items, key=lambda item: item.name))


def build_mirror(
    permissions: Iterable[Permission],
    roles: Iterable[Role],
    assignments: Iterable[Assignment],
) -> RBACMirror:
    return RBACMirror(
        permissions=sort_by_name(permissions),
        roles=sort_by_name(roles),
        assignments=tuple(assignments),
    )


def _insert(items: tuple[Named, ...], item: Named) -> tuple[Named, ...]:
    return sort_by_name((*items, item))


def _replace(items: tuple[Named, ...], item: Named) -> tuple[Named, ...]:
    return sort_by_name(item if i.id == item.id else i for i in items)


def _remove(items: tuple[Named, ...], item_id: UUID) -> tuple[Named, ...]:
    return tuple(i for i in items if i.id != item_id)


# --- Permissions ---


def permission_created(mirror: RBACMirror, permission: Permission) -> RBACMirror:
    return replace(mirror, permissions=_insert(mirror.permissions, permission))


def permission_updated(mirror: RBACMirror, permission: Permission) -> RBACMirror:
    return replace(mirror, permissions=_replace(mirror.permissions, permission))


def permission_deleted(mirror: RBACMirror, permission_id: UUID) -> RBACMirror:
    """Drop the permission and, in the same snapshot, every link to it."""
    return replace(
        mirror,
        permissions=_remove(mirror.permissions, permission_id),
        assignments=tuple(
            a for a in mirror.assignments if a.permission_id != permission_id
        ),
    )


# --- Roles ---


def role_created(mirror: RBACMirror, role: Role) -> RBACMirror:
    return replace(mirror, roles=_insert(mirror.roles, role))


def role_updated(mirror: RBACMirror, role: Role) -> RBACMirror:
    return replace(mirror, roles=_replace(mirror.roles, role))


def role_deleted(mirror: RBACMirror, role_id: UUID) -> RBACMirror:
    """Drop the role and, in the same snapshot, every link from it."""
    return replace(
        mirror,
        roles=_remove(mirror.roles, role_id),
        assignments=tuple(a for a in mirror.assignments if a.role_id != role_id),
    )


# --- Assignments ---


def assignment_created(mirror: RBACMirror, assignment: Assignment) -> RBACMirror:
    return replace(mirror, assignments=(*mirror.assignments, assignment))


def assignment_removed(
    mirror: RBACMirror, role_id: UUID, permission_id: UUID
) -> RBACMirror:
    return replace(
        mirror,
        assignments=tuple(
            a for a in mirror.assignments if not a.links(role_id, permission_id)
        ),
    )


# --- Queries ---


def find_by_id(items: tuple[Named, ...], item_id: UUID) -> Named | None:
    for item in items:
        if item.id == item_id:
            return item
    return None


def find_by_name(items: tuple[Named, ...], name: str) -> Named | None:
    """Case-insensitive exact match on name."""
    wanted = name.strip().casefold()
    for item in items:
        if item.name.casefold() == wanted:
            return item
    return None


def search(items: tuple[Named, ...], query: str) -> tuple[Named, ...]:
    """Case-insensitive substring match on name or description."""
    needle = query.strip().casefold()
    if not needle:
        return items
    return tuple(
        item
        for item in items
        if needle in item.name.casefold()
        or (item.description and needle in item.description.casefold())
    )


def permissions_for_role(mirror: RBACMirror, role_id: UUID) -> tuple[Permission, ...]:
    granted = {a.permission_id for a in mirror.assignments if a.role_id == role_id}
    return tuple(p for p in mirror.permissions if p.id in granted)


def roles_for_permission(mirror: RBACMirror, permission_id: UUID) -> tuple[Role, ...]:
    holders = {a.role_id for a in mirror.assignments if a.permission_id == permission_id}
    return tuple(r for r in mirror.roles if r.id in holders)


def has_assignment(mirror: RBACMirror, role_id: UUID, permission_id: UUID) -> bool:
    return any(a.links(role_id, permission_id) for a in mirror.assignments)
