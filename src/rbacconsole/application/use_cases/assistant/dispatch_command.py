"""Dispatch assistant command use case."""

import logging

from rbacconsole.application.dto.assistant_dto import AssistantCommand, DispatchResult
from rbacconsole.application.ports import CommandInterpreter
from rbacconsole.application.rbac_cache import RBACCache
from rbacconsole.domain.entities import Permission, Role
from rbacconsole.domain.exceptions import (
    AlreadyAssigned,
    AlreadyExists,
    RBACConsoleError,
    ValidationError,
)
from rbacconsole.domain.value_objects import AssistantAction

logger = logging.getLogger(__name__)


class DispatchCommandUseCase:
    """Interpret free text and apply the resulting action to the cache.

    Every outcome, including store failures, comes back as a DispatchResult.
    """

    def __init__(self, cache: RBACCache, interpreter: CommandInterpreter) -> None:
        self._cache = cache
        self._interpreter = interpreter

    async def execute(self, message: str) -> DispatchResult:
        """Send message to the interpreter, then dispatch its command."""
        if not message or not message.strip():
            raise ValidationError("Message is required")
        command = await self._interpreter.interpret(message.strip())
        logger.info("Assistant command: %s", command.action)
        return await self.dispatch(command)

    async def dispatch(self, command: AssistantCommand) -> DispatchResult:
        """Apply an already interpreted command."""
        handler = {
            AssistantAction.CREATE_PERMISSION: self._create_permission,
            AssistantAction.CREATE_ROLE: self._create_role,
            AssistantAction.ASSIGN_PERMISSION: self._assign_permission,
            AssistantAction.REMOVE_PERMISSION: self._remove_permission,
        }.get(command.action)

        if command.action == AssistantAction.ERROR:
            return DispatchResult(
                success=False,
                message=command.message or "An error occurred",
                action=command.action,
            )
        if handler is None:
            return DispatchResult(success=True, message=command.message, action=command.action)

        try:
            success, text = await handler(command)
        except RBACConsoleError as e:
            logger.warning("Assistant action %s failed: %s", command.action, e)
            success, text = False, str(e)
        return DispatchResult(success=success, message=text, action=command.action)

    async def _create_permission(self, command: AssistantCommand) -> tuple[bool, str]:
        name = command.value("name")
        if not name:
            return False, "Permission name is required"
        try:
            await self._cache.create_permission(name, command.value("description") or None)
        except AlreadyExists:
            return False, "Failed to create permission. It may already exist."
        return True, f'Permission "{name}" created successfully!'

    async def _create_role(self, command: AssistantCommand) -> tuple[bool, str]:
        name = command.value("name")
        if not name:
            return False, "Role name is required"
        try:
            await self._cache.create_role(name, command.value("description") or None)
        except AlreadyExists:
            return False, "Failed to create role. It may already exist."
        return True, f'Role "{name}" created successfully!'

    async def _assign_permission(self, command: AssistantCommand) -> tuple[bool, str]:
        resolved = self._resolve(command)
        if isinstance(resolved, str):
            return False, resolved
        role, permission = resolved
        try:
            await self._cache.assign_permission_to_role(role.id, permission.id)
        except AlreadyAssigned:
            return False, "Failed to assign permission. It may already be assigned."
        return True, f'Permission "{permission.name}" assigned to "{role.name}" successfully!'

    async def _remove_permission(self, command: AssistantCommand) -> tuple[bool, str]:
        resolved = self._resolve(command)
        if isinstance(resolved, str):
            return False, resolved
        role, permission = resolved
        await self._cache.remove_permission_from_role(role.id, permission.id)
        return True, f'Permission "{permission.name}" removed from "{role.name}" successfully!'

    def _resolve(self, command: AssistantCommand) -> tuple[Role, Permission] | str:
        """Map role_name/permission_name to mirror entries, or return the failure text."""
        role_name = command.value("role_name")
        permission_name = command.value("permission_name")
        if not role_name or not permission_name:
            return "Both role name and permission name are required"
        role = self._cache.find_role_by_name(role_name)
        if role is None:
            return f'Role "{role_name}" not found'
        permission = self._cache.find_permission_by_name(permission_name)
        if permission is None:
            return f'Permission "{permission_name}" not found'
        return role, permission
