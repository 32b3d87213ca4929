"""Actions the natural-language assistant can request."""

from enum import StrEnum


class AssistantAction(StrEnum):
    """Canonical actions returned by the command interpreter."""

    CREATE_PERMISSION = "create_permission"
    CREATE_ROLE = "create_role"
    ASSIGN_PERMISSION = "assign_permission"
    REMOVE_PERMISSION = "remove_permission"
    INFO = "info"
    ERROR = "error"
