"""Domain value objects."""

from rbacconsole.domain.value_objects.assistant_action import AssistantAction

__all__ = [
    "AssistantAction",
]
