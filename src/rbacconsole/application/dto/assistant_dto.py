"""Assistant DTOs."""

from dataclasses import dataclass, field
from typing import Any

from rbacconsole.domain.value_objects import AssistantAction


@dataclass
class AssistantCommand:
    """Structured action produced by the command interpreter."""

    action: AssistantAction
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AssistantCommand":
        """Build from the model's JSON object. Unknown actions degrade to info."""
        try:
            action = AssistantAction(payload.get("action", AssistantAction.INFO))
        except ValueError:
            action = AssistantAction.INFO
        data = payload.get("data")
        return cls(
            action=action,
            message=str(payload.get("message") or payload.get("error") or ""),
            data=data if isinstance(data, dict) else {},
        )

    def value(self, key: str) -> str:
        """Stripped string value from data, empty when missing."""
        value = self.data.get(key)
        return value.strip() if isinstance(value, str) else ""


@dataclass
class DispatchResult:
    """Outcome of dispatching an assistant command."""

    success: bool
    message: str
    action: AssistantAction
