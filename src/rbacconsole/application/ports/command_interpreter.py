"""Command interpreter port - natural language to assistant command."""

from typing import Protocol

from rbacconsole.application.dto.assistant_dto import AssistantCommand


class CommandInterpreter(Protocol):
    """Port for translating free text into an AssistantCommand."""

    async def interpret(self, message: str) -> AssistantCommand: ...
