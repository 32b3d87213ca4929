"""Application ports - interfaces for external adapters."""

from rbacconsole.application.ports.command_interpreter import CommandInterpreter
from rbacconsole.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "CommandInterpreter",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
