"""Reference host shell bridge and built-in commands."""

from .commands import create_command_registry
from .host import COMMAND_NOT_FOUND, CommandHost

__all__ = [
    "CommandHost",
    "COMMAND_NOT_FOUND",
    "create_command_registry",
]
