"""simsh - shell script interpreter for a simulated desktop OS.

Example usage:
    from simsh import ScriptShell

    shell = ScriptShell()
    result = shell.run("name = world\necho hello $name")
    print(result.stdout)  # "hello world\n"
"""

from .fs import MemoryFs
from .host import CommandHost, create_command_registry
from .interpreter import ScriptInterpreter, VariableStore
from .shell import ScriptShell
from .types import (
    CancellationToken,
    Command,
    CommandContext,
    ExecResult,
    IFileReader,
    IHostShell,
    ScriptLimits,
    UserSession,
)

__all__ = [
    "ScriptShell",
    "ScriptInterpreter",
    "VariableStore",
    "CommandHost",
    "create_command_registry",
    "MemoryFs",
    "CancellationToken",
    "Command",
    "CommandContext",
    "ExecResult",
    "IFileReader",
    "IHostShell",
    "ScriptLimits",
    "UserSession",
]

__version__ = "0.1.0"
