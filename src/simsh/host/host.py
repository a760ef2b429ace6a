"""CommandHost - a host shell bridge backed by a command registry.

Splits each command line with shlex, looks the first word up in the
registry and writes the command's output to the host's sinks.
"""

import logging
import shlex
from typing import Mapping, Optional

from ..fs import MemoryFs
from ..types import (
    CancellationToken,
    Command,
    CommandContext,
    ExecResult,
    ScriptLimits,
    TextSink,
    UserSession,
)

log = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


class CommandHost:
    """Host shell bridge used by ScriptShell and in tests."""

    def __init__(
        self,
        commands: Mapping[str, Command],
        stdout: TextSink,
        stderr: TextSink,
        *,
        env: Optional[dict[str, str]] = None,
        fs: Optional[MemoryFs] = None,
        session: Optional[UserSession] = None,
        limits: Optional[ScriptLimits] = None,
    ):
        self._commands = dict(commands)
        self.stdout = stdout
        self.stderr = stderr
        self.env: dict[str, str] = env if env is not None else {}
        self.fs = fs if fs is not None else MemoryFs()
        self._session = session
        self.limits = limits or ScriptLimits()
        self.history: list[str] = []

    @property
    def environment_variables(self) -> Mapping[str, str]:
        return self.env

    @property
    def current_session(self) -> Optional[UserSession]:
        return self._session

    def register(self, command: Command) -> None:
        """Add or replace a command."""
        self._commands[command.name] = command

    async def execute_command(
        self, command_line: str, cancel: Optional[CancellationToken] = None
    ) -> int:
        """Execute a single command line and return its exit code.

        Raises ValueError for lines shlex cannot split (unbalanced quotes).
        """
        if cancel is not None:
            cancel.raise_if_cancelled()

        self.history.append(command_line)
        words = shlex.split(command_line)
        if not words:
            return 0

        name, args = words[0], words[1:]
        command = self._commands.get(name)
        if command is None:
            self.stderr.write(f"{name}: command not found\n")
            return COMMAND_NOT_FOUND

        log.debug("executing %s %r", name, args)
        ctx = CommandContext(env=self.env, host=self, cancel=cancel)
        result = await command.execute(args, ctx)
        self._emit(result)
        return result.exit_code

    def _emit(self, result: ExecResult) -> None:
        if result.stdout:
            self.stdout.write(result.stdout)
        if result.stderr:
            self.stderr.write(result.stderr)
