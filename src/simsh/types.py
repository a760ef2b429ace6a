"""Core types for simsh.

Defines the collaborator protocols the script interpreter consumes
(host shell bridge, file reader, output sinks), command results, execution
limits and the cooperative cancellation token.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .host.host import CommandHost


@dataclass
class ExecResult:
    """Result of executing a single host command."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    env: Optional[dict[str, str]] = None


@dataclass
class ScriptLimits:
    """Execution limits for script runs.

    Loops are unbounded unless ``max_loop_iterations`` is set; a script may
    legitimately wait forever on external state, and cancellation is the
    normal way to stop it.
    """

    max_loop_iterations: Optional[int] = None
    """Maximum iterations of a single for/while loop (None = unlimited)."""

    max_block_depth: int = 100
    """Maximum nesting depth of if/for/while block execution."""


class CancellationToken:
    """Cooperative cancellation signal threaded through every await point.

    Cancelling the token makes the next check raise
    :class:`asyncio.CancelledError`, the same exception a cancelled task sees,
    so per-line error handling never swallows it.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if cancellation was requested."""
        if self._event.is_set():
            raise asyncio.CancelledError("script cancelled")


@runtime_checkable
class TextSink(Protocol):
    """Anything text can be written to (io.StringIO, sys.stderr, ...)."""

    def write(self, text: str) -> object: ...


@dataclass
class UserSession:
    """The session a host shell is running under."""

    user: str
    home: str = ""


class IHostShell(Protocol):
    """Host shell bridge: runs single command lines for the interpreter."""

    @property
    def environment_variables(self) -> Mapping[str, str]:
        """Live environment variables of the host session."""
        ...

    @property
    def current_session(self) -> Optional[UserSession]:
        """Active user session, or None if the shell is not logged in."""
        ...

    async def execute_command(
        self, command_line: str, cancel: Optional[CancellationToken] = None
    ) -> int:
        """Execute an already expanded command line and return its exit code."""
        ...


class IFileReader(Protocol):
    """Read capability of the virtual file system."""

    async def exists(self, path: str, user: Optional[str] = None) -> bool: ...

    async def read_text(self, path: str, user: Optional[str] = None) -> str: ...


@dataclass
class CommandContext:
    """Context handed to host commands."""

    env: dict[str, str]
    """Host environment (mutable: export writes here)."""

    host: "CommandHost"
    """Host executing the command."""

    cancel: Optional[CancellationToken] = None
    """Cancellation token of the enclosing run."""


class Command(Protocol):
    """Protocol for host commands."""

    name: str

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        """Execute the command with the given arguments."""
        ...
