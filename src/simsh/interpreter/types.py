"""Interpreter types for simsh."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Mapping, Optional

if TYPE_CHECKING:
    from ..types import CancellationToken, IHostShell, ScriptLimits, TextSink
    from .lines import ScriptLines


SCRIPT_NAME = "script"
"""Value of $0 for scripts run from content."""


class VariableStore(dict):
    """Dict subclass holding script variables and positional parameters.

    Inherits from dict so expansion and callers can treat it as a plain
    name -> value mapping. Positional parameters live under the keys
    "0", "1".."N", "#" and "@".
    """

    def set_positional(self, args: list[str], script_name: str = SCRIPT_NAME) -> None:
        """Bind positional parameters, replacing any previous ones."""
        for key in [k for k in self if k.isdigit()]:
            del self[key]
        self["0"] = script_name
        for index, arg in enumerate(args, start=1):
            self[str(index)] = arg
        self["#"] = str(len(args))
        self["@"] = " ".join(args)


@dataclass
class ScriptState:
    """Mutable state of one top-level script run.

    The variable store is shared by reference with every nested block
    execution of the run.
    """

    variables: VariableStore = field(default_factory=VariableStore)
    """Script variables and positional parameters."""

    last_exit_code: int = 0
    """Exit code of the last executed command."""

    block_depth: int = 0
    """Current nesting depth of block executions."""


@dataclass
class ScriptContext:
    """Context provided to the control-flow and condition helpers."""

    state: ScriptState
    """Mutable run state."""

    host: "IHostShell"
    """Host shell bridge."""

    limits: "ScriptLimits"
    """Execution limits."""

    stdout: "TextSink"
    """Output sink of the run."""

    stderr: "TextSink"
    """Error sink of the run."""

    execute_block: Callable[["ScriptLines", int, int], Awaitable[int]]
    """Execute lines[start:end] as a nested block; returns its exit code."""

    cancel: Optional["CancellationToken"] = None
    """Cooperative cancellation token."""

    def environment(self) -> Mapping[str, str]:
        """Snapshot of the host environment for one expansion call."""
        return dict(self.host.environment_variables)

    def check_cancelled(self) -> None:
        """Raise CancelledError if the run's token was cancelled."""
        if self.cancel is not None:
            self.cancel.raise_if_cancelled()
