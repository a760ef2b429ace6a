"""Script interpreter for simsh."""

from .errors import ExecutionLimitError, ExitError, ScriptError, UnterminatedBlockError
from .interpreter import ScriptInterpreter
from .types import ScriptContext, ScriptState, VariableStore

__all__ = [
    "ScriptInterpreter",
    "ScriptContext",
    "ScriptState",
    "VariableStore",
    "ScriptError",
    "ExitError",
    "UnterminatedBlockError",
    "ExecutionLimitError",
]
