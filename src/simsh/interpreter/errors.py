"""Interpreter errors.

Control-flow exceptions (exit) and the fatal/limit errors raised while a
script runs. None of these escape ScriptInterpreter's public entry points.
"""

from typing import Optional


class ScriptError(Exception):
    """Base class for interpreter errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ExitError(ScriptError):
    """Raised by `exit [n]` to terminate the whole script run."""

    def __init__(self, exit_code: int):
        super().__init__(f"exit {exit_code}")
        self.exit_code = exit_code


class UnterminatedBlockError(ScriptError):
    """A control structure has no matching terminator."""

    def __init__(self, keyword: str, terminator: str):
        kind = "statement" if keyword == "if" else "loop"
        super().__init__(f"{keyword} {kind} without matching {terminator}")
        self.keyword = keyword
        self.terminator = terminator


class ExecutionLimitError(ScriptError):
    """A configured execution limit was exceeded. Ends the whole run."""

    def __init__(self, message: str, limit_type: str = ""):
        super().__init__(message)
        self.limit_type = limit_type
        self.line: Optional[int] = None
