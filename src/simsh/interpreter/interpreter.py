"""Interpreter - line-oriented script execution engine.

Main interpreter class that runs script text line by line.
Delegates to specialized modules for:
- Line classification (lines.py)
- Variable expansion (expansion.py)
- Condition evaluation (conditionals.py)
- Block scanning (scanner.py)
- if/for/while execution (control_flow.py)
"""

import logging
from typing import Optional, Sequence

from ..types import CancellationToken, IFileReader, IHostShell, ScriptLimits, TextSink
from .control_flow import execute_for, execute_if, execute_while
from .errors import ExecutionLimitError, ExitError, UnterminatedBlockError
from .expansion import expand_variables
from .lines import ClassifiedLine, LineKind, ScriptLines, classify_line, split_lines
from .types import SCRIPT_NAME, ScriptContext, ScriptState, VariableStore

log = logging.getLogger(__name__)

_BLOCK_HANDLERS = {
    LineKind.IF: execute_if,
    LineKind.FOR: execute_for,
    LineKind.WHILE: execute_while,
}


def _parse_exit_code(command_line: str) -> Optional[int]:
    """Return the numeric argument of an `exit N` line, if any."""
    parts = command_line.split()
    if len(parts) > 1:
        try:
            return int(parts[1])
        except ValueError:
            return None
    return None


def _is_exit(command_line: str) -> bool:
    # prefix match, not a word match: `exiting` counts too
    return command_line.strip().startswith("exit")


class ScriptInterpreter:
    """Interpreter for shell scripts with basic scripting constructs."""

    def __init__(
        self,
        host: IHostShell,
        fs: Optional[IFileReader] = None,
        limits: Optional[ScriptLimits] = None,
    ):
        """Initialize the interpreter.

        Args:
            host: Host shell bridge that executes command lines
            fs: File system used by execute_script_file
            limits: Execution limits (unbounded loops by default)
        """
        self._host = host
        self._fs = fs
        self._limits = limits or ScriptLimits()
        self._state = ScriptState()

    @property
    def state(self) -> ScriptState:
        """State of the most recent run."""
        return self._state

    @property
    def variables(self) -> VariableStore:
        """Variables of the most recent run."""
        return self._state.variables

    async def execute_script_file(
        self,
        path: str,
        args: Sequence[str],
        stdout: TextSink,
        stderr: TextSink,
        cancel: Optional[CancellationToken] = None,
    ) -> int:
        """Read a script from the file system and execute it."""
        if self._fs is None:
            stderr.write(f"Script not found: {path}\n")
            return 1

        try:
            session = self._host.current_session
            if session is None:
                stderr.write("No active user session\n")
                return 1

            if not await self._fs.exists(path, session.user):
                stderr.write(f"Script not found: {path}\n")
                return 1

            content = await self._fs.read_text(path, session.user)
            if not content:
                stderr.write(f"Script is empty: {path}\n")
                return 1
        except Exception as e:
            log.exception("Error reading script %s", path)
            stderr.write(f"Error executing script: {e}\n")
            return 1

        return await self._run(content, args, stdout, stderr, cancel, script_name=path)

    async def execute_script_content(
        self,
        content: str,
        args: Sequence[str],
        stdout: TextSink,
        stderr: TextSink,
        cancel: Optional[CancellationToken] = None,
    ) -> int:
        """Execute script text with the given positional arguments."""
        if not content:
            stderr.write("Script is empty\n")
            return 1
        return await self._run(content, args, stdout, stderr, cancel)

    async def _run(
        self,
        content: str,
        args: Sequence[str],
        stdout: TextSink,
        stderr: TextSink,
        cancel: Optional[CancellationToken],
        script_name: str = SCRIPT_NAME,
    ) -> int:
        """Run a top-level script with a fresh state."""
        state = ScriptState()
        state.variables.set_positional(list(args), script_name)
        self._state = state

        async def execute_block(lines: ScriptLines, start: int, end: int) -> int:
            return await self._execute_block(ctx, lines, start, end)

        ctx = ScriptContext(
            state=state,
            host=self._host,
            limits=self._limits,
            stdout=stdout,
            stderr=stderr,
            execute_block=execute_block,
            cancel=cancel,
        )

        lines = split_lines(content)
        log.debug("running %s with %d line(s), args=%r", script_name, len(lines), list(args))
        try:
            return await self.execute_lines(ctx, lines, 0, len(lines))
        except ExitError as e:
            log.debug("%s exited with %d", script_name, e.exit_code)
            return e.exit_code
        except ExecutionLimitError as e:
            log.warning("%s stopped: %s", script_name, e.message)
            stderr.write(f"Error on line {e.line}: {e.message}\n")
            return 1

    async def _execute_block(
        self, ctx: ScriptContext, lines: ScriptLines, start: int, end: int
    ) -> int:
        """Execute lines[start:end] as a nested script invocation.

        The variable store is shared with the enclosing run; positional
        parameters are re-bound as for an empty argument list.
        """
        if ctx.state.block_depth >= self._limits.max_block_depth:
            raise ExecutionLimitError(
                f"maximum block nesting depth exceeded ({self._limits.max_block_depth})",
                "depth",
            )

        ctx.state.variables.set_positional([])
        ctx.state.block_depth += 1
        try:
            return await self.execute_lines(ctx, lines, start, end)
        finally:
            ctx.state.block_depth -= 1

    async def execute_lines(
        self,
        ctx: ScriptContext,
        lines: ScriptLines,
        start: int,
        end: int,
    ) -> int:
        """Execute lines[start:end].

        Per-line errors are reported and execution continues with the next
        line. An unterminated block aborts the rest of this range. ExitError
        and ExecutionLimitError propagate to the top-level run.
        """
        index = start
        while index < end:
            ctx.check_cancelled()
            line = classify_line(lines[index])
            line_number = index + 1
            index += 1

            if line.kind in (LineKind.COMMENT, LineKind.CONTROL_KEYWORD):
                continue

            try:
                if line.kind == LineKind.ASSIGNMENT:
                    self._assign(ctx, line)
                elif line.kind in _BLOCK_HANDLERS:
                    handler = _BLOCK_HANDLERS[line.kind]
                    index = await handler(ctx, lines, index - 1, end, line)
                else:
                    await self._execute_command(ctx, line)
            except ExitError:
                raise
            except ExecutionLimitError as e:
                if e.line is None:
                    e.line = line_number
                raise
            except UnterminatedBlockError as e:
                ctx.stderr.write(f"Error: {e.message}\n")
                ctx.state.last_exit_code = 1
                return ctx.state.last_exit_code
            except Exception as e:
                log.exception("Error executing script line %d: %s", line_number, line.text)
                ctx.stderr.write(f"Error on line {line_number}: {e}\n")
                ctx.state.last_exit_code = 1

        return ctx.state.last_exit_code

    def _assign(self, ctx: ScriptContext, line: ClassifiedLine) -> None:
        """Store an assignment, expanding variables in its value."""
        value = expand_variables(line.value or "", ctx.environment(), ctx.state.variables)
        ctx.state.variables[line.name] = value

    async def _execute_command(self, ctx: ScriptContext, line: ClassifiedLine) -> None:
        """Expand a command line and dispatch it to the host shell."""
        command_line = expand_variables(line.text, ctx.environment(), ctx.state.variables)
        exit_code = await self._host.execute_command(command_line, ctx.cancel)
        ctx.state.last_exit_code = exit_code

        if _is_exit(command_line):
            code = _parse_exit_code(command_line)
            if code is not None:
                ctx.state.last_exit_code = code
            raise ExitError(ctx.state.last_exit_code)
