"""Main ScriptShell class - the primary API for simsh.

Example usage:
    from simsh import ScriptShell

    # Synchronous usage (for REPL, scripts)
    shell = ScriptShell()
    result = shell.run("for x in a b\\necho $x\\ndone")
    print(result.stdout)  # "a\\nb\\n"

    # Async usage (for async applications)
    shell = ScriptShell()
    result = await shell.exec("echo $1", args=["hello"])
    print(result.stdout)  # "hello\\n"

    # Scripts stored in the virtual file system
    shell = ScriptShell(files={"/home/user/hello.sh": "echo hi\\n"})
    result = shell.run_file("/home/user/hello.sh")
"""

import asyncio
import io
from typing import Optional, Sequence

import nest_asyncio  # type: ignore[import-untyped]

from .fs import MemoryFs
from .host import CommandHost, create_command_registry
from .interpreter import ScriptInterpreter
from .types import CancellationToken, Command, ExecResult, ScriptLimits, UserSession


class ScriptShell:
    """High-level script runner.

    Wires a ScriptInterpreter to a CommandHost and an in-memory file system
    and collects everything written to stdout/stderr into an ExecResult.
    """

    def __init__(
        self,
        *,
        files: Optional[dict[str, str]] = None,
        env: Optional[dict[str, str]] = None,
        user: Optional[str] = "user",
        limits: Optional[ScriptLimits] = None,
        commands: Optional[dict[str, Command]] = None,
    ):
        """Initialize the shell.

        Args:
            files: Initial files of the in-memory file system.
            env: Additional host environment variables.
            user: Name of the logged-in user (None for no active session).
            limits: Execution limits for script runs.
            commands: Custom command registry. If not provided, uses built-in commands.
        """
        self._fs = MemoryFs(initial_files=files or {})
        self._limits = limits or ScriptLimits()
        self._commands = commands or create_command_registry()

        default_env = {
            "HOME": f"/home/{user}" if user else "/",
            "USER": user or "",
            "SHELL": "/bin/sh",
            "PATH": "/usr/local/bin:/usr/bin:/bin",
        }
        if env:
            default_env.update(env)
        self._env = default_env

        self._session = UserSession(user=user, home=default_env["HOME"]) if user else None

    @property
    def fs(self) -> MemoryFs:
        """Get the filesystem."""
        return self._fs

    @property
    def env(self) -> dict[str, str]:
        """Get the host environment variables."""
        return self._env

    def _create(self) -> tuple[ScriptInterpreter, io.StringIO, io.StringIO]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        host = CommandHost(
            self._commands,
            stdout,
            stderr,
            env=self._env,
            fs=self._fs,
            session=self._session,
            limits=self._limits,
        )
        interpreter = ScriptInterpreter(host, self._fs, self._limits)
        return interpreter, stdout, stderr

    async def exec(
        self,
        script: str,
        *,
        args: Sequence[str] = (),
        cancel: Optional[CancellationToken] = None,
    ) -> ExecResult:
        """Execute script text.

        Args:
            script: The script to execute.
            args: Positional arguments ($1..$N).
            cancel: Optional cancellation token.

        Returns:
            ExecResult with stdout, stderr, exit_code and the host env.
        """
        interpreter, stdout, stderr = self._create()
        exit_code = await interpreter.execute_script_content(
            script, list(args), stdout, stderr, cancel
        )
        return ExecResult(
            stdout=stdout.getvalue(),
            stderr=stderr.getvalue(),
            exit_code=exit_code,
            env=dict(self._env),
        )

    async def exec_file(
        self,
        path: str,
        *,
        args: Sequence[str] = (),
        cancel: Optional[CancellationToken] = None,
    ) -> ExecResult:
        """Execute a script stored in the file system."""
        interpreter, stdout, stderr = self._create()
        exit_code = await interpreter.execute_script_file(
            path, list(args), stdout, stderr, cancel
        )
        return ExecResult(
            stdout=stdout.getvalue(),
            stderr=stderr.getvalue(),
            exit_code=exit_code,
            env=dict(self._env),
        )

    def run(self, script: str, *, args: Sequence[str] = ()) -> ExecResult:
        """Execute script text synchronously.

        This is a convenience wrapper around exec() that works in any context,
        including Jupyter notebooks and async frameworks.
        """
        _allow_nested_loop()
        return asyncio.run(self.exec(script, args=args))

    def run_file(self, path: str, *, args: Sequence[str] = ()) -> ExecResult:
        """Execute a script file synchronously."""
        _allow_nested_loop()
        return asyncio.run(self.exec_file(path, args=args))


def _allow_nested_loop() -> None:
    try:
        asyncio.get_running_loop()
        # We're in an existing event loop (Jupyter, async framework, etc.)
        # Apply nest_asyncio to allow nested event loops
        nest_asyncio.apply()
    except RuntimeError:
        # No running event loop, asyncio.run() will work fine
        pass
