"""Built-in host commands.

Each command follows the same protocol: a ``name`` attribute and an async
``execute(args, ctx)`` returning an ExecResult.
"""

from ..interpreter.conditionals import evaluate_test_expression
from ..types import Command, CommandContext, ExecResult


class EchoCommand:
    """The echo command."""

    name = "echo"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        newline = True
        if args and args[0] == "-n":
            newline = False
            args = args[1:]
        output = " ".join(args)
        if newline:
            output += "\n"
        return ExecResult(stdout=output, stderr="", exit_code=0)


class TrueCommand:
    """The true command."""

    name = "true"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        return ExecResult(exit_code=0)


class FalseCommand:
    """The false command."""

    name = "false"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        return ExecResult(exit_code=1)


class ExitCommand:
    """The exit command.

    Only reports the requested status; the script interpreter is what
    stops running lines.
    """

    name = "exit"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        if not args:
            return ExecResult(exit_code=0)
        try:
            return ExecResult(exit_code=int(args[0]))
        except ValueError:
            return ExecResult(
                stderr=f"exit: {args[0]}: numeric argument required\n",
                exit_code=2,
            )


class TestCommand:
    """The test command: `test left op right`."""

    name = "test"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        if len(args) != 3:
            return ExecResult(
                stderr="test: expected `left op right'\n",
                exit_code=2,
            )
        return ExecResult(exit_code=0 if evaluate_test_expression(" ".join(args)) else 1)


class ExportCommand:
    """The export command - set host environment variables."""

    name = "export"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        if not args:
            lines = [f"export {k}={v}" for k, v in sorted(ctx.env.items())]
            return ExecResult(stdout="".join(line + "\n" for line in lines))

        exit_code = 0
        stderr = ""
        for arg in args:
            name, sep, value = arg.partition("=")
            if not name.isidentifier():
                stderr += f"export: `{arg}': not a valid identifier\n"
                exit_code = 1
                continue
            if sep:
                ctx.env[name] = value
            else:
                ctx.env.setdefault(name, "")
        return ExecResult(stderr=stderr, exit_code=exit_code)


class PrintenvCommand:
    """The printenv command - print environment variables."""

    name = "printenv"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        if not args:
            lines = [f"{k}={v}" for k, v in sorted(ctx.env.items())]
            return ExecResult(stdout="".join(line + "\n" for line in lines))

        output = ""
        exit_code = 0
        for name in args:
            if name in ctx.env:
                output += ctx.env[name] + "\n"
            else:
                exit_code = 1
        return ExecResult(stdout=output, exit_code=exit_code)


class CatCommand:
    """The cat command - print files from the host file system."""

    name = "cat"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        session = ctx.host.current_session
        user = session.user if session else None
        stdout = ""
        stderr = ""
        exit_code = 0
        for path in args:
            try:
                stdout += await ctx.host.fs.read_text(path, user)
            except (FileNotFoundError, PermissionError) as e:
                stderr += f"cat: {e}\n"
                exit_code = 1
        return ExecResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


class ShCommand:
    """The sh command - run a script file or string through the interpreter.

    Usage: sh SCRIPT_FILE [ARGUMENTS...]
           sh -c SCRIPT [ARGUMENTS...]
    """

    name = "sh"

    async def execute(self, args: list[str], ctx: CommandContext) -> ExecResult:
        from ..interpreter import ScriptInterpreter

        if not args:
            return ExecResult(stderr="sh: missing script\n", exit_code=2)

        host = ctx.host
        interpreter = ScriptInterpreter(host, host.fs, host.limits)
        if args[0] == "-c":
            if len(args) < 2:
                return ExecResult(stderr="sh: -c: option requires an argument\n", exit_code=2)
            exit_code = await interpreter.execute_script_content(
                args[1], args[2:], host.stdout, host.stderr, ctx.cancel
            )
        else:
            exit_code = await interpreter.execute_script_file(
                args[0], args[1:], host.stdout, host.stderr, ctx.cancel
            )
        return ExecResult(exit_code=exit_code)


def create_command_registry() -> dict[str, Command]:
    """Create the default host command registry."""
    commands: list[Command] = [
        EchoCommand(),
        TrueCommand(),
        FalseCommand(),
        ExitCommand(),
        TestCommand(),
        ExportCommand(),
        PrintenvCommand(),
        CatCommand(),
        ShCommand(),
    ]
    return {command.name: command for command in commands}
