import io
from typing import Optional

import pytest

from simsh import CancellationToken, MemoryFs, ScriptInterpreter, UserSession


class RecordingHost:
    """Host shell bridge that records every command it is asked to run.

    - ``echo TEXT`` writes TEXT to stdout
    - ``false`` exits 1, ``status N`` exits N
    - ``boom ...`` raises RuntimeError
    - anything else exits 0
    """

    def __init__(self, env: Optional[dict[str, str]] = None, user: Optional[str] = "alice"):
        self.env = dict(env or {})
        self.session = UserSession(user=user) if user else None
        self.commands: list[str] = []
        self.stdout = io.StringIO()

    @property
    def environment_variables(self):
        return self.env

    @property
    def current_session(self):
        return self.session

    async def execute_command(self, command_line: str, cancel: Optional[CancellationToken] = None) -> int:
        if cancel is not None:
            cancel.raise_if_cancelled()
        self.commands.append(command_line)
        if command_line.startswith("boom"):
            raise RuntimeError("boom failed")
        if command_line.startswith("echo "):
            self.stdout.write(command_line[5:] + "\n")
            return 0
        if command_line == "false":
            return 1
        if command_line.startswith("status "):
            return int(command_line.split()[1])
        return 0


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def fs():
    return MemoryFs()


@pytest.fixture
def interpreter(host, fs):
    return ScriptInterpreter(host, fs)


@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture
def stderr():
    return io.StringIO()
