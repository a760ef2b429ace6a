"""Tests for variable assignment lines."""

import pytest
from simsh import ScriptShell


class TestAssignment:
    """Test name = value."""

    @pytest.mark.asyncio
    async def test_simple_assignment(self):
        shell = ScriptShell()
        result = await shell.exec("VAR=value\necho $VAR")
        assert result.stdout == "value\n"
        assert result.exit_code == 0

    @pytest.mark.asyncio
    async def test_spaces_around_equals(self):
        shell = ScriptShell()
        result = await shell.exec("VAR   =   value\necho $VAR")
        assert result.stdout == "value\n"

    @pytest.mark.asyncio
    async def test_double_quotes_stripped(self):
        shell = ScriptShell()
        result = await shell.exec('msg = "hello   world"\necho "$msg"')
        assert result.stdout == "hello   world\n"

    @pytest.mark.asyncio
    async def test_single_quoted_value_still_expanded(self):
        shell = ScriptShell()
        result = await shell.exec("who = me\nmsg = 'hi $who'\necho $msg")
        assert result.stdout == "hi me\n"

    @pytest.mark.asyncio
    async def test_value_built_from_variables(self):
        shell = ScriptShell()
        result = await shell.exec('a = foo\nb = bar\nc = "${a}-${b}"\necho $c')
        assert result.stdout == "foo-bar\n"

    @pytest.mark.asyncio
    async def test_reassignment(self):
        shell = ScriptShell()
        result = await shell.exec("x = 1\nx = 2\necho $x")
        assert result.stdout == "2\n"

    @pytest.mark.asyncio
    async def test_assignment_inside_loop_visible_after(self):
        shell = ScriptShell()
        result = await shell.exec('''
seen = none
for item in a b
    seen = $item
done
echo $seen
''')
        assert result.stdout == "b\n"

    @pytest.mark.asyncio
    async def test_assignment_is_not_a_command(self):
        shell = ScriptShell()
        result = await shell.exec("x = 1")
        assert result.stdout == ""
        assert result.stderr == ""
        assert result.exit_code == 0
