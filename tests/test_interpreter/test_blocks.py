"""Tests for if/for/while execution in the interpreter."""

import asyncio

import pytest

from simsh import CancellationToken, ScriptInterpreter, ScriptLimits


async def run(interpreter, script, stdout, stderr, args=()):
    return await interpreter.execute_script_content(script, list(args), stdout, stderr)


class TestIf:
    """Test if/else/fi."""

    @pytest.mark.asyncio
    async def test_true_branch(self, interpreter, host, stdout, stderr):
        script = "if [ 5 -gt 3 ]\necho yes\nelse\necho no\nfi\necho after"
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo yes", "echo after"]

    @pytest.mark.asyncio
    async def test_false_branch(self, interpreter, host, stdout, stderr):
        script = "if [ foo = bar ]\necho yes\nelse\necho no\nfi"
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo no"]

    @pytest.mark.asyncio
    async def test_false_without_else(self, interpreter, host, stdout, stderr):
        script = "if [ 1 -eq 2 ]\necho yes\nfi\necho after"
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo after"]

    @pytest.mark.asyncio
    async def test_command_condition(self, interpreter, host, stdout, stderr):
        script = "if false\necho yes\nelse\necho no\nfi"
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["false", "echo no"]

    @pytest.mark.asyncio
    async def test_raising_condition_is_false(self, interpreter, host, stdout, stderr):
        script = "if boom\necho yes\nelse\necho no\nfi"
        code = await run(interpreter, script, stdout, stderr)
        assert host.commands == ["boom", "echo no"]
        assert stderr.getvalue() == ""
        assert code == 0

    @pytest.mark.asyncio
    async def test_condition_expanded(self, interpreter, host, stdout, stderr):
        script = 'if [ $1 = yes ]\necho matched\nfi'
        await run(interpreter, script, stdout, stderr, args=["yes"])
        assert host.commands == ["echo matched"]

    @pytest.mark.asyncio
    async def test_nested_if(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "if true",
            "  if [ a = a ]",
            "    echo inner1",
            "  fi",
            "  if [ a = b ]",
            "    echo skipped",
            "  else",
            "    echo inner2",
            "  fi",
            "  echo outer",
            "fi",
            "echo end",
        ])
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["true", "echo inner1", "echo inner2", "echo outer", "echo end"]

    @pytest.mark.asyncio
    async def test_inner_else_not_taken_by_outer(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "if [ 1 -eq 2 ]",
            "if true",
            "echo a",
            "else",
            "echo b",
            "fi",
            "fi",
            "echo end",
        ])
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo end"]

    @pytest.mark.asyncio
    async def test_block_exit_code_propagates(self, interpreter, host, stdout, stderr):
        code = await run(interpreter, "if true\nstatus 6\nfi", stdout, stderr)
        assert code == 6


class TestFor:
    """Test for loops."""

    @pytest.mark.asyncio
    async def test_iterates_items_in_order(self, interpreter, host, stdout, stderr):
        await run(interpreter, "for i in a b c\necho item $i\ndone", stdout, stderr)
        assert host.commands == ["echo item a", "echo item b", "echo item c"]

    @pytest.mark.asyncio
    async def test_items_expanded(self, interpreter, host, stdout, stderr):
        script = 'list = "x  y"\nfor v in $list $@\necho $v\ndone'
        await run(interpreter, script, stdout, stderr, args=["p", "q"])
        assert host.commands == ["echo x", "echo y", "echo p", "echo q"]

    @pytest.mark.asyncio
    async def test_unknown_variable_is_literal_item(self, interpreter, host, stdout, stderr):
        await run(interpreter, "for i in $empty_list_var_missing_xyz\necho $i\ndone", stdout, stderr)
        # the unknown variable is left as written, so it is the single item
        assert host.commands == ["echo $empty_list_var_missing_xyz"]

    @pytest.mark.asyncio
    async def test_empty_variable_gives_zero_iterations(self, interpreter, host, stdout, stderr):
        await run(interpreter, 'items = ""\nfor i in $items\necho $i\ndone\necho after', stdout, stderr)
        assert host.commands == ["echo after"]

    @pytest.mark.asyncio
    async def test_loop_variable_visible_after_loop(self, interpreter, host, stdout, stderr):
        await run(interpreter, "for i in 1 2\ndone\necho last $i", stdout, stderr)
        assert host.commands == ["echo last 2"]

    @pytest.mark.asyncio
    async def test_nested_for(self, interpreter, host, stdout, stderr):
        script = "for i in 1 2\nfor j in a b\necho $i$j\ndone\ndone"
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo 1a", "echo 1b", "echo 2a", "echo 2b"]

    @pytest.mark.asyncio
    async def test_while_nested_in_for(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "for i in 1 2",
            "n = 0",
            "while [ $n -lt 2 ]",
            "echo $i.$n",
            "n = 2",
            "done",
            "done",
            "echo end",
        ])
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo 1.0", "echo 2.0", "echo end"]

    @pytest.mark.asyncio
    async def test_if_inside_for(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "for i in a b c",
            "if [ $i != b ]",
            "echo $i",
            "fi",
            "done",
        ])
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo a", "echo c"]

    @pytest.mark.asyncio
    async def test_iteration_limit(self, host, fs, stdout, stderr):
        interpreter = ScriptInterpreter(host, fs, ScriptLimits(max_loop_iterations=2))
        code = await run(interpreter, "for i in a b c\necho $i\ndone", stdout, stderr)
        assert host.commands == ["echo a", "echo b"]
        assert "Error on line 1: for loop: too many iterations (2)" in stderr.getvalue()
        assert code == 1


class TestBlockDepth:
    """Test the nesting depth limit."""

    @pytest.mark.asyncio
    async def test_depth_limit_ends_run(self, host, fs, stdout, stderr):
        interpreter = ScriptInterpreter(host, fs, ScriptLimits(max_block_depth=1))
        script = "if true\nif true\necho deep\nfi\nfi\necho after"
        code = await run(interpreter, script, stdout, stderr)
        assert stderr.getvalue() == "Error on line 2: maximum block nesting depth exceeded (1)\n"
        assert host.commands == ["true", "true"]
        assert code == 1


class TestWhile:
    """Test while loops."""

    @pytest.mark.asyncio
    async def test_condition_change_ends_loop(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "state = go",
            "while [ $state = go ]",
            "echo tick",
            "state = stop",
            "done",
            "echo end",
        ])
        await run(interpreter, script, stdout, stderr)
        assert host.commands == ["echo tick", "echo end"]

    @pytest.mark.asyncio
    async def test_false_condition_never_runs_body(self, interpreter, host, stdout, stderr):
        await run(interpreter, "while false\necho body\ndone", stdout, stderr)
        assert host.commands == ["false"]

    @pytest.mark.asyncio
    async def test_exit_terminates_infinite_loop(self, interpreter, host, stdout, stderr):
        script = "\n".join([
            "count = 0",
            "while [ 0 -lt 1 ]",
            "for c in $count",
            "if [ $c -eq 3 ]",
            "exit 0",
            "fi",
            "done",
            "echo $count",
            "count = 3",
            "done",
        ])
        code = await run(interpreter, script, stdout, stderr)
        assert code == 0
        assert host.commands == ["echo 0", "exit 0"]

    @pytest.mark.asyncio
    async def test_cancellation_token_stops_infinite_loop(self, interpreter, host, stdout, stderr):
        cancel = CancellationToken()

        async def cancel_soon():
            while len(host.commands) < 5:
                await asyncio.sleep(0)
            cancel.cancel()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(asyncio.CancelledError):
            await interpreter.execute_script_content(
                "while true\necho spin\ndone", [], stdout, stderr, cancel
            )
        await canceller
        assert cancel.cancelled
        assert len(host.commands) >= 5

    @pytest.mark.asyncio
    async def test_task_cancel_stops_infinite_loop(self, interpreter, host, stdout, stderr):
        task = asyncio.create_task(
            interpreter.execute_script_content("while [ 1 = 1 ]\ndone", [], stdout, stderr)
        )
        for _ in range(10):
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
