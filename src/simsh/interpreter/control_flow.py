"""Control Flow Execution.

Handles the block constructs of the script language:
- if / else / fi
- for <var> in <items> / done
- while <condition> / done

Each handler receives the classified header line and its index, runs the
selected body through ``ctx.execute_block`` and returns the index of the
line after the block.
"""

import asyncio
from typing import TYPE_CHECKING

from .conditionals import evaluate_condition
from .errors import ExecutionLimitError, UnterminatedBlockError
from .expansion import expand_variables
from .lines import ClassifiedLine, ScriptLines
from .scanner import LOOP_KEYWORDS, find_block_end, find_if_bounds, NOT_FOUND

if TYPE_CHECKING:
    from .types import ScriptContext


async def _next_iteration(ctx: "ScriptContext", kind: str, iterations: int) -> None:
    """Loop iteration boundary: cancellation, limits and a scheduler yield."""
    ctx.check_cancelled()
    max_iterations = ctx.limits.max_loop_iterations
    if max_iterations is not None and iterations > max_iterations:
        raise ExecutionLimitError(
            f"{kind} loop: too many iterations ({max_iterations})",
            "iterations",
        )
    # yield point for Task.cancel(), even when the body never suspends
    await asyncio.sleep(0)


async def execute_if(
    ctx: "ScriptContext",
    lines: ScriptLines,
    index: int,
    end: int,
    line: ClassifiedLine,
) -> int:
    """Execute an if statement."""
    bounds = find_if_bounds(lines, index, end)
    if not bounds.found:
        raise UnterminatedBlockError("if", "fi")

    if await evaluate_condition(ctx, line.condition or ""):
        body_end = bounds.else_index if bounds.has_else else bounds.fi_index
        await ctx.execute_block(lines, index + 1, body_end)
    elif bounds.has_else:
        await ctx.execute_block(lines, bounds.else_index + 1, bounds.fi_index)

    return bounds.fi_index + 1


async def execute_for(
    ctx: "ScriptContext",
    lines: ScriptLines,
    index: int,
    end: int,
    line: ClassifiedLine,
) -> int:
    """Execute a for loop."""
    if line.name is None:
        ctx.stderr.write("Error: Invalid for loop syntax\n")
        return index + 1

    items = expand_variables(line.value or "", ctx.environment(), ctx.state.variables)
    words = items.split()

    done_index = find_block_end(lines, index, LOOP_KEYWORDS, "done", end)
    if done_index == NOT_FOUND:
        raise UnterminatedBlockError("for", "done")

    iterations = 0
    for word in words:
        iterations += 1
        await _next_iteration(ctx, "for", iterations)
        ctx.state.variables[line.name] = word
        await ctx.execute_block(lines, index + 1, done_index)

    return done_index + 1


async def execute_while(
    ctx: "ScriptContext",
    lines: ScriptLines,
    index: int,
    end: int,
    line: ClassifiedLine,
) -> int:
    """Execute a while loop."""
    done_index = find_block_end(lines, index, LOOP_KEYWORDS, "done", end)
    if done_index == NOT_FOUND:
        raise UnterminatedBlockError("while", "done")

    iterations = 0
    while True:
        iterations += 1
        await _next_iteration(ctx, "while", iterations)
        if not await evaluate_condition(ctx, line.condition or ""):
            break
        await ctx.execute_block(lines, index + 1, done_index)

    return done_index + 1
