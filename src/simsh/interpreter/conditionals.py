"""Condition evaluation for if/while.

Two forms are supported:

Bracket test, evaluated locally:
  [ S1 = S2 ]     True if strings are equal (also ==)
  [ S1 != S2 ]    True if strings are not equal
  [ N1 -eq N2 ]   Integer comparison (-eq -ne -lt -le -gt -ge);
                  false if either side is not an integer

Any other token count or operator is false.

Anything else is run as a command through the host shell; the condition
is true if the command exits with status 0. A command that raises is
treated as false.
"""

import logging
import operator
from typing import TYPE_CHECKING, Callable, Optional

from .expansion import expand_variables

if TYPE_CHECKING:
    from .types import ScriptContext

log = logging.getLogger(__name__)


_STRING_OPS: dict[str, Callable[[str, str], bool]] = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
}

_NUMERIC_OPS: dict[str, Callable[[int, int], bool]] = {
    "-eq": operator.eq,
    "-ne": operator.ne,
    "-lt": operator.lt,
    "-le": operator.le,
    "-gt": operator.gt,
    "-ge": operator.ge,
}


def _parse_int(value: str) -> Optional[int]:
    # int() accepts "1_000"; test operands do not
    if "_" in value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def is_bracket_test(condition: str) -> bool:
    return condition.startswith("[") and condition.endswith("]")


def evaluate_test_expression(expression: str) -> bool:
    """Evaluate the inside of a `[ ... ]` test: `left op right`."""
    parts = expression.split()
    if len(parts) != 3:
        return False

    left, op, right = parts
    if op in _STRING_OPS:
        return _STRING_OPS[op](left, right)

    if op in _NUMERIC_OPS:
        left_num = _parse_int(left)
        right_num = _parse_int(right)
        if left_num is None or right_num is None:
            return False
        return _NUMERIC_OPS[op](left_num, right_num)

    return False


async def evaluate_condition(ctx: "ScriptContext", condition: str) -> bool:
    """Expand and evaluate an if/while condition."""
    condition = expand_variables(condition, ctx.environment(), ctx.state.variables)

    if is_bracket_test(condition):
        return evaluate_test_expression(condition[1:-1].strip())

    try:
        exit_code = await ctx.host.execute_command(condition, ctx.cancel)
    except Exception as e:
        log.debug("condition command %r failed: %s", condition, e)
        return False
    return exit_code == 0
