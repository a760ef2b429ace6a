"""Block scanning.

Locates the terminator of an if/for/while block, honouring nested blocks
of the same family. Scanning is bounded by ``end`` so a block never
matches a terminator outside the line range it is executed in.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .lines import ScriptLines

NOT_FOUND = -1


@dataclass(frozen=True)
class IfBounds:
    """Positions of the `else` and `fi` lines of an if block."""

    else_index: int = NOT_FOUND
    fi_index: int = NOT_FOUND

    @property
    def found(self) -> bool:
        return self.fi_index != NOT_FOUND

    @property
    def has_else(self) -> bool:
        return self.else_index != NOT_FOUND


def find_if_bounds(lines: ScriptLines, start: int, end: Optional[int] = None) -> IfBounds:
    """Find the matching `else` and `fi` for the `if` at lines[start]."""
    if end is None:
        end = len(lines)

    nest_level = 0
    else_index = NOT_FOUND
    for index in range(start + 1, end):
        line = lines[index].strip()
        if line.startswith("if "):
            nest_level += 1
        elif line == "fi":
            if nest_level == 0:
                return IfBounds(else_index=else_index, fi_index=index)
            nest_level -= 1
        elif line == "else" and nest_level == 0:
            else_index = index

    return IfBounds(else_index=else_index)


LOOP_KEYWORDS = ("for", "while")
"""Loop openers; both close with `done` and nest with each other."""


def find_block_end(
    lines: ScriptLines,
    start: int,
    start_keywords: Union[str, Sequence[str]],
    end_keyword: str,
    end: Optional[int] = None,
) -> int:
    """Find the terminator of the block opened at lines[start].

    Lines starting with one of ``start_keywords`` followed by a space open
    a nested block, lines equal to ``end_keyword`` close one. Returns
    NOT_FOUND if the block is never closed.
    """
    if end is None:
        end = len(lines)
    if isinstance(start_keywords, str):
        start_keywords = (start_keywords,)

    openers = tuple(keyword + " " for keyword in start_keywords)
    nest_level = 0
    for index in range(start + 1, end):
        line = lines[index].strip()
        if line.startswith(openers):
            nest_level += 1
        elif line == end_keyword:
            if nest_level == 0:
                return index
            nest_level -= 1
    return NOT_FOUND
