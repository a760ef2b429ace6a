"""Script lines and line classification.

A script is handled as an immutable sequence of lines. Each line is
classified once into a tagged kind so that matching logic lives in one
place and the executor only dispatches on the kind.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ScriptLines = tuple[str, ...]

CONTROL_KEYWORDS = frozenset({"fi", "else", "done"})

_ASSIGNMENT_RE = re.compile(r"^\s*(\w+)\s*=\s*(.*)$", re.DOTALL)
_FOR_RE = re.compile(r"^for\s+(\w+)\s+in\s+(.+)$")


class LineKind(Enum):
    """Kind of a script line, in classification priority order."""

    COMMENT = "comment"
    ASSIGNMENT = "assignment"
    IF = "if"
    FOR = "for"
    WHILE = "while"
    CONTROL_KEYWORD = "control_keyword"
    COMMAND = "command"


@dataclass(frozen=True)
class ClassifiedLine:
    """A trimmed script line together with its kind and parsed parts."""

    kind: LineKind
    text: str
    name: Optional[str] = None
    """Assigned variable (ASSIGNMENT) or loop variable (FOR)."""

    value: Optional[str] = None
    """Raw assignment value (ASSIGNMENT) or item list (FOR)."""

    condition: Optional[str] = None
    """Condition string of IF / WHILE lines."""


def split_lines(content: str) -> ScriptLines:
    """Split script text on newlines, tolerating CRLF line endings."""
    return tuple(line.rstrip("\r") for line in content.split("\n"))


def is_comment(line: str) -> bool:
    """Blank lines and lines starting with '#' after trimming."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def parse_assignment(line: str) -> Optional[tuple[str, str]]:
    """Split an assignment into name and value.

    The value is trimmed and one pair of matching surrounding quotes is
    removed. Variables are not expanded here.
    """
    match = _ASSIGNMENT_RE.match(line)
    if match is None:
        return None
    name = match.group(1)
    value = match.group(2).strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return name, value


def parse_for_header(line: str) -> Optional[tuple[str, str]]:
    """Parse `for <var> in <items>` into (var, items)."""
    match = _FOR_RE.match(line.strip())
    if match is None:
        return None
    return match.group(1), match.group(2)


def classify_line(raw: str) -> ClassifiedLine:
    """Classify a raw script line.

    Priority: comment/blank, assignment, `if `, `for `, `while `, bare
    control keyword, plain command.
    """
    line = raw.strip()

    if is_comment(line):
        return ClassifiedLine(LineKind.COMMENT, line)

    assignment = parse_assignment(line)
    if assignment is not None:
        name, value = assignment
        return ClassifiedLine(LineKind.ASSIGNMENT, line, name=name, value=value)

    if line.startswith("if "):
        return ClassifiedLine(LineKind.IF, line, condition=line[3:].strip())

    if line.startswith("for "):
        header = parse_for_header(line)
        if header is None:
            return ClassifiedLine(LineKind.FOR, line)
        var, items = header
        return ClassifiedLine(LineKind.FOR, line, name=var, value=items)

    if line.startswith("while "):
        return ClassifiedLine(LineKind.WHILE, line, condition=line[6:].strip())

    if line in CONTROL_KEYWORDS:
        return ClassifiedLine(LineKind.CONTROL_KEYWORD, line)

    return ClassifiedLine(LineKind.COMMAND, line)
