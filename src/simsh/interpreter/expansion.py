"""Variable expansion.

Replaces $NAME and ${NAME} references in a line of text:
- $NAME where NAME is an identifier, a single digit, '#' or '@'
- ${NAME} where NAME is anything up to the closing brace

Names are looked up in the host environment first, then in the script
variables. Unknown names are left as written. Expansion is a single pass,
so substituted values are never expanded again.
"""

import re
from typing import Mapping, Optional

_VARIABLE_RE = re.compile(
    r"\$(?:\{(?P<braced>[^}]+)\}|(?P<name>[A-Za-z_][A-Za-z0-9_]*|[0-9#@]))"
)


def lookup_variable(
    name: str,
    env: Mapping[str, str],
    variables: Mapping[str, str],
) -> Optional[str]:
    """Resolve a name against the environment, then script variables."""
    if name in env:
        return env[name]
    if name in variables:
        return variables[name]
    return None


def expand_variables(
    text: str,
    env: Mapping[str, str],
    variables: Mapping[str, str],
) -> str:
    """Expand $NAME / ${NAME} references in text."""
    if "$" not in text:
        return text

    def _replace(match: re.Match) -> str:
        name = match.group("braced") or match.group("name")
        value = lookup_variable(name, env, variables)
        if value is None:
            return match.group(0)
        return value

    return _VARIABLE_RE.sub(_replace, text)
