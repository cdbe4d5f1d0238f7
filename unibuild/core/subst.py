# SPDX-License-Identifier: MIT
"""Variable substitution for action command templates.

Supported syntax:
- Simple variables: $VAR or ${VAR}
- Escaped dollars: $$ becomes literal $

Command template forms:
- String: "clang -arch $arch -o $out $in" (auto-tokenized on whitespace)
- List: ["clang", "-arch", "$arch", "-o", "$out", "$in"] (explicit tokens)

A list-valued variable that makes up a whole token expands to one token
per element; embedding a list variable inside a larger token is an error.
Values are substituted once and never re-expanded.
"""

from __future__ import annotations

import re
import shlex
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from unibuild.core.errors import MissingVariableError, SubstitutionError

if TYPE_CHECKING:
    from unibuild.util.source_location import SourceLocation

# Match: $$, ${var}, $var
_TOKEN_PATTERN = re.compile(
    r"(\$\$)"  # Group 1: Escaped dollar
    r"|"
    r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)\}"  # Group 2: Braced ${var}
    r"|"
    r"\$([a-zA-Z_][a-zA-Z0-9_]*)"  # Group 3: Simple $var
)

_WHOLE_VAR = re.compile(r"\$\{([a-zA-Z_][a-zA-Z0-9_]*)\}|\$([a-zA-Z_][a-zA-Z0-9_]*)")


def _lookup(
    name: str,
    variables: Mapping[str, Any],
    location: SourceLocation | None,
) -> Any:
    if name not in variables:
        raise MissingVariableError(name, location)
    return variables[name]


def _expand_token(
    token: str,
    variables: Mapping[str, Any],
    location: SourceLocation | None,
) -> list[str]:
    whole = _WHOLE_VAR.fullmatch(token)
    if whole:
        value = _lookup(whole.group(1) or whole.group(2), variables, location)
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]

    def replace_match(match: re.Match[str]) -> str:
        if match.group(1):
            return "$"
        name = match.group(2) or match.group(3)
        value = _lookup(name, variables, location)
        if isinstance(value, (list, tuple)):
            raise SubstitutionError(
                f"List variable ${name} cannot be embedded in '{token}'. "
                f"Make it the entire token.",
                location,
            )
        return str(value)

    return [_TOKEN_PATTERN.sub(replace_match, token)]


def subst(
    template: str | Sequence[str],
    variables: Mapping[str, Any],
    *,
    location: SourceLocation | None = None,
) -> list[str]:
    """Expand variables in a command template.

    Args:
        template: String (split on whitespace) or list of tokens.
        variables: Values to substitute.
        location: Source location for error messages.

    Returns:
        The expanded argument list.

    Raises:
        MissingVariableError: If the template references an undefined name.
        SubstitutionError: If a list variable is embedded in a token.
    """
    tokens = template.split() if isinstance(template, str) else list(template)
    result: list[str] = []
    for token in tokens:
        result.extend(_expand_token(token, variables, location))
    return result


def to_shell_command(tokens: Sequence[str]) -> str:
    """Join expanded tokens into a POSIX shell command line."""
    return shlex.join(tokens)
