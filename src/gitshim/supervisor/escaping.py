"""Argument escaping for command-line rendering.

Tokens containing whitespace are wrapped in double quotes so a multi-word
argument (a commit message, a path with spaces) reads as one logical token
in the rendered command line.  Other tokens, including pre-parsed integers,
pass through unchanged.
"""
from __future__ import annotations

import re
from collections.abc import Iterable

from gitshim.core.types import Token

_WHITESPACE_RE = re.compile(r"\s")


def escape_argument(token: Token) -> Token:
    """Quote *token* if it is a string containing whitespace."""
    if isinstance(token, str) and _WHITESPACE_RE.search(token):
        return f'"{token}"'
    return token


def escape_arguments(args: Iterable[Token]) -> list[Token]:
    return [escape_argument(token) for token in args]


def format_command_line(executable: str, args: Iterable[Token]) -> str:
    """Render ``executable args...`` with whitespace-bearing tokens quoted."""
    return " ".join(str(part) for part in [executable, *escape_arguments(args)])
