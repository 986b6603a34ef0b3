"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum

# A declared command: bound, zero-argument, ends in a navigation
Operation = Callable[[], Awaitable[None] | None]

# Maps a session identifier to the CSRF token embedded in forms
TokenDeriver = Callable[[str], str]

# View ids, actions and commands may be plain strings or str-valued enums
Name = str | Enum


def name_of(value: Name) -> str:
    """Return the string behind a name given as a str or an Enum member."""
    if isinstance(value, Enum):
        return str(value.value)
    return value
