"""Typed scope keys, closed key sets and well-known request parameter names."""

from __future__ import annotations

import types
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Generic,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

T = TypeVar("T")


def _matches(value: object, expected: Any) -> bool:
    if expected is Any:
        return True
    if expected is None or expected is type(None):
        return value is None
    origin = get_origin(expected)
    if origin is Union or origin is types.UnionType:
        return any(_matches(value, member) for member in get_args(expected))
    if origin is Literal:
        return value in get_args(expected)
    return isinstance(value, origin or expected)


class ScopeKind(Enum):
    """The three nested state lifetimes."""

    REQUEST = "request"
    SESSION = "session"
    PROCESS = "process"


class Param(str, Enum):
    """Request parameters consumed by the dispatch layer."""

    ACTION = "action"
    COMMAND = "command"
    TOKEN = "_token"
    PAGE = "page"


class View(str, Enum):
    """Views rendered by the dispatch layer itself."""

    ERROR_UNKNOWN = "error/unknown"


@dataclass(frozen=True)
class ScopeKey(Generic[T]):
    """Typed key naming one slot in a scope of a given kind."""

    name: str
    value_type: type[T]
    kind: ScopeKind

    def accepts(self, value: object) -> bool:
        """Check *value* against the declared type (generics by their origin)."""
        return _matches(value, self.value_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.kind.value})"


def RequestKey(name: str, value_type: type[T]) -> ScopeKey[T]:  # noqa: N802
    return ScopeKey(name, value_type, ScopeKind.REQUEST)


def SessionKey(name: str, value_type: type[T]) -> ScopeKey[T]:  # noqa: N802
    return ScopeKey(name, value_type, ScopeKind.SESSION)


def ProcessKey(name: str, value_type: type[T]) -> ScopeKey[T]:  # noqa: N802
    return ScopeKey(name, value_type, ScopeKind.PROCESS)


class KeySet:
    """Closed set of keys for one scope kind.

    Subclasses declare keys as class attributes::

        class SessionKeys(KeySet):
            LOGIN_USER = SessionKey("login_user", dict)
            FLASH = SessionKey("flash", str)

    Duplicate key names or keys of mixed kinds are rejected when the
    subclass is created.
    """

    kind: ClassVar[ScopeKind | None] = None
    _keys: ClassVar[dict[str, ScopeKey[Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        keys: dict[str, ScopeKey[Any]] = dict(cls._keys)
        kind = cls.kind
        for attr, value in vars(cls).items():
            if not isinstance(value, ScopeKey):
                continue
            if kind is None:
                kind = value.kind
            elif value.kind is not kind:
                raise TypeError(
                    f"{cls.__name__}.{attr} is a {value.kind.value} key"
                    f" in a {kind.value} key set"
                )
            if value.name in keys:
                raise TypeError(
                    f"{cls.__name__} declares key name {value.name!r} twice"
                )
            keys[value.name] = value
        cls.kind = kind
        cls._keys = keys

    @classmethod
    def keys(cls) -> tuple[ScopeKey[Any], ...]:
        return tuple(cls._keys.values())

    @classmethod
    def by_name(cls, name: str) -> ScopeKey[Any] | None:
        return cls._keys.get(name)
