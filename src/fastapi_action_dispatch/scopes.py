"""Scope store — typed get/put/remove over request, session and process state."""

from __future__ import annotations

import secrets
from collections.abc import Mapping, MutableMapping
from typing import Any, ClassVar, TypeVar, overload

from fastapi_action_dispatch.exceptions import ScopeKindError, ScopeTypeError
from fastapi_action_dispatch.keys import ScopeKey, ScopeKind

T = TypeVar("T")


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class Scope:
    """Key-value store for one scope kind. Values are checked against key types."""

    kind: ClassVar[ScopeKind]

    def __init__(self, data: MutableMapping[str, Any] | None = None) -> None:
        self._data: MutableMapping[str, Any] = data if data is not None else {}

    @overload
    def get(self, key: ScopeKey[T]) -> T | None: ...
    @overload
    def get(self, key: ScopeKey[T], default: T) -> T: ...

    def get(self, key: ScopeKey[T], default: T | None = None) -> T | None:
        self._check_kind(key)
        value = self._data.get(key.name)
        if value is None:
            return default
        if not key.accepts(value):
            raise ScopeTypeError(
                f"{self.kind.value} slot {key.name!r} holds"
                f" {type(value).__name__}, expected {key.value_type!r}"
            )
        return value  # type: ignore[no-any-return]

    def put(self, key: ScopeKey[T], value: T | None) -> None:
        """Store *value* under *key*. Storing None empties the slot."""
        self._check_kind(key)
        if value is None:
            self._data.pop(key.name, None)
            return
        if not key.accepts(value):
            raise ScopeTypeError(
                f"cannot store {type(value).__name__} in {self.kind.value}"
                f" slot {key.name!r}, expected {key.value_type!r}"
            )
        self._data[key.name] = value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, ScopeKey) or key.kind is not self.kind:
            return False
        return key.name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def _check_kind(self, key: ScopeKey[Any]) -> None:
        if not isinstance(key, ScopeKey):
            raise ScopeKindError(f"expected a ScopeKey, got {type(key).__name__}")
        if key.kind is not self.kind:
            raise ScopeKindError(
                f"{key!r} is a {key.kind.value} key, used on the {self.kind.value} scope"
            )


class RequestScope(Scope):
    """State for one inbound request; exposed to the rendered view."""

    kind = ScopeKind.REQUEST


class SessionScope(Scope):
    """State tied to a session identifier.

    The identifier can be rotated (``rotate_id``) or the whole session
    discarded (``invalidate``); either way the CSRF token derived from it
    changes. ``SessionManager.commit`` persists the record and updates the
    cookie.
    """

    kind = ScopeKind.SESSION

    def __init__(
        self,
        session_id: str,
        data: MutableMapping[str, Any] | None = None,
        *,
        is_new: bool = False,
    ) -> None:
        super().__init__(data)
        self._id = session_id
        self._loaded_id: str | None = None if is_new else session_id
        self.is_new = is_new

    @property
    def id(self) -> str:
        return self._id

    @property
    def previous_id(self) -> str | None:
        """Identifier the record was loaded under, when it has since changed."""
        if self._loaded_id is not None and self._loaded_id != self._id:
            return self._loaded_id
        return None

    @property
    def id_changed(self) -> bool:
        return self.is_new or self._loaded_id != self._id

    def remove(self, key: ScopeKey[Any]) -> None:
        self._check_kind(key)
        self._data.pop(key.name, None)

    def clear(self) -> None:
        self._data.clear()

    def rotate_id(self) -> str:
        """Move the record to a fresh identifier, keeping its contents."""
        self._id = new_session_id()
        return self._id

    def invalidate(self) -> str:
        """Drop every slot and continue under a fresh identifier."""
        self.clear()
        return self.rotate_id()

    def record(self) -> dict[str, Any]:
        return dict(self._data)


class ProcessScope(Scope):
    """Application-wide state, populated at startup and injected into endpoints.

    Set-only: slots can be written, not removed.
    """

    kind = ScopeKind.PROCESS

    def __init__(self, initial: Mapping[ScopeKey[Any], Any] | None = None) -> None:
        super().__init__()
        for key, value in (initial or {}).items():
            self.put(key, value)

    def put(self, key: ScopeKey[T], value: T | None) -> None:
        if value is None:
            raise ScopeTypeError(f"process slot {key.name!r} cannot be emptied")
        super().put(key, value)
