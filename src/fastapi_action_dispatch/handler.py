"""ResourceHandler abstract base class and command lookup."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, TypeVar

from fastapi_action_dispatch import csrf, params
from fastapi_action_dispatch._types import Name, Operation
from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.keys import ScopeKey
from fastapi_action_dispatch.navigation import Navigator

T = TypeVar("T")


@dataclass(frozen=True)
class CommandNotFound:
    """Typed lookup miss; carries why the name did not resolve."""

    command: str | None
    reason: str


def _takes_no_arguments(operation: Any) -> bool:
    try:
        signature = inspect.signature(operation)
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not p.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


class ResourceHandler(ABC):
    """Base for per-resource handlers, one instance per request.

    Subclasses list their commands explicitly::

        class ReportHandler(ResourceHandler):
            def declare_commands(self):
                return {"index": self.index, "destroy": self.destroy}

            async def index(self) -> None:
                self.put_request_scope(Keys.REPORTS, await load_reports(self.page))
                self.forward(Views.REPORT_INDEX)

    The table is read once at construction and cannot change afterwards.
    """

    def __init__(self, ctx: RequestContext, navigator: Navigator) -> None:
        self.ctx = ctx
        self.navigator = navigator
        self._commands: Mapping[str, Operation] = MappingProxyType(
            dict(self.declare_commands())
        )

    @abstractmethod
    def declare_commands(self) -> Mapping[str, Operation]: ...

    @property
    def commands(self) -> Mapping[str, Operation]:
        return self._commands

    def lookup(self, command: str | None) -> Operation | CommandNotFound:
        if command is None:
            return CommandNotFound(None, "command parameter missing")
        if not command.strip():
            return CommandNotFound(command, "command parameter blank")
        operation = self._commands.get(command)
        if operation is None:
            return CommandNotFound(
                command, f"{type(self).__name__} declares no such command"
            )
        if not callable(operation):
            return CommandNotFound(command, "declared command is not callable")
        if not _takes_no_arguments(operation):
            return CommandNotFound(command, "declared command requires arguments")
        return operation

    # Navigation

    def forward(self, view: Name) -> None:
        self.navigator.render_view(self.ctx, view)

    def redirect(self, action: Name, command: Name | None = None) -> None:
        self.navigator.redirect(self.ctx, action, command)

    # CSRF

    def check_token(self) -> bool:
        return csrf.check_token(self.ctx, self.navigator)

    @property
    def token(self) -> str:
        return self.ctx.token

    # Parameters

    def get_request_param(self, name: Name) -> str | None:
        return self.ctx.param(name)

    @property
    def page(self) -> int:
        return params.get_page(self.ctx.params)

    def to_number(self, text: str | None) -> int:
        return params.to_number(text)

    def to_date(self, text: str | None) -> date:
        return params.to_date(text)

    # Scopes

    def put_request_scope(self, key: ScopeKey[T], value: T | None) -> None:
        self.ctx.request_scope.put(key, value)

    def get_session_scope(self, key: ScopeKey[T]) -> T | None:
        return self.ctx.session.get(key)

    def put_session_scope(self, key: ScopeKey[T], value: T | None) -> None:
        self.ctx.session.put(key, value)

    def remove_session_scope(self, key: ScopeKey[Any]) -> None:
        self.ctx.session.remove(key)

    def get_context_scope(self, key: ScopeKey[T]) -> T | None:
        return self.ctx.process.get(key)
