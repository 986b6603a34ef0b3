"""RequestContext — per-request bundle of parameters, scopes and navigation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from starlette.datastructures import UploadFile
from starlette.requests import Request

from fastapi_action_dispatch._types import Name, TokenDeriver, name_of
from fastapi_action_dispatch.exceptions import DispatchException
from fastapi_action_dispatch.scopes import (
    ProcessScope,
    RequestScope,
    SessionScope,
    new_session_id,
)

if TYPE_CHECKING:
    from fastapi_action_dispatch.navigation import Navigation

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def session_id_token(session_id: str) -> str:
    """Default CSRF token: the session identifier itself."""
    return session_id


def _new_session() -> SessionScope:
    return SessionScope(new_session_id(), {}, is_new=True)


@dataclass
class RequestContext:
    """State of one dispatch. Borrowed for the request, never kept."""

    request: Request
    params: Mapping[str, str] = field(default_factory=dict)
    request_scope: RequestScope = field(default_factory=RequestScope)
    session: SessionScope = field(default_factory=_new_session)
    process: ProcessScope = field(default_factory=ProcessScope)
    token_deriver: TokenDeriver = session_id_token
    navigation: Navigation | None = None
    failure: DispatchException | None = None

    @property
    def token(self) -> str:
        """CSRF token for the current session id."""
        return self.token_deriver(self.session.id)

    def param(self, name: Name) -> str | None:
        return self.params.get(name_of(name))


async def read_params(request: Request) -> dict[str, str]:
    """Collect query and form parameters, first value wins, query string first."""
    params: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        params.setdefault(key, value)

    content_type = request.headers.get("content-type", "")
    if request.method != "GET" and content_type.startswith(_FORM_TYPES):
        form = await request.form()
        for key, item in form.multi_items():
            if isinstance(item, UploadFile):
                continue
            params.setdefault(key, item)
    return params


async def build_context(
    request: Request,
    *,
    session: SessionScope | None = None,
    process: ProcessScope | None = None,
    token_deriver: TokenDeriver | None = None,
) -> RequestContext:
    return RequestContext(
        request=request,
        params=await read_params(request),
        session=session if session is not None else _new_session(),
        process=process if process is not None else ProcessScope(),
        token_deriver=token_deriver or session_id_token,
    )
