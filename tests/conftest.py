"""Shared pytest fixtures for fastapi-action-dispatch tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.templating import Jinja2Templates

from fastapi_action_dispatch._types import Name, name_of
from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.navigation import Navigation, redirect_url
from fastapi_action_dispatch.scopes import SessionScope


class RecordingNavigator:
    """Navigator that records every call and answers with plain text."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []

    def render_view(self, ctx: RequestContext, view: Name) -> None:
        self.calls.append(("render", name_of(view)))
        ctx.navigation = Navigation("render", name_of(view))

    def redirect(
        self, ctx: RequestContext, action: Name, command: Name | None = None
    ) -> None:
        url = redirect_url(ctx, action, command)
        self.calls.append(("redirect", url))
        ctx.navigation = Navigation("redirect", url)

    async def respond(self, ctx: RequestContext) -> Response:
        navigation = ctx.navigation
        return PlainTextResponse(
            "none" if navigation is None else f"{navigation.kind}:{navigation.target}"
        )


@pytest.fixture
def make_request() -> Any:
    """Factory for creating raw Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        root_path: str = "",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": root_path,
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_ctx(make_request: Any) -> Any:
    """Factory for contexts with explicit params and a known session id."""

    def _make(
        params: dict[str, str] | None = None,
        *,
        session_id: str = "session-abc",
        root_path: str = "",
    ) -> RequestContext:
        return RequestContext(
            request=make_request(root_path=root_path),
            params=dict(params or {}),
            session=SessionScope(session_id, {}),
        )

    return _make


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Template directory with the error view and a few resource views."""
    (tmp_path / "error").mkdir()
    (tmp_path / "error" / "unknown.html").write_text("ERROR: unknown request")
    (tmp_path / "reports").mkdir()
    (tmp_path / "reports" / "index.html").write_text(
        "page={{ page }} reports={{ reports|join(',') }} token={{ token }}"
    )
    (tmp_path / "reports" / "show.html").write_text("report={{ report }}")
    return tmp_path


@pytest.fixture
def templates(templates_dir: Path) -> Jinja2Templates:
    return Jinja2Templates(directory=str(templates_dir))
