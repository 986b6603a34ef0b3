"""Navigation — render a view or redirect, then turn the decision into a Response."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable
from urllib.parse import urlencode

from starlette.responses import RedirectResponse, Response
from starlette.templating import Jinja2Templates

from fastapi_action_dispatch._types import Name, name_of
from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.keys import Param, View


@dataclass(frozen=True)
class Navigation:
    """Recorded render or redirect decision. The last one recorded wins."""

    kind: Literal["render", "redirect"]
    target: str


def redirect_url(
    ctx: RequestContext, action: Name, command: Name | None = None
) -> str:
    """Build ``<root_path>/?action=<action>[&command=<command>]``."""
    query = {Param.ACTION.value: name_of(action)}
    if command is not None:
        query[Param.COMMAND.value] = name_of(command)
    base = ctx.request.scope.get("root_path", "").rstrip("/")
    return f"{base}/?{urlencode(query)}"


@runtime_checkable
class Navigator(Protocol):
    """Collaborator that ends a dispatch with a view or a redirect."""

    def render_view(self, ctx: RequestContext, view: Name) -> None: ...
    def redirect(
        self, ctx: RequestContext, action: Name, command: Name | None = None
    ) -> None: ...
    async def respond(self, ctx: RequestContext) -> Response: ...


class TemplateNavigator:
    """Navigator backed by Jinja2 templates.

    A view id maps to ``template_pattern.format(view=view_id)``; the request
    scope and the CSRF token are handed to the template.
    """

    def __init__(
        self,
        templates: Jinja2Templates,
        *,
        template_pattern: str = "{view}.html",
        redirect_status: int = 302,
    ) -> None:
        self._templates = templates
        self._template_pattern = template_pattern
        self._redirect_status = redirect_status

    def template_for(self, view: Name) -> str:
        return self._template_pattern.format(view=name_of(view))

    def render_view(self, ctx: RequestContext, view: Name) -> None:
        ctx.navigation = Navigation("render", name_of(view))

    def redirect(
        self, ctx: RequestContext, action: Name, command: Name | None = None
    ) -> None:
        ctx.navigation = Navigation("redirect", redirect_url(ctx, action, command))

    async def respond(self, ctx: RequestContext) -> Response:
        navigation = ctx.navigation or Navigation("render", View.ERROR_UNKNOWN.value)
        if navigation.kind == "redirect":
            return RedirectResponse(navigation.target, status_code=self._redirect_status)

        context: dict[str, Any] = {"token": ctx.token}
        context.update(ctx.request_scope.as_dict())
        return self._templates.TemplateResponse(
            ctx.request, self.template_for(navigation.target), context
        )
