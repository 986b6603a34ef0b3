"""handler_endpoint() — factory producing FastAPI/Starlette-compatible endpoints."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace

from starlette.requests import Request
from starlette.responses import Response

from fastapi_action_dispatch._types import TokenDeriver
from fastapi_action_dispatch.context import build_context
from fastapi_action_dispatch.dispatcher import dispatch
from fastapi_action_dispatch.exceptions import InvocationFailure
from fastapi_action_dispatch.handler import ResourceHandler
from fastapi_action_dispatch.hooks import DispatchHook
from fastapi_action_dispatch.keys import View
from fastapi_action_dispatch.navigation import Navigator
from fastapi_action_dispatch.scopes import ProcessScope
from fastapi_action_dispatch.sessions import SessionManager

logger = logging.getLogger(__name__)


def handler_endpoint(
    handler_cls: type[ResourceHandler],
    *,
    navigator: Navigator,
    sessions: SessionManager | None = None,
    process: ProcessScope | None = None,
    hooks: Sequence[DispatchHook] = (),
    token_deriver: TokenDeriver | None = None,
) -> Callable[[Request], Awaitable[Response]]:
    """Return an endpoint that dispatches every request to a new *handler_cls*.

    Mount it with ``app.add_api_route(path, endpoint, methods=["GET", "POST"])``
    or a Starlette ``Route``. The session store and the process scope are
    shared by all requests of the endpoint.
    """
    session_manager = sessions or SessionManager()
    process_scope = process if process is not None else ProcessScope()
    hooks = tuple(hooks)

    async def endpoint(request: Request) -> Response:
        session = await session_manager.open(request)
        ctx = await build_context(
            request,
            session=session,
            process=process_scope,
            token_deriver=token_deriver,
        )
        handler = handler_cls(ctx, navigator)
        outcome = await dispatch(handler, ctx, hooks=hooks)
        request.state.dispatch_outcome = outcome

        try:
            response = await navigator.respond(ctx)
        except Exception as exc:
            logger.exception(
                "Rendering %s for command %r failed", ctx.navigation, outcome.command
            )
            ctx.failure = InvocationFailure(outcome.command, cause=exc)
            navigator.render_view(ctx, View.ERROR_UNKNOWN)
            response = await navigator.respond(ctx)
            request.state.dispatch_outcome = replace(
                outcome,
                status="INVOCATION_FAILED",
                navigation=ctx.navigation,
                error=ctx.failure,
            )
        await session_manager.commit(ctx.session, response)
        return response

    endpoint.__name__ = f"{handler_cls.__name__}_endpoint"
    endpoint._dispatch_handler = handler_cls  # type: ignore[attr-defined]
    return endpoint
