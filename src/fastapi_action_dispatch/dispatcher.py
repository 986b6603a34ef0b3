"""dispatch() — run the command named by the request on a resource handler."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Sequence

from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.exceptions import (
    AuthenticityFailure,
    DispatchException,
    InvocationFailure,
    UnresolvedCommand,
)
from fastapi_action_dispatch.handler import CommandNotFound, ResourceHandler
from fastapi_action_dispatch.hooks import DispatchHook
from fastapi_action_dispatch.keys import Param, View
from fastapi_action_dispatch.navigation import Navigation
from fastapi_action_dispatch.outcome import DispatchOutcome, DispatchStatus

logger = logging.getLogger(__name__)

_ERROR_NAVIGATION = Navigation("render", View.ERROR_UNKNOWN.value)


async def dispatch(
    handler: ResourceHandler,
    ctx: RequestContext,
    *,
    hooks: Sequence[DispatchHook] = (),
) -> DispatchOutcome:
    """Resolve ``ctx.params["command"]`` on *handler* and run it.

    Every failure ends in the generic error view; nothing but hook errors
    and BaseExceptions escapes to the caller.
    """
    started = time.perf_counter()
    ctx.navigation = None
    ctx.failure = None

    for hook in hooks:
        await hook.on_dispatch_start(ctx)

    command = ctx.param(Param.COMMAND)
    status: DispatchStatus = "OK"
    error: DispatchException | None = None

    resolved = handler.lookup(command)
    if isinstance(resolved, CommandNotFound):
        error = UnresolvedCommand(command, resolved.reason)
        status = "UNKNOWN_COMMAND"
        logger.warning("%s (%s)", error, type(handler).__name__)
    else:
        try:
            result = resolved()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            error = InvocationFailure(command, cause=exc)
            status = "INVOCATION_FAILED"
            logger.exception(
                "Command %r on %s raised", command, type(handler).__name__
            )
        else:
            if isinstance(ctx.failure, AuthenticityFailure):
                error = ctx.failure
                status = "AUTHENTICITY_FAILED"
            elif ctx.navigation is None:
                error = InvocationFailure(command)
                status = "INVOCATION_FAILED"
                logger.error(
                    "Command %r on %s finished without rendering or redirecting",
                    command,
                    type(handler).__name__,
                )

    if error is not None:
        ctx.failure = error
        if ctx.navigation != _ERROR_NAVIGATION:
            handler.navigator.render_view(ctx, View.ERROR_UNKNOWN)

    outcome = DispatchOutcome(
        command=command,
        status=status,
        navigation=ctx.navigation,
        duration_ms=(time.perf_counter() - started) * 1000,
        error=error,
    )

    for hook in hooks:
        await hook.on_dispatch_end(ctx, outcome)

    return outcome
