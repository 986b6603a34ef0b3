"""DispatchHook base and convenience hook classes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.outcome import DispatchOutcome


class DispatchHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_dispatch_start(self, ctx: RequestContext) -> None:
        pass

    async def on_dispatch_end(
        self, ctx: RequestContext, outcome: DispatchOutcome
    ) -> None:
        pass


class BeforeDispatch(DispatchHook):
    """Convenience hook that only fires before the command is resolved."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_dispatch_start(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterDispatch(DispatchHook):
    """Convenience hook that fires once the outcome is known, on every path."""

    def __init__(
        self,
        callback: Callable[[RequestContext, DispatchOutcome], Awaitable[None]],
    ) -> None:
        self._callback = callback

    async def on_dispatch_end(
        self, ctx: RequestContext, outcome: DispatchOutcome
    ) -> None:
        await self._callback(ctx, outcome)
