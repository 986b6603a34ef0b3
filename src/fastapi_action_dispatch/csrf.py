"""CSRF guard — compare the submitted token with the session-derived token."""

from __future__ import annotations

import logging
import secrets

from fastapi_action_dispatch.context import RequestContext
from fastapi_action_dispatch.exceptions import AuthenticityFailure
from fastapi_action_dispatch.keys import Param, View
from fastapi_action_dispatch.navigation import Navigator

logger = logging.getLogger(__name__)


def token_matches(submitted: str | None, expected: str) -> bool:
    if submitted is None:
        return False
    return secrets.compare_digest(submitted.encode(), expected.encode())


def check_token(ctx: RequestContext, navigator: Navigator) -> bool:
    """Return True when the request carries the current session's token.

    On mismatch the error view is rendered and the failure recorded on the
    context; the caller must not go on with its effect.
    """
    if token_matches(ctx.param(Param.TOKEN), ctx.token):
        return True

    failure = AuthenticityFailure(
        "CSRF token missing" if ctx.param(Param.TOKEN) is None else "CSRF token mismatch"
    )
    logger.warning("%s on %s", failure.detail, ctx.request.url.path)
    ctx.failure = failure
    navigator.render_view(ctx, View.ERROR_UNKNOWN)
    return False
