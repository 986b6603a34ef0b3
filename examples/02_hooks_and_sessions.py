"""
Hooks and session configuration example.

Demonstrates:
- Auditing every dispatch with AfterDispatch
- A shorter idle timeout for in-memory sessions
- Cookie settings and a custom CSRF token derivation
- Rotating the session id on login
"""

import hashlib
import hmac
import logging
from pathlib import Path

from fastapi import FastAPI
from starlette.templating import Jinja2Templates

from fastapi_action_dispatch import (
    AfterDispatch,
    DispatchOutcome,
    InMemorySessionBackend,
    RequestContext,
    RequestKey,
    ResourceHandler,
    SessionKey,
    SessionManager,
    TemplateNavigator,
    handler_endpoint,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("audit")

SECRET = b"change-me"
LOGIN_USER = SessionKey("login_user", str)
USER = RequestKey("user", str)


def signed_token(session_id: str) -> str:
    """Keep the session id out of the page by embedding an HMAC of it."""
    return hmac.new(SECRET, session_id.encode(), hashlib.sha256).hexdigest()


async def audit(ctx: RequestContext, outcome: DispatchOutcome) -> None:
    logger.info(
        "%s command=%s status=%s %.1fms",
        ctx.request.url.path,
        outcome.command,
        outcome.status,
        outcome.duration_ms,
    )


class AccountHandler(ResourceHandler):
    def declare_commands(self):
        return {"show": self.show, "login": self.login, "logout": self.logout}

    async def show(self) -> None:
        self.put_request_scope(USER, self.get_session_scope(LOGIN_USER))
        self.forward("account/show")

    async def login(self) -> None:
        if not self.check_token():
            return
        # New identity, new session id: tokens issued before login stop working
        self.ctx.session.rotate_id()
        self.put_session_scope(LOGIN_USER, self.get_request_param("name") or "guest")
        self.redirect("Account", "show")

    async def logout(self) -> None:
        if not self.check_token():
            return
        self.ctx.session.invalidate()
        self.redirect("Account", "show")


templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

app = FastAPI(title="Hooks and Sessions Example")
app.add_api_route(
    "/",
    handler_endpoint(
        AccountHandler,
        navigator=TemplateNavigator(templates),
        sessions=SessionManager(
            InMemorySessionBackend(idle_seconds=900),
            cookie_name="sid",
            same_site="strict",
        ),
        hooks=[AfterDispatch(audit)],
        token_deriver=signed_token,
    ),
    methods=["GET", "POST"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
