"""Server-side sessions — SessionBackend, InMemorySessionBackend, SessionManager."""

from __future__ import annotations

import logging
import time
from typing import Any, Literal, Protocol, runtime_checkable

from starlette.requests import Request
from starlette.responses import Response

from fastapi_action_dispatch.scopes import SessionScope, new_session_id

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionBackend(Protocol):
    """Pluggable storage interface for session records."""

    async def load(self, session_id: str) -> dict[str, Any] | None: ...
    async def save(self, session_id: str, data: dict[str, Any]) -> None: ...
    async def delete(self, session_id: str) -> None: ...


class InMemorySessionBackend:
    """Default in-memory session backend. Single-process only.

    Records untouched for *idle_seconds* expire. Expired records are purged
    whenever a record is saved.
    """

    def __init__(self, idle_seconds: float = 1800) -> None:
        self._idle_seconds = idle_seconds
        self._records: dict[str, tuple[float, dict[str, Any]]] = {}

    def _expired(self, touched: float, now: float) -> bool:
        return now - touched >= self._idle_seconds

    async def load(self, session_id: str) -> dict[str, Any] | None:
        entry = self._records.get(session_id)
        if entry is None:
            return None
        touched, record = entry
        if self._expired(touched, time.monotonic()):
            del self._records[session_id]
            return None
        return dict(record)

    async def save(self, session_id: str, data: dict[str, Any]) -> None:
        now = time.monotonic()
        stale = [
            key
            for key, (touched, _) in self._records.items()
            if self._expired(touched, now)
        ]
        for key in stale:
            del self._records[key]
        if stale:
            logger.debug("Purged %d expired sessions", len(stale))
        self._records[session_id] = (now, dict(data))

    async def delete(self, session_id: str) -> None:
        self._records.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._records


class SessionManager:
    """Opens the session named by the request cookie and persists it afterwards.

    Records are saved whole at the end of a request, so concurrent requests
    of one session are last-write-wins.
    """

    def __init__(
        self,
        backend: SessionBackend | None = None,
        *,
        cookie_name: str = "session_id",
        max_age: int | None = None,
        path: str = "/",
        same_site: Literal["lax", "strict", "none"] = "lax",
        https_only: bool = False,
    ) -> None:
        self._backend: SessionBackend = backend or InMemorySessionBackend()
        self._cookie_name = cookie_name
        self._max_age = max_age
        self._path = path
        self._same_site = same_site
        self._https_only = https_only

    @property
    def backend(self) -> SessionBackend:
        return self._backend

    async def open(self, request: Request) -> SessionScope:
        session_id = request.cookies.get(self._cookie_name)
        if session_id:
            data = await self._backend.load(session_id)
            if data is not None:
                return SessionScope(session_id, data)
            logger.debug("Session %s not found, starting a new one", session_id[:8])
        return SessionScope(new_session_id(), {}, is_new=True)

    async def commit(self, session: SessionScope, response: Response) -> None:
        previous = session.previous_id
        if previous is not None:
            await self._backend.delete(previous)
        await self._backend.save(session.id, session.record())
        if session.id_changed:
            response.set_cookie(
                self._cookie_name,
                session.id,
                max_age=self._max_age,
                path=self._path,
                samesite=self._same_site,
                secure=self._https_only,
                httponly=True,
            )
