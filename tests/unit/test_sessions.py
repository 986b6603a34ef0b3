"""Tests for InMemorySessionBackend and SessionManager."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from starlette.responses import Response

from fastapi_action_dispatch import sessions
from fastapi_action_dispatch.keys import SessionKey
from fastapi_action_dispatch.sessions import (
    InMemorySessionBackend,
    SessionBackend,
    SessionManager,
)

FLASH = SessionKey("flash", str)


class TestInMemorySessionBackend:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemorySessionBackend(), SessionBackend)

    async def test_load_unknown_returns_none(self) -> None:
        assert await InMemorySessionBackend().load("missing") is None

    async def test_save_then_load(self) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {"flash": "hi"})
        assert await backend.load("s1") == {"flash": "hi"}

    async def test_load_returns_copy(self) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {"flash": "hi"})
        record = await backend.load("s1")
        assert record is not None
        record["flash"] = "changed"
        assert await backend.load("s1") == {"flash": "hi"}

    async def test_delete(self) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {})
        await backend.delete("s1")
        assert "s1" not in backend
        await backend.delete("s1")


class TestIdleExpiry:
    @pytest.fixture
    def clock(self, monkeypatch: pytest.MonkeyPatch) -> list[float]:
        now = [1000.0]
        monkeypatch.setattr(
            sessions, "time", SimpleNamespace(monotonic=lambda: now[0])
        )
        return now

    async def test_idle_record_expires_on_load(self, clock: list[float]) -> None:
        backend = InMemorySessionBackend(idle_seconds=60)
        await backend.save("s1", {"flash": "hi"})
        clock[0] += 59
        assert await backend.load("s1") == {"flash": "hi"}
        clock[0] += 1
        assert await backend.load("s1") is None
        assert "s1" not in backend

    async def test_save_refreshes_idle_window(self, clock: list[float]) -> None:
        backend = InMemorySessionBackend(idle_seconds=60)
        await backend.save("s1", {})
        clock[0] += 50
        await backend.save("s1", {"flash": "again"})
        clock[0] += 50
        assert await backend.load("s1") == {"flash": "again"}

    async def test_save_purges_expired_records(self, clock: list[float]) -> None:
        backend = InMemorySessionBackend(idle_seconds=60)
        for session_id in ("a", "b", "c"):
            await backend.save(session_id, {})
        clock[0] += 120
        await backend.save("d", {})
        assert len(backend) == 1
        assert "d" in backend

    async def test_abandoned_cookieless_sessions_do_not_accumulate(
        self, clock: list[float], make_request: Any
    ) -> None:
        backend = InMemorySessionBackend(idle_seconds=60)
        manager = SessionManager(backend)
        for _ in range(5):
            await manager.commit(await manager.open(make_request()), Response())
        assert len(backend) == 5
        clock[0] += 60
        await manager.commit(await manager.open(make_request()), Response())
        assert len(backend) == 1

    async def test_expired_cookie_starts_new_session(
        self, clock: list[float], make_request: Any
    ) -> None:
        backend = InMemorySessionBackend(idle_seconds=60)
        await backend.save("s1", {"flash": "old"})
        clock[0] += 61
        manager = SessionManager(backend)
        session = await manager.open(make_request(headers={"Cookie": "session_id=s1"}))
        assert session.is_new
        assert session.id != "s1"


class TestSessionManager:
    async def test_opens_new_session_without_cookie(self, make_request: Any) -> None:
        session = await SessionManager().open(make_request())
        assert session.is_new
        assert session.id

    async def test_new_sessions_get_distinct_ids(self, make_request: Any) -> None:
        manager = SessionManager()
        first = await manager.open(make_request())
        second = await manager.open(make_request())
        assert first.id != second.id

    async def test_unknown_cookie_starts_new_session(self, make_request: Any) -> None:
        request = make_request(headers={"Cookie": "session_id=forged"})
        session = await SessionManager().open(request)
        assert session.is_new
        assert session.id != "forged"

    async def test_commit_sets_cookie_for_new_session(self, make_request: Any) -> None:
        manager = SessionManager()
        session = await manager.open(make_request())
        response = Response()
        await manager.commit(session, response)
        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"session_id={session.id}")
        assert "httponly" in cookie.lower()
        assert "samesite=lax" in cookie.lower()

    async def test_known_cookie_loads_record(self, make_request: Any) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {"flash": "hello"})
        manager = SessionManager(backend)
        session = await manager.open(make_request(headers={"Cookie": "session_id=s1"}))
        assert not session.is_new
        assert session.get(FLASH) == "hello"

    async def test_commit_persists_without_cookie_when_unchanged(
        self, make_request: Any
    ) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {})
        manager = SessionManager(backend)
        session = await manager.open(make_request(headers={"Cookie": "session_id=s1"}))
        session.put(FLASH, "saved")
        response = Response()
        await manager.commit(session, response)
        assert "set-cookie" not in response.headers
        assert await backend.load("s1") == {"flash": "saved"}

    async def test_rotation_moves_record_and_reissues_cookie(
        self, make_request: Any
    ) -> None:
        backend = InMemorySessionBackend()
        await backend.save("s1", {"flash": "kept"})
        manager = SessionManager(backend)
        session = await manager.open(make_request(headers={"Cookie": "session_id=s1"}))
        new_id = session.rotate_id()
        response = Response()
        await manager.commit(session, response)
        assert "s1" not in backend
        assert await backend.load(new_id) == {"flash": "kept"}
        assert response.headers["set-cookie"].startswith(f"session_id={new_id}")

    async def test_custom_cookie_settings(self, make_request: Any) -> None:
        manager = SessionManager(
            cookie_name="sid", max_age=600, same_site="strict", https_only=True
        )
        session = await manager.open(make_request())
        response = Response()
        await manager.commit(session, response)
        cookie = response.headers["set-cookie"].lower()
        assert cookie.startswith("sid=")
        assert "max-age=600" in cookie
        assert "samesite=strict" in cookie
        assert "secure" in cookie

    def test_default_backend_is_in_memory(self) -> None:
        assert isinstance(SessionManager().backend, InMemorySessionBackend)
