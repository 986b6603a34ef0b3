"""
Basic usage example of fastapi-action-dispatch.

Demonstrates:
- Declaring a resource handler with an explicit command table
- Typed keys for request, session and process state
- Guarding state-changing commands with the session CSRF token
- Mounting the handler as a FastAPI endpoint
"""

from dataclasses import dataclass, field
from datetime import date
from itertools import count
from pathlib import Path

from fastapi import FastAPI
from starlette.templating import Jinja2Templates

from fastapi_action_dispatch import (
    KeySet,
    ProcessKey,
    ProcessScope,
    RequestKey,
    ResourceHandler,
    SessionKey,
    TemplateNavigator,
    handler_endpoint,
)

PAGE_SIZE = 10


@dataclass
class Report:
    id: int
    day: date
    title: str


@dataclass
class ReportStore:
    """In-memory store shared by the whole process."""

    reports: dict[int, Report] = field(default_factory=dict)
    _ids: count = field(default_factory=lambda: count(1))

    def add(self, day: date, title: str) -> Report:
        report = Report(next(self._ids), day, title)
        self.reports[report.id] = report
        return report


class RequestKeys(KeySet):
    REPORTS = RequestKey("reports", list)
    PAGE = RequestKey("page", int)
    FLASH = RequestKey("flash", str)


class SessionKeys(KeySet):
    FLASH = SessionKey("flash", str)


class ProcessKeys(KeySet):
    REPORT_STORE = ProcessKey("report_store", ReportStore)


class ReportHandler(ResourceHandler):
    def declare_commands(self):
        return {
            "index": self.index,
            "create": self.create,
            "destroy": self.destroy,
        }

    @property
    def store(self) -> ReportStore:
        return self.get_context_scope(ProcessKeys.REPORT_STORE)

    async def index(self) -> None:
        reports = sorted(self.store.reports.values(), key=lambda r: r.day, reverse=True)
        start = (self.page - 1) * PAGE_SIZE
        self.put_request_scope(RequestKeys.REPORTS, reports[start : start + PAGE_SIZE])
        self.put_request_scope(RequestKeys.PAGE, self.page)

        # Flash messages live in the session for exactly one rendering
        flash = self.get_session_scope(SessionKeys.FLASH)
        if flash is not None:
            self.put_request_scope(RequestKeys.FLASH, flash)
            self.remove_session_scope(SessionKeys.FLASH)

        self.forward("reports/index")

    async def create(self) -> None:
        if not self.check_token():
            return
        day = self.to_date(self.get_request_param("day"))
        title = self.get_request_param("title") or "Untitled"
        self.store.add(day, title)
        self.put_session_scope(SessionKeys.FLASH, "Report created")
        self.redirect("Report", "index")

    async def destroy(self) -> None:
        if not self.check_token():
            return
        self.store.reports.pop(self.to_number(self.get_request_param("id")), None)
        self.put_session_scope(SessionKeys.FLASH, "Report deleted")
        self.redirect("Report", "index")


templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
process = ProcessScope({ProcessKeys.REPORT_STORE: ReportStore()})

app = FastAPI(title="Daily Reports Example")
app.add_api_route(
    "/",
    handler_endpoint(
        ReportHandler,
        navigator=TemplateNavigator(templates),
        process=process,
    ),
    methods=["GET", "POST"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Open in a browser:
    # http://localhost:8000/?action=Report&command=index
