"""DispatchOutcome — structured record of a single dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from fastapi_action_dispatch.exceptions import DispatchException
from fastapi_action_dispatch.navigation import Navigation

DispatchStatus = Literal[
    "OK", "UNKNOWN_COMMAND", "INVOCATION_FAILED", "AUTHENTICITY_FAILED"
]


@dataclass(frozen=True)
class DispatchOutcome:
    """What a dispatch did: which command, how it ended, where it navigated."""

    command: str | None
    status: DispatchStatus
    navigation: Navigation | None
    duration_ms: float = 0.0
    error: DispatchException | None = None

    @property
    def ok(self) -> bool:
        return self.status == "OK"
