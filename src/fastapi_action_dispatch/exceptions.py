"""DispatchException hierarchy for handled dispatch failures and scope misuse."""

from __future__ import annotations


class DispatchException(Exception):
    """Base for all dispatch exceptions."""


class UnresolvedCommand(DispatchException):
    """Command parameter missing, blank, or naming no declared operation."""

    def __init__(self, command: str | None, reason: str) -> None:
        super().__init__(f"Unknown command {command!r}: {reason}")
        self.command = command
        self.reason = reason


class InvocationFailure(DispatchException):
    """The resolved operation failed while running."""

    def __init__(
        self, command: str | None, *, cause: BaseException | None = None
    ) -> None:
        super().__init__(f"Command {command!r} failed")
        self.command = command
        self.cause = cause


class AuthenticityFailure(DispatchException):
    """CSRF token missing or not matching the session token."""

    def __init__(self, detail: str = "Invalid CSRF token") -> None:
        super().__init__(detail)
        self.detail = detail


class ScopeError(DispatchException):
    """Base for scope store contract violations."""


class ScopeKindError(ScopeError):
    """A key of one scope kind was used against a different scope."""


class ScopeTypeError(ScopeError):
    """A stored or requested value does not match the key's declared type."""
