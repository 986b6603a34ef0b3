"""FastAPI Action Dispatch - command dispatch and typed scoped state for FastAPI."""

from fastapi_action_dispatch.context import RequestContext, build_context
from fastapi_action_dispatch.csrf import check_token
from fastapi_action_dispatch.dispatcher import dispatch
from fastapi_action_dispatch.endpoint import handler_endpoint
from fastapi_action_dispatch.exceptions import (
    AuthenticityFailure,
    DispatchException,
    InvocationFailure,
    ScopeError,
    ScopeKindError,
    ScopeTypeError,
    UnresolvedCommand,
)
from fastapi_action_dispatch.handler import CommandNotFound, ResourceHandler
from fastapi_action_dispatch.hooks import AfterDispatch, BeforeDispatch, DispatchHook
from fastapi_action_dispatch.keys import (
    KeySet,
    Param,
    ProcessKey,
    RequestKey,
    ScopeKey,
    ScopeKind,
    SessionKey,
    View,
)
from fastapi_action_dispatch.navigation import Navigation, Navigator, TemplateNavigator
from fastapi_action_dispatch.outcome import DispatchOutcome
from fastapi_action_dispatch.params import NOT_A_NUMBER, get_page, to_date, to_number
from fastapi_action_dispatch.scopes import (
    ProcessScope,
    RequestScope,
    SessionScope,
)
from fastapi_action_dispatch.sessions import (
    InMemorySessionBackend,
    SessionBackend,
    SessionManager,
)

__all__ = [
    "NOT_A_NUMBER",
    "AfterDispatch",
    "AuthenticityFailure",
    "BeforeDispatch",
    "CommandNotFound",
    "DispatchException",
    "DispatchHook",
    "DispatchOutcome",
    "InMemorySessionBackend",
    "InvocationFailure",
    "KeySet",
    "Navigation",
    "Navigator",
    "Param",
    "ProcessKey",
    "ProcessScope",
    "RequestContext",
    "RequestKey",
    "RequestScope",
    "ResourceHandler",
    "ScopeError",
    "ScopeKey",
    "ScopeKind",
    "ScopeKindError",
    "ScopeTypeError",
    "SessionBackend",
    "SessionKey",
    "SessionManager",
    "SessionScope",
    "TemplateNavigator",
    "UnresolvedCommand",
    "View",
    "build_context",
    "check_token",
    "dispatch",
    "get_page",
    "handler_endpoint",
    "to_date",
    "to_number",
]
