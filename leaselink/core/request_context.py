from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: Optional[str] = None
    user_id: Optional[str] = None


_EMPTY = RequestContext()
_CONTEXT: ContextVar[RequestContext] = ContextVar("leaselink_request_context", default=_EMPTY)


def current_request_context() -> RequestContext:
    return _CONTEXT.get()


def bind_request_context(**changes: Optional[str]) -> Token:
    """Overlay ``changes`` on the current context; undo with ``reset_request_context``."""
    return _CONTEXT.set(replace(_CONTEXT.get(), **changes))


def reset_request_context(token: Optional[Token] = None) -> None:
    if token is None:
        _CONTEXT.set(_EMPTY)
        return
    _CONTEXT.reset(token)
