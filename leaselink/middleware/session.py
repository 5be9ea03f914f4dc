from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware

from leaselink.core.request_context import bind_request_context, reset_request_context
from leaselink.services.auth_service import authenticate_token
from leaselink.services.session_cookie import SESSION_COOKIE_NAME


class SessionMiddleware(BaseHTTPMiddleware):
    """Decodes the session cookie once per request into ``request.state.identity``."""

    async def dispatch(self, request, call_next):
        settings = request.app.state.settings
        identity = authenticate_token(request.cookies.get(SESSION_COOKIE_NAME), settings)
        request.state.identity = identity
        if identity is None:
            return await call_next(request)

        token = bind_request_context(user_id=str(identity.id))
        try:
            return await call_next(request)
        finally:
            reset_request_context(token)
