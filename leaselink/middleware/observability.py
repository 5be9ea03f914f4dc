from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from leaselink.core.request_context import bind_request_context, reset_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(request: Request) -> Optional[str]:
    value = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if not value or len(value) > MAX_REQUEST_ID_LENGTH or not value.isprintable():
        return None
    return value


def _route_template(request: Request) -> str:
    # "/api/tickets/{ticket_id}" rather than one path per ticket id
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs one summary line when it finishes."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        request_id = _incoming_request_id(request) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request_context(request_id=request_id)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            identity = getattr(request.state, "identity", None)
            logger.log(
                logging.WARNING if status_code >= 500 else logging.INFO,
                "request completed",
                extra={
                    "user_id": str(identity.id) if identity is not None else None,
                    "endpoint": _route_template(request),
                    "method": request.method,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            reset_request_context(token)
