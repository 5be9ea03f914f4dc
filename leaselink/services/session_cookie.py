from __future__ import annotations

from typing import Any

from fastapi import Request, Response

from leaselink.core.config import Settings

SESSION_COOKIE_NAME = "token"


def _request_is_secure(request: Request | None) -> bool:
    if request is None:
        return False
    forwarded_proto = (request.headers.get("x-forwarded-proto") or "").split(",")[0].strip().lower()
    return forwarded_proto == "https" or request.url.scheme == "https"


def build_session_cookie_options(settings: Settings, request: Request | None = None) -> dict[str, Any]:
    return {
        "httponly": True,
        "samesite": "lax",
        "path": "/",
        "secure": settings.session_cookie_secure or _request_is_secure(request),
    }


def set_session_cookie(
    response: Response,
    token: str,
    settings: Settings,
    request: Request | None = None,
) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_ttl_seconds,
        **build_session_cookie_options(settings, request),
    )


def clear_session_cookie(response: Response, settings: Settings, request: Request | None = None) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        **build_session_cookie_options(settings, request),
    )
