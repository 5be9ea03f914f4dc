# leaselink/deps.py
from __future__ import annotations

from typing import Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from leaselink.core.config import Settings
from leaselink.core.database import get_db
from leaselink.services.auth_service import AuthService, authenticate_token
from leaselink.services.authorization_service import AuthorizationService
from leaselink.services.errors import Unauthenticated
from leaselink.services.session_cookie import SESSION_COOKIE_NAME
from leaselink.services.session_tokens import Identity

_NOT_DECODED = object()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, settings)


def get_optional_identity(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Optional[Identity]:
    """Identity from the session cookie, or ``None``. Never raises."""
    identity = getattr(request.state, "identity", _NOT_DECODED)
    if identity is _NOT_DECODED:
        # SessionMiddleware not installed (bare test apps); decode here instead.
        identity = authenticate_token(request.cookies.get(SESSION_COOKIE_NAME), settings)
        request.state.identity = identity
    return identity


def get_current_identity(
    request: Request,
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    if identity is None:
        AuthorizationService.log_access_denied(reason="unauthenticated", identity=None, request=request)
        raise Unauthenticated()
    return identity


def require_role(roles: Iterable[str]):
    allowed = {role.strip().upper() for role in roles}

    def _dependency(
        request: Request,
        identity: Optional[Identity] = Depends(get_optional_identity),
    ) -> Identity:
        return AuthorizationService.ensure_role(request=request, identity=identity, roles=allowed)

    return _dependency
