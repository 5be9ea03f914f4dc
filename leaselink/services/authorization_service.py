from __future__ import annotations

import enum
import logging
from typing import Iterable, Optional

from fastapi import Request

from leaselink.services.errors import Forbidden, Unauthenticated
from leaselink.services.session_tokens import Identity

logger = logging.getLogger(__name__)


class Decision(str, enum.Enum):
    ALLOWED = "ALLOWED"
    FORBIDDEN = "FORBIDDEN"
    UNAUTHENTICATED = "UNAUTHENTICATED"


class AuthorizationService:
    """Role checks for protected endpoints. Exact role match, no hierarchy."""

    @staticmethod
    def authorize(identity: Optional[Identity], roles: Iterable[str]) -> Decision:
        if identity is None:
            return Decision.UNAUTHENTICATED
        if identity.role not in set(roles):
            return Decision.FORBIDDEN
        return Decision.ALLOWED

    @staticmethod
    def log_access_denied(*, reason: str, identity: Optional[Identity], request: Request) -> None:
        endpoint = f"{request.method} {request.url.path}"
        logger.warning(
            "Access denied (%s): user_id=%s user_role=%s endpoint=%s",
            reason,
            getattr(identity, "id", None),
            getattr(identity, "role", None),
            endpoint,
        )

    @classmethod
    def ensure_role(cls, *, request: Request, identity: Optional[Identity], roles: Iterable[str]) -> Identity:
        decision = cls.authorize(identity, roles)
        if decision is Decision.UNAUTHENTICATED:
            cls.log_access_denied(reason="unauthenticated", identity=None, request=request)
            raise Unauthenticated()
        if decision is Decision.FORBIDDEN:
            cls.log_access_denied(reason="role_denied", identity=identity, request=request)
            raise Forbidden()
        return identity
