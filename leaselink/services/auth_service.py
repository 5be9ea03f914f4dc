from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leaselink.core.config import Settings
from leaselink.models.user import USER_ROLES, User
from leaselink.services import session_tokens
from leaselink.services.errors import EmailTaken, InvalidCredentials, ValidationError
from leaselink.services.passwords import hash_password, verify_password
from leaselink.services.session_tokens import Identity

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "STAFF"

# Checked against on unknown emails so both login failures cost one hash.
_UNKNOWN_USER_CREDENTIAL = hash_password("leaselink-unknown-user")


def identity_for(user: User) -> Identity:
    return Identity(id=int(user.id), email=user.email, role=user.role)


def authenticate_token(token: Optional[str], settings: Settings) -> Optional[Identity]:
    """Identity carried by a session token, or ``None`` when it is missing or invalid."""
    return session_tokens.verify(token, settings.jwt_secret, algorithm=settings.jwt_algorithm)


class AuthService:
    """Credential verification and session token issuance."""

    def __init__(self, db: Session, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    def issue_token(self, identity: Identity) -> str:
        return session_tokens.issue(
            identity,
            self.settings.jwt_secret,
            self.settings.session_ttl_seconds,
            algorithm=self.settings.jwt_algorithm,
        )

    def login(self, email: str, password: str) -> Tuple[Identity, str]:
        user = self.db.query(User).filter(User.email == email).first()
        stored = user.password if user is not None else _UNKNOWN_USER_CREDENTIAL
        if not verify_password(password, stored) or user is None:
            logger.warning("login failed email=%s", email)
            raise InvalidCredentials()

        identity = identity_for(user)
        logger.info("login success user_id=%s role=%s", identity.id, identity.role)
        return identity, self.issue_token(identity)

    def register(self, email: str, password: str, role: Optional[str] = None) -> Tuple[Identity, str]:
        role = (role or DEFAULT_ROLE).strip().upper()
        if role not in USER_ROLES:
            raise ValidationError(f"Invalid role. Must be one of: {', '.join(USER_ROLES)}", fields=("role",))

        if self.db.query(User).filter(User.email == email).first():
            raise EmailTaken()

        user = User(email=email, password=hash_password(password), role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # lost a race against a concurrent registration for the same email
            self.db.rollback()
            raise EmailTaken() from exc
        self.db.refresh(user)

        identity = identity_for(user)
        logger.info("user registered user_id=%s role=%s", identity.id, identity.role)
        return identity, self.issue_token(identity)

    def authenticate_request(self, token: Optional[str]) -> Optional[Identity]:
        return authenticate_token(token, self.settings)
