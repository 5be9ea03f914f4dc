from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class LeaseLinkError(Exception):
    """Base class for failures the API maps onto an HTTP status."""

    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.detail
        super().__init__(self.detail)


class ValidationError(LeaseLinkError):
    status_code = 400
    detail = "Invalid request"

    def __init__(self, detail: Optional[str] = None, *, fields: Iterable[str] = ()) -> None:
        self.fields = tuple(fields)
        super().__init__(detail)


class EmptyBody(ValidationError):
    detail = "Comment body cannot be empty"

    def __init__(self) -> None:
        super().__init__(fields=("body",))


class NoFields(ValidationError):
    detail = "No valid fields provided for update (status, assignedToId)"

    def __init__(self) -> None:
        super().__init__(fields=("status", "assignedToId"))


class NotFoundError(LeaseLinkError):
    status_code = 404

    def __init__(self, entity: str, *, label: Optional[str] = None) -> None:
        self.entity = entity
        super().__init__(f"{label or entity.capitalize()} not found")


class AuthError(LeaseLinkError):
    status_code = 401


class InvalidCredentials(AuthError):
    # Same message for unknown email and wrong password.
    detail = "Invalid credentials"


class EmailTaken(AuthError):
    status_code = 409
    detail = "Email already registered"


class Unauthenticated(AuthError):
    detail = "Not authenticated"


class Forbidden(AuthError):
    status_code = 403
    detail = "Forbidden"


class StoreFailure(LeaseLinkError):
    """The persistence layer failed; the client only ever sees the generic message."""

    status_code = 500
    detail = "Internal server error"


@contextmanager
def store_guard(db: Session, action: str) -> Iterator[None]:
    """Roll back and convert persistence errors into ``StoreFailure``."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("store failure during %s", action)
        raise StoreFailure() from exc
