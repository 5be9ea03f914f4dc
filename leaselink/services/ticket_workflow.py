"""
Maintenance ticket workflow: creation, status/assignment updates, threaded
comments, deletion and filtered listing.

Status is a closed set (OPEN, IN_PROGRESS, RESOLVED, CLOSED) but any value in
the set may overwrite any other; there is no transition table. Concurrent
updates to the same ticket are last-write-wins.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from leaselink.models.comment import Comment
from leaselink.models.tenant import Tenant
from leaselink.models.ticket import TICKET_PRIORITIES, TICKET_STATUSES, Ticket
from leaselink.models.unit import Unit
from leaselink.models.user import User
from leaselink.services.errors import (
    EmptyBody,
    NoFields,
    NotFoundError,
    ValidationError,
    store_guard,
)

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "MEDIUM"
INITIAL_STATUS = "OPEN"


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Distinguishes "assignedToId not sent" from "assignedToId: null".
UNSET: Any = _Unset()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _check_enum(value: str, allowed: tuple[str, ...], field: str) -> str:
    if value not in allowed:
        raise ValidationError(
            f"Invalid {field}. Must be one of: {', '.join(allowed)}",
            fields=(field,),
        )
    return value


def _full_ticket_query(db: Session):
    return db.query(Ticket).options(
        joinedload(Ticket.unit).joinedload(Unit.property),
        joinedload(Ticket.tenant),
        joinedload(Ticket.assigned_to),
        selectinload(Ticket.comments).joinedload(Comment.author),
    )


def _require(db: Session, model, entity_id: Any, entity: str, *, label: Optional[str] = None):
    row = db.get(model, entity_id)
    if row is None:
        raise NotFoundError(entity, label=label)
    return row


def get_ticket(db: Session, ticket_id: int) -> Ticket:
    with store_guard(db, "get_ticket"):
        ticket = (
            _full_ticket_query(db)
            .filter(Ticket.id == ticket_id)
            .populate_existing()
            .first()
        )
    if ticket is None:
        raise NotFoundError("ticket")
    return ticket


def create_ticket(
    db: Session,
    *,
    unit_id: Optional[int],
    tenant_id: Optional[int],
    title: Optional[str],
    description: Optional[str],
    priority: Optional[str] = None,
    assigned_to_id: Optional[int] = None,
) -> Ticket:
    missing = [
        name
        for name, value in (
            ("unitId", unit_id),
            ("tenantId", tenant_id),
            ("title", title),
            ("description", description),
        )
        if _is_blank(value)
    ]
    if missing:
        raise ValidationError(f"{', '.join(missing)} required", fields=missing)

    if priority is not None and priority != "":
        _check_enum(priority, TICKET_PRIORITIES, "priority")
    else:
        priority = DEFAULT_PRIORITY

    with store_guard(db, "create_ticket"):
        # tenant first: an unknown tenant is reported regardless of the unit
        _require(db, Tenant, tenant_id, "tenant")
        _require(db, Unit, unit_id, "unit")
        if assigned_to_id is not None:
            _require(db, User, assigned_to_id, "user", label="Assigned user")

        ticket = Ticket(
            unit_id=unit_id,
            tenant_id=tenant_id,
            title=title.strip(),
            description=description.strip(),
            priority=priority,
            status=INITIAL_STATUS,
            assigned_to_id=assigned_to_id,
        )
        db.add(ticket)
        db.commit()

    logger.info("ticket created ticket_id=%s unit_id=%s priority=%s", ticket.id, unit_id, priority)
    return get_ticket(db, ticket.id)


def update_ticket(
    db: Session,
    ticket_id: int,
    *,
    status: Optional[str] = None,
    assigned_to_id: Any = UNSET,
) -> Ticket:
    if status is None and assigned_to_id is UNSET:
        raise NoFields()
    if status is not None:
        _check_enum(status, TICKET_STATUSES, "status")

    with store_guard(db, "update_ticket"):
        ticket = _require(db, Ticket, ticket_id, "ticket")
        if assigned_to_id is not UNSET and assigned_to_id is not None:
            _require(db, User, assigned_to_id, "user", label="Assigned user")

        previous_status = ticket.status
        if status is not None:
            ticket.status = status
        if assigned_to_id is not UNSET:
            ticket.assigned_to_id = assigned_to_id
        db.commit()

    logger.info(
        "ticket updated ticket_id=%s status=%s->%s assigned_to_id=%s",
        ticket_id,
        previous_status,
        ticket.status,
        ticket.assigned_to_id,
    )
    return get_ticket(db, ticket_id)


def add_comment(
    db: Session,
    ticket_id: int,
    *,
    author_id: Optional[int],
    body: Optional[str],
) -> Comment:
    if author_id is None:
        raise ValidationError("authorId required", fields=("authorId",))
    if body is None:
        raise ValidationError("body required", fields=("body",))
    trimmed = body.strip()
    if not trimmed:
        raise EmptyBody()

    with store_guard(db, "add_comment"):
        _require(db, Ticket, ticket_id, "ticket")
        _require(db, User, author_id, "user", label="Author")

        comment = Comment(ticket_id=ticket_id, author_id=author_id, body=trimmed)
        db.add(comment)
        db.commit()
        db.refresh(comment)

    logger.info("comment added ticket_id=%s comment_id=%s author_id=%s", ticket_id, comment.id, author_id)
    return comment


def delete_ticket(db: Session, ticket_id: int) -> None:
    with store_guard(db, "delete_ticket"):
        ticket = _require(db, Ticket, ticket_id, "ticket")

        comments = db.query(Comment).filter(Comment.ticket_id == ticket_id).all()
        for comment in comments:
            db.delete(comment)
        # comments leave first so backends without FK cascade never see orphans
        db.flush()
        db.expire(ticket, ["comments"])

        db.delete(ticket)
        db.commit()

    logger.info("ticket deleted ticket_id=%s comments_removed=%s", ticket_id, len(comments))


def list_tickets(
    db: Session,
    *,
    status: Optional[str] = None,
    property_id: Optional[int] = None,
    unit_id: Optional[int] = None,
    tenant_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
) -> List[Ticket]:
    if status:
        _check_enum(status, TICKET_STATUSES, "status")

    with store_guard(db, "list_tickets"):
        query = _full_ticket_query(db)
        if status:
            query = query.filter(Ticket.status == status)
        if unit_id is not None:
            query = query.filter(Ticket.unit_id == unit_id)
        if tenant_id is not None:
            query = query.filter(Ticket.tenant_id == tenant_id)
        if assigned_to is not None:
            query = query.filter(Ticket.assigned_to_id == assigned_to)
        if property_id is not None:
            query = query.filter(Ticket.unit.has(Unit.property_id == property_id))

        return (
            query.order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .populate_existing()
            .all()
        )
