from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from leaselink.core.database import get_db
from leaselink.deps import get_current_identity, require_role
from leaselink.services import ticket_workflow
from leaselink.services.serializers import comment_to_dict, ticket_to_dict
from leaselink.services.session_tokens import Identity

router = APIRouter(
    prefix="/api/tickets",
    tags=["tickets"],
    dependencies=[Depends(get_current_identity)],
)


class TicketCreate(BaseModel):
    unitId: Optional[int] = None
    tenantId: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    assignedToId: Optional[int] = None


class TicketUpdate(BaseModel):
    status: Optional[str] = None
    assignedToId: Optional[int] = None


class CommentCreate(BaseModel):
    authorId: Optional[int] = None
    body: Optional[str] = None


@router.get("")
def list_tickets(
    status: Optional[str] = None,
    propertyId: Optional[int] = None,
    unitId: Optional[int] = None,
    tenantId: Optional[int] = None,
    assignedTo: Optional[int] = None,
    db: Session = Depends(get_db),
):
    tickets = ticket_workflow.list_tickets(
        db,
        status=status,
        property_id=propertyId,
        unit_id=unitId,
        tenant_id=tenantId,
        assigned_to=assignedTo,
    )
    return [ticket_to_dict(ticket) for ticket in tickets]


@router.get("/{ticket_id}")
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return ticket_to_dict(ticket_workflow.get_ticket(db, ticket_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_ticket(payload: TicketCreate, db: Session = Depends(get_db)):
    ticket = ticket_workflow.create_ticket(
        db,
        unit_id=payload.unitId,
        tenant_id=payload.tenantId,
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        assigned_to_id=payload.assignedToId,
    )
    return ticket_to_dict(ticket)


@router.patch("/{ticket_id}")
def update_ticket(ticket_id: int, payload: TicketUpdate, db: Session = Depends(get_db)):
    # an explicit null clears the assignment; an absent key leaves it alone
    assigned_to_id = (
        payload.assignedToId if "assignedToId" in payload.model_fields_set else ticket_workflow.UNSET
    )
    ticket = ticket_workflow.update_ticket(
        db,
        ticket_id,
        status=payload.status,
        assigned_to_id=assigned_to_id,
    )
    return ticket_to_dict(ticket)


@router.post("/{ticket_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    ticket_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    author_id = payload.authorId if payload.authorId is not None else identity.id
    comment = ticket_workflow.add_comment(db, ticket_id, author_id=author_id, body=payload.body)
    return comment_to_dict(comment)


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_role(["ADMIN", "MANAGER"])),
):
    ticket_workflow.delete_ticket(db, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
