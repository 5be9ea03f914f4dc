from __future__ import annotations

from typing import Any, Dict, Optional

from leaselink.models.comment import Comment
from leaselink.models.property import Property
from leaselink.models.tenant import Tenant
from leaselink.models.ticket import Ticket
from leaselink.models.unit import Unit
from leaselink.models.user import User


def user_summary(user: Optional[User]) -> Optional[Dict[str, Any]]:
    # never expose the stored credential
    if user is None:
        return None
    return {"id": user.id, "email": user.email, "role": user.role}


def property_to_dict(prop: Property, *, with_units: bool = False) -> Dict[str, Any]:
    data = {
        "id": prop.id,
        "name": prop.name,
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "zip": prop.zip,
        "createdAt": prop.created_at,
    }
    if with_units:
        data["units"] = [unit_to_dict(unit) for unit in prop.units]
    return data


def unit_to_dict(unit: Unit, *, with_property: bool = False) -> Dict[str, Any]:
    data = {
        "id": unit.id,
        "propertyId": unit.property_id,
        "unitNumber": unit.unit_number,
        "beds": unit.beds,
        "baths": unit.baths,
        "sqft": unit.sqft,
        "status": unit.status,
        "createdAt": unit.created_at,
    }
    if with_property:
        data["property"] = property_to_dict(unit.property) if unit.property is not None else None
    return data


def tenant_to_dict(tenant: Optional[Tenant]) -> Optional[Dict[str, Any]]:
    if tenant is None:
        return None
    return {
        "id": tenant.id,
        "name": tenant.name,
        "email": tenant.email,
        "phone": tenant.phone,
        "unitId": tenant.unit_id,
        "createdAt": tenant.created_at,
    }


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "ticketId": comment.ticket_id,
        "authorId": comment.author_id,
        "body": comment.body,
        "createdAt": comment.created_at,
        "author": user_summary(comment.author),
    }


def ticket_to_dict(ticket: Ticket) -> Dict[str, Any]:
    return {
        "id": ticket.id,
        "unitId": ticket.unit_id,
        "tenantId": ticket.tenant_id,
        "title": ticket.title,
        "description": ticket.description,
        "priority": ticket.priority,
        "status": ticket.status,
        "assignedToId": ticket.assigned_to_id,
        "createdAt": ticket.created_at,
        "updatedAt": ticket.updated_at,
        "unit": unit_to_dict(ticket.unit, with_property=True) if ticket.unit is not None else None,
        "tenant": tenant_to_dict(ticket.tenant),
        "assignedTo": user_summary(ticket.assigned_to),
        "comments": [comment_to_dict(comment) for comment in ticket.comments],
    }
