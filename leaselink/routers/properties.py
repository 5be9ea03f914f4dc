from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session, selectinload

from leaselink.core.database import get_db
from leaselink.deps import get_current_identity, require_role
from leaselink.models.property import Property
from leaselink.services.errors import NotFoundError, ValidationError, store_guard
from leaselink.services.serializers import property_to_dict
from leaselink.services.session_tokens import Identity

router = APIRouter(
    prefix="/api/properties",
    tags=["properties"],
    dependencies=[Depends(get_current_identity)],
)
logger = logging.getLogger(__name__)


class PropertyPayload(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


def _get_property_or_404(db: Session, property_id: int) -> Property:
    prop = (
        db.query(Property)
        .options(selectinload(Property.units))
        .filter(Property.id == property_id)
        .first()
    )
    if prop is None:
        raise NotFoundError("property")
    return prop


@router.get("")
def list_properties(db: Session = Depends(get_db)):
    with store_guard(db, "list_properties"):
        properties = db.query(Property).options(selectinload(Property.units)).order_by(Property.id.asc()).all()
    return [property_to_dict(prop, with_units=True) for prop in properties]


@router.get("/{property_id}")
def get_property(property_id: int, db: Session = Depends(get_db)):
    with store_guard(db, "get_property"):
        prop = _get_property_or_404(db, property_id)
    return property_to_dict(prop, with_units=True)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_property(payload: PropertyPayload, db: Session = Depends(get_db)):
    if not (payload.name or "").strip() or not (payload.address or "").strip():
        raise ValidationError("name and address are required", fields=("name", "address"))

    with store_guard(db, "create_property"):
        prop = Property(
            name=payload.name.strip(),
            address=payload.address.strip(),
            city=payload.city,
            state=payload.state,
            zip=payload.zip,
        )
        db.add(prop)
        db.commit()
        db.refresh(prop)

    logger.info("property created property_id=%s", prop.id)
    return property_to_dict(prop)


@router.put("/{property_id}")
def update_property(property_id: int, payload: PropertyPayload, db: Session = Depends(get_db)):
    changes = {field: getattr(payload, field) for field in payload.model_fields_set}
    for field in ("name", "address"):
        if field in changes and not (changes[field] or "").strip():
            raise ValidationError(f"{field} cannot be empty", fields=(field,))

    with store_guard(db, "update_property"):
        prop = _get_property_or_404(db, property_id)
        for field, value in changes.items():
            setattr(prop, field, value.strip() if field in {"name", "address"} else value)
        db.commit()
        db.refresh(prop)

    return property_to_dict(prop)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_property(
    property_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_role(["ADMIN", "MANAGER"])),
):
    with store_guard(db, "delete_property"):
        prop = _get_property_or_404(db, property_id)
        db.delete(prop)
        db.commit()

    logger.info("property deleted property_id=%s", property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
