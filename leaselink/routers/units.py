from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from leaselink.core.database import get_db
from leaselink.deps import get_current_identity
from leaselink.models.property import Property
from leaselink.models.unit import UNIT_STATUSES, Unit
from leaselink.services.errors import NotFoundError, ValidationError, store_guard
from leaselink.services.serializers import unit_to_dict

router = APIRouter(
    prefix="/api/units",
    tags=["units"],
    dependencies=[Depends(get_current_identity)],
)


class UnitCreate(BaseModel):
    propertyId: Optional[int] = None
    unitNumber: Optional[str] = None
    beds: Optional[int] = None
    baths: Optional[int] = None
    sqft: Optional[int] = None
    status: Optional[str] = None


@router.get("")
def list_units(propertyId: Optional[int] = None, db: Session = Depends(get_db)):
    with store_guard(db, "list_units"):
        query = db.query(Unit)
        if propertyId is not None:
            query = query.filter(Unit.property_id == propertyId)
        units = query.order_by(Unit.id.asc()).all()
    return [unit_to_dict(unit) for unit in units]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_unit(payload: UnitCreate, db: Session = Depends(get_db)):
    if payload.propertyId is None or not (payload.unitNumber or "").strip():
        raise ValidationError("propertyId and unitNumber are required", fields=("propertyId", "unitNumber"))

    unit_status = (payload.status or "VACANT").strip().upper()
    if unit_status not in UNIT_STATUSES:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(UNIT_STATUSES)}",
            fields=("status",),
        )

    with store_guard(db, "create_unit"):
        if db.get(Property, payload.propertyId) is None:
            raise NotFoundError("property")

        unit = Unit(
            property_id=payload.propertyId,
            unit_number=payload.unitNumber.strip(),
            beds=payload.beds,
            baths=payload.baths,
            sqft=payload.sqft,
            status=unit_status,
        )
        db.add(unit)
        db.commit()
        db.refresh(unit)

    return unit_to_dict(unit)
