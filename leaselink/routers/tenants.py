from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from leaselink.core.database import get_db
from leaselink.deps import get_current_identity
from leaselink.models.tenant import Tenant
from leaselink.models.unit import Unit
from leaselink.services.errors import NotFoundError, ValidationError, store_guard
from leaselink.services.serializers import tenant_to_dict

router = APIRouter(
    prefix="/api/tenants",
    tags=["tenants"],
    dependencies=[Depends(get_current_identity)],
)


class TenantCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    unitId: Optional[int] = None


@router.get("")
def list_tenants(unitId: Optional[int] = None, db: Session = Depends(get_db)):
    with store_guard(db, "list_tenants"):
        query = db.query(Tenant)
        if unitId is not None:
            query = query.filter(Tenant.unit_id == unitId)
        tenants = query.order_by(Tenant.name.asc(), Tenant.id.asc()).all()
    return [tenant_to_dict(tenant) for tenant in tenants]


@router.get("/{tenant_id}")
def get_tenant(tenant_id: int, db: Session = Depends(get_db)):
    with store_guard(db, "get_tenant"):
        tenant = db.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError("tenant")
    return tenant_to_dict(tenant)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tenant(payload: TenantCreate, db: Session = Depends(get_db)):
    if not (payload.name or "").strip():
        raise ValidationError("name is required", fields=("name",))

    with store_guard(db, "create_tenant"):
        if payload.unitId is not None and db.get(Unit, payload.unitId) is None:
            raise NotFoundError("unit")

        tenant = Tenant(
            name=payload.name.strip(),
            email=payload.email,
            phone=payload.phone,
            unit_id=payload.unitId,
        )
        db.add(tenant)
        db.commit()
        db.refresh(tenant)

    return tenant_to_dict(tenant)
