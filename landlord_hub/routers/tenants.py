# landlord_hub/routers/tenants.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_store
from ..models import PropertyStatus
from ..schemas import PropertyOut, TenantCreate, TenantOut
from ..services import state_store as ss
from ..services.ownership import must_get_property

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", response_model=TenantOut)
def create_tenant(payload: TenantCreate, store: ss.Store = Depends(get_store)):
    prop = must_get_property(store.state, property_id=payload.property_id)
    if ss.tenant_for_property(store.state, prop.id) is not None:
        raise HTTPException(status_code=409, detail="property already has a tenant")
    if prop.status == PropertyStatus.UNDER_OFFER:
        raise HTTPException(status_code=409, detail="property is under offer")

    data = payload.model_dump()
    data["lease_start_date"] = payload.lease_start_date.isoformat()
    data["lease_end_date"] = payload.lease_end_date.isoformat()
    return store.dispatch(ss.add_tenant, **data)


@router.get("", response_model=list[TenantOut])
def list_tenants(store: ss.Store = Depends(get_store)):
    return list(store.state.tenants)


@router.get("/available-properties", response_model=list[PropertyOut])
def available_properties(store: ss.Store = Depends(get_store)):
    """Properties a new tenancy can be created against."""
    return ss.available_properties_for_tenancy(store.state)
