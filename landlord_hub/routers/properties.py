# landlord_hub/routers/properties.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from ..deps import get_store
from ..schemas import DocumentOut, PropertyCreate, PropertyOut, PropertyViewOut
from ..services import state_store as ss
from ..services.ownership import must_get_property

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyOut)
def create_property(payload: PropertyCreate, store: ss.Store = Depends(get_store)):
    return store.dispatch(ss.add_property, **payload.model_dump())


@router.get("", response_model=list[PropertyOut])
def list_properties(store: ss.Store = Depends(get_store)):
    return list(store.state.properties)


@router.get("/{property_id}", response_model=PropertyViewOut)
def get_property(property_id: str, store: ss.Store = Depends(get_store)):
    state = store.state
    prop = must_get_property(state, property_id=property_id)
    today = date.today()

    return {
        "property": prop,
        "tenant": ss.tenant_for_property(state, prop.id),
        "maintenance_requests": [m for m in state.maintenance_requests if m.property_id == prop.id],
        "transactions": [t for t in state.transactions if t.property_id == prop.id],
        "documents": [
            DocumentOut.from_record(d, property_address=prop.address, today=today)
            for d in state.documents
            if d.property_id == prop.id
        ],
    }
