# landlord_hub/routers/tradespeople.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_store
from ..schemas import TradespersonCreate, TradespersonOut
from ..services import state_store as ss

router = APIRouter(prefix="/tradespeople", tags=["tradespeople"])


@router.post("", response_model=TradespersonOut)
def create_tradesperson(payload: TradespersonCreate, store: ss.Store = Depends(get_store)):
    return store.dispatch(ss.add_tradesperson, **payload.model_dump())


@router.get("", response_model=list[TradespersonOut])
def list_tradespeople(store: ss.Store = Depends(get_store)):
    return list(store.state.tradespeople)
