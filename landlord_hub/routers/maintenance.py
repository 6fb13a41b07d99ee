# landlord_hub/routers/maintenance.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_gateway, get_store
from ..models import MaintenanceStatus
from ..schemas import (
    AssignIn,
    CompleteIn,
    MaintenanceCreate,
    MaintenanceOut,
    QuoteCreate,
    StatusIn,
    WorkCompleteIn,
)
from ..services import state_store as ss
from ..services.ai_gateway import AIGateway
from ..services.ownership import must_get_property, must_get_request, must_get_tradesperson
from ..services.workflows import report_maintenance_issue

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.get("", response_model=list[MaintenanceOut])
def list_requests(
    property_id: str | None = Query(default=None),
    status: MaintenanceStatus | None = Query(default=None),
    store: ss.Store = Depends(get_store),
):
    rows = list(store.state.maintenance_requests)
    if property_id:
        rows = [r for r in rows if r.property_id == property_id]
    if status is not None:
        rows = [r for r in rows if r.status == status]
    return rows


@router.post("", response_model=MaintenanceOut)
async def report_issue(
    payload: MaintenanceCreate,
    store: ss.Store = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Runs AI triage on the issue text, then records the request.
    Triage never fails the call: a failed inference falls back to Medium urgency.
    """
    must_get_property(store.state, property_id=payload.property_id)
    return await report_maintenance_issue(
        store,
        gateway,
        property_id=payload.property_id,
        issue=payload.issue,
        today=date.today(),
    )


@router.get("/{request_id}", response_model=MaintenanceOut)
def get_request(request_id: str, store: ss.Store = Depends(get_store)):
    return must_get_request(store.state, request_id=request_id)


@router.post("/{request_id}/assign", response_model=MaintenanceOut)
def assign(request_id: str, payload: AssignIn, store: ss.Store = Depends(get_store)):
    must_get_request(store.state, request_id=request_id)
    must_get_tradesperson(store.state, tradesperson_id=payload.tradesperson_id)
    return store.dispatch(ss.assign_tradesperson, request_id, payload.tradesperson_id)


@router.post("/{request_id}/quotes", response_model=MaintenanceOut)
def add_quote(request_id: str, payload: QuoteCreate, store: ss.Store = Depends(get_store)):
    must_get_request(store.state, request_id=request_id)
    must_get_tradesperson(store.state, tradesperson_id=payload.tradesperson_id)
    return store.dispatch(ss.add_quote, request_id, **payload.model_dump())


@router.post("/{request_id}/quotes/{quote_id}/approve", response_model=MaintenanceOut)
def approve_quote(request_id: str, quote_id: str, store: ss.Store = Depends(get_store)):
    req = must_get_request(store.state, request_id=request_id)
    if not any(q.id == quote_id for q in req.quotes):
        raise HTTPException(status_code=404, detail="quote not found")
    return store.dispatch(ss.approve_quote, request_id, quote_id)


@router.post("/{request_id}/status", response_model=MaintenanceOut)
def advance_status(request_id: str, payload: StatusIn, store: ss.Store = Depends(get_store)):
    must_get_request(store.state, request_id=request_id)
    return store.dispatch(ss.advance_maintenance_status, request_id, payload.status, today=date.today())


@router.post("/{request_id}/work-complete", response_model=MaintenanceOut)
def work_complete(request_id: str, payload: WorkCompleteIn, store: ss.Store = Depends(get_store)):
    must_get_request(store.state, request_id=request_id)
    return store.dispatch(ss.mark_work_complete, request_id, **payload.model_dump())


@router.post("/{request_id}/complete", response_model=MaintenanceOut)
def complete(request_id: str, payload: CompleteIn | None = None, store: ss.Store = Depends(get_store)):
    must_get_request(store.state, request_id=request_id)
    cost = payload.cost if payload is not None else None
    return store.dispatch(ss.complete_maintenance_request, request_id, cost=cost, today=date.today())
