# landlord_hub/routers/dashboard.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..deps import get_gateway, get_store
from ..schemas import ComplianceAlertOut, DashboardStatsOut, NarrativeOut, SuggestionOut
from ..services import state_store as ss
from ..services.ai_gateway import AIGateway, AIServiceError
from ..services.dashboard_rollups import compliance_alerts, portfolio_rollup

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsOut)
def stats(store: ss.Store = Depends(get_store)):
    return portfolio_rollup(store.state)


@router.get("/compliance", response_model=list[ComplianceAlertOut])
def compliance(store: ss.Store = Depends(get_store)):
    """Expired documents and those due within the alert window, soonest first."""
    return compliance_alerts(
        store.state,
        today=date.today(),
        window_days=settings.dashboard_compliance_window_days,
    )


@router.get("/suggestions", response_model=list[SuggestionOut])
async def suggestions(store: ss.Store = Depends(get_store), gateway: AIGateway = Depends(get_gateway)):
    state = store.state
    try:
        return await gateway.get_top_suggestions(
            state.properties,
            state.maintenance_requests,
            state.tenants,
            today=date.today(),
        )
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/summary", response_model=NarrativeOut)
async def summary(store: ss.Store = Depends(get_store), gateway: AIGateway = Depends(get_gateway)):
    state = store.state
    try:
        text = await gateway.get_portfolio_summary(state.properties, state.maintenance_requests, state.tenants)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"text": text}
