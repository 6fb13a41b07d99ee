# landlord_hub/routers/finance.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..deps import get_store
from ..domain import cashflow
from ..models import TransactionType
from ..schemas import MonthBucketOut, PeriodReportOut, TotalsOut, TransactionCreate, TransactionOut
from ..services import state_store as ss
from ..services.ownership import must_get_property

router = APIRouter(prefix="/finance", tags=["finance"])


@router.post("/transactions", response_model=TransactionOut)
def create_txn(payload: TransactionCreate, store: ss.Store = Depends(get_store)):
    must_get_property(store.state, property_id=payload.property_id)

    data = payload.model_dump()
    data["date"] = payload.date.isoformat()
    return store.dispatch(ss.add_transaction, **data)


@router.get("/transactions", response_model=list[TransactionOut])
def list_txns(
    property_id: str | None = Query(default=None),
    type: TransactionType | None = Query(default=None),
    limit: int = Query(default=500, ge=1, le=2000),
    store: ss.Store = Depends(get_store),
):
    rows = list(store.state.transactions)
    if property_id and property_id != cashflow.ALL_PROPERTIES:
        rows = [t for t in rows if t.property_id == property_id]
    if type is not None:
        rows = [t for t in rows if t.type == type]
    return rows[:limit]


@router.get("/totals", response_model=TotalsOut)
def get_totals(store: ss.Store = Depends(get_store)):
    return cashflow.totals(store.state.transactions)


@router.get("/cashflow", response_model=list[MonthBucketOut])
def get_cashflow(store: ss.Store = Depends(get_store)):
    """Income and expense for the last twelve calendar months, oldest first."""
    return cashflow.twelve_month_series(store.state.transactions, date.today())


@router.get("/years", response_model=list[int])
def get_years(store: ss.Store = Depends(get_store)):
    return cashflow.available_years(store.state.transactions, date.today())


@router.get("/report", response_model=PeriodReportOut)
def get_report(
    year: int = Query(...),
    month: int | None = Query(default=None, ge=1, le=12),
    property_id: str = Query(default=cashflow.ALL_PROPERTIES),
    store: ss.Store = Depends(get_store),
):
    state = store.state
    property_name = "All Properties"
    if property_id != cashflow.ALL_PROPERTIES:
        property_name = must_get_property(state, property_id=property_id).address

    rep = cashflow.period_report(state.transactions, year=year, month=month, property_id=property_id)
    return {
        "title": cashflow.report_title(year=year, month=month, property_name=property_name),
        "income": rep.income,
        "expense": rep.expense,
        "net": rep.net,
        "transactions": rep.transactions,
    }
