# landlord_hub/routers/reports.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from ..config import settings
from ..deps import get_gateway, get_store
from ..domain import cashflow
from ..schemas import TaxSummaryIn, TaxSummaryOut
from ..services import state_store as ss
from ..services.ai_gateway import AIGateway, AIServiceError
from ..services.export_service import PDF_MEDIA_TYPE, tax_summary_filename, tax_summary_pdf
from ..services.ownership import must_get_property

router = APIRouter(prefix="/reports", tags=["reports"])

NO_TRANSACTIONS_MESSAGE = "No transactions found for the selected period and property."


def _figures(state: ss.AppState, *, tax_year: str, property_id: str) -> TaxSummaryOut:
    try:
        cashflow.parse_tax_year(tax_year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    label = "All Properties"
    if property_id != cashflow.ALL_PROPERTIES:
        label = must_get_property(state, property_id=property_id).address

    rep = cashflow.tax_year_report(state.transactions, tax_year=tax_year, property_id=property_id)
    return TaxSummaryOut(
        tax_year=tax_year,
        property_id=property_id,
        property_label=label,
        income=rep.income,
        expense=rep.expense,
        net=rep.net,
        transaction_count=len(rep.transactions),
        message=None if rep.transactions else NO_TRANSACTIONS_MESSAGE,
    )


async def _summary(state: ss.AppState, gateway: AIGateway, payload: TaxSummaryIn) -> TaxSummaryOut:
    out = _figures(state, tax_year=payload.tax_year, property_id=payload.property_id)
    if out.transaction_count == 0:
        return out

    txns = cashflow.tax_year_report(
        state.transactions, tax_year=payload.tax_year, property_id=payload.property_id
    ).transactions
    try:
        text = await gateway.get_tax_summary(txns, out.property_label, payload.tax_year)
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return out.model_copy(update={"report": text})


@router.get("/tax-years", response_model=list[str])
def tax_years():
    """Most recent UK tax years, current one first."""
    return cashflow.tax_year_options(date.today(), settings.tax_year_options)


@router.get("/tax-year", response_model=TaxSummaryOut)
def tax_year_figures(
    tax_year: str = Query(...),
    property_id: str = Query(default=cashflow.ALL_PROPERTIES),
    store: ss.Store = Depends(get_store),
):
    return _figures(store.state, tax_year=tax_year, property_id=property_id)


@router.post("/tax-summary", response_model=TaxSummaryOut)
async def tax_summary(
    payload: TaxSummaryIn,
    store: ss.Store = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    return await _summary(store.state, gateway, payload)


@router.post("/tax-summary/pdf")
async def tax_summary_download(
    payload: TaxSummaryIn,
    store: ss.Store = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    out = await _summary(store.state, gateway, payload)
    pdf = tax_summary_pdf(
        report=out.report or out.message or "",
        property_label=out.property_label,
        tax_year=out.tax_year,
    )
    filename = tax_summary_filename(out.tax_year, out.property_id)
    return Response(
        content=pdf,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
