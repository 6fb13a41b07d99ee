# landlord_hub/routers/exports.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..deps import get_store
from ..schemas import ExportFormat
from ..services import state_store as ss
from ..services.export_service import ExportArtifact, export_maintenance, export_properties, export_transactions

router = APIRouter(prefix="/exports", tags=["exports"])


def _attachment(artifact: ExportArtifact) -> Response:
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@router.get("/properties.{fmt}")
def properties_export(fmt: ExportFormat, store: ss.Store = Depends(get_store)):
    return _attachment(export_properties(store.state.properties, fmt, today=date.today()))


@router.get("/transactions.{fmt}")
def transactions_export(fmt: ExportFormat, store: ss.Store = Depends(get_store)):
    return _attachment(export_transactions(store.state.transactions, fmt, today=date.today()))


@router.get("/maintenance.{fmt}")
def maintenance_export(fmt: ExportFormat, store: ss.Store = Depends(get_store)):
    state = store.state
    return _attachment(export_maintenance(state.maintenance_requests, state.tradespeople, fmt, today=date.today()))
