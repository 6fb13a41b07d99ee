# landlord_hub/routers/documents.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile

from ..deps import get_gateway, get_store
from ..schemas import DocumentOut
from ..services import state_store as ss
from ..services.ai_gateway import AIGateway
from ..services.ownership import must_get_document, must_get_property
from ..services.workflows import begin_document_upload, run_document_extraction

router = APIRouter(prefix="/documents", tags=["documents"])


def _accepted(content_type: str) -> bool:
    return content_type.startswith("image/") or content_type == "application/pdf"


def _out(state: ss.AppState, doc, today: date) -> DocumentOut:
    prop = ss.find_property(state, doc.property_id)
    return DocumentOut.from_record(doc, property_address=prop.address if prop else None, today=today)


@router.get("", response_model=list[DocumentOut])
def list_documents(
    property_id: str | None = Query(default=None),
    store: ss.Store = Depends(get_store),
):
    state = store.state
    today = date.today()
    return [_out(state, d, today) for d in state.documents if not property_id or d.property_id == property_id]


@router.post("", response_model=DocumentOut, status_code=202)
async def upload_document(
    background_tasks: BackgroundTasks,
    property_id: str = Form(...),
    file: UploadFile = File(...),
    store: ss.Store = Depends(get_store),
    gateway: AIGateway = Depends(get_gateway),
):
    """
    Stores the file as a placeholder and returns it straight away.
    Expiry date and document type are filled in by a background extraction
    that writes back to the same document id.
    """
    must_get_property(store.state, property_id=property_id)

    content_type = (file.content_type or "").lower()
    if not _accepted(content_type):
        raise HTTPException(status_code=415, detail="only images and PDF documents are accepted")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="empty file")

    doc = begin_document_upload(
        store,
        property_id=property_id,
        file_name=file.filename or "document",
        file_type=content_type,
        content=content,
    )
    background_tasks.add_task(run_document_extraction, store, gateway, doc.id)
    return _out(store.state, doc, date.today())


@router.get("/{document_id}", response_model=DocumentOut)
def get_document(document_id: str, store: ss.Store = Depends(get_store)):
    doc = must_get_document(store.state, document_id=document_id)
    return _out(store.state, doc, date.today())
