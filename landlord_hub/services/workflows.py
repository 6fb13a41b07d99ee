# landlord_hub/services/workflows.py
from __future__ import annotations

import base64
import logging
from datetime import date
from typing import Optional

from ..models import Document, MaintenanceRequest
from . import state_store as ss
from .ai_gateway import AIGateway

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Async orchestration between the store and the AI gateway.
#
# Every AI call is a single-shot await with no cancellation. Results are
# written back by record id, so two uploads in flight never overwrite each
# other's placeholders and may finish in any order.
# -----------------------------------------------------------------------------


def to_data_url(content: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}"


def data_url_payload(data_url: str) -> str:
    """Base64 part of a data: URL."""
    _, _, payload = data_url.partition(",")
    return payload


async def report_maintenance_issue(
    store: ss.Store,
    gateway: AIGateway,
    *,
    property_id: str,
    issue: str,
    today: Optional[date] = None,
) -> Optional[MaintenanceRequest]:
    """Triage first, then insert the request; unknown property -> None."""
    triage = await gateway.triage_maintenance_request(issue)
    return store.dispatch(
        ss.add_maintenance_request,
        property_id=property_id,
        issue=issue,
        urgency=triage.urgency,
        suggested_tradesperson=triage.suggested_tradesperson,
        today=today,
    )


def begin_document_upload(
    store: ss.Store,
    *,
    property_id: str,
    file_name: str,
    file_type: str,
    content: bytes,
) -> Optional[Document]:
    return store.dispatch(
        ss.add_document_placeholder,
        property_id=property_id,
        file_name=file_name,
        file_type=file_type,
        file_data_url=to_data_url(content, file_type),
    )


async def run_document_extraction(store: ss.Store, gateway: AIGateway, document_id: str) -> Optional[Document]:
    """
    Resolves a placeholder in place. If extraction raises, the same record is
    marked extraction-failed; the document is never dropped.
    """
    doc = ss.find_document(store.state, document_id)
    if doc is None:
        log.warning("document vanished before extraction", extra={"document_id": document_id})
        return None

    try:
        info = await gateway.extract_document_info(data_url_payload(doc.file_data_url), doc.file_type)
    except Exception:
        log.exception("document extraction raised", extra={"document_id": document_id})
        return store.dispatch(ss.fail_document, document_id)

    return store.dispatch(
        ss.resolve_document,
        document_id,
        expiry_date=info.expiry_date,
        document_type=info.document_type,
    )


async def upload_document(
    store: ss.Store,
    gateway: AIGateway,
    *,
    property_id: str,
    file_name: str,
    file_type: str,
    content: bytes,
) -> Optional[Document]:
    placeholder = begin_document_upload(
        store,
        property_id=property_id,
        file_name=file_name,
        file_type=file_type,
        content=content,
    )
    if placeholder is None:
        return None
    return await run_document_extraction(store, gateway, placeholder.id)
