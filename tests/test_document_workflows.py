# tests/test_document_workflows.py
from __future__ import annotations

import asyncio
import base64
from datetime import date

from landlord_hub.integrations.gemini_client import AIClientError
from landlord_hub.models import EXTRACTING, EXTRACTION_FAILED, ExtractionState, MaintenanceUrgency
from landlord_hub.seed.demo_data import demo_state
from landlord_hub.services import state_store as ss
from landlord_hub.services.ai_gateway import AIGateway, DocumentInfo
from landlord_hub.services.workflows import (
    begin_document_upload,
    data_url_payload,
    report_maintenance_issue,
    run_document_extraction,
    to_data_url,
    upload_document,
)

from conftest import FakeCompletionClient


class ExplodingGateway(AIGateway):
    async def extract_document_info(self, data_b64: str, mime_type: str) -> DocumentInfo:
        raise RuntimeError("reader crashed")


class SlowFirstGateway(AIGateway):
    """Answers by file content; the first upload resolves last."""

    async def extract_document_info(self, data_b64: str, mime_type: str) -> DocumentInfo:
        name = base64.b64decode(data_b64).decode()
        if name == "gas":
            await asyncio.sleep(0.05)
            return DocumentInfo(expiry_date="2025-01-01", document_type="Gas Safety Certificate")
        return DocumentInfo(expiry_date="2026-02-02", document_type="Energy Performance Certificate (EPC)")


def test_data_url_round_trip():
    url = to_data_url(b"abc", "image/png")
    assert url == "data:image/png;base64,YWJj"
    assert data_url_payload(url) == "YWJj"


def test_placeholder_then_resolve_keeps_id():
    store = ss.Store(demo_state())
    fake = FakeCompletionClient({"expiryDate": "2025-03-01", "documentType": "Gas Safety Certificate"})

    placeholder = begin_document_upload(store, property_id="p1", file_name="gas.pdf", file_type="application/pdf", content=b"%PDF")
    assert placeholder.expiry_date == EXTRACTING
    assert placeholder.document_type == EXTRACTING
    assert placeholder.extraction_state == ExtractionState.PENDING

    doc = asyncio.run(run_document_extraction(store, AIGateway(fake), placeholder.id))
    assert doc.id == placeholder.id
    assert doc.expiry_date == "2025-03-01"
    assert doc.document_type == "Gas Safety Certificate"
    assert doc.extraction_state == ExtractionState.READY
    assert len(store.state.documents) == 1


def test_ai_failure_resolves_to_no_expiry_other():
    store = ss.Store(demo_state())
    doc = asyncio.run(
        upload_document(
            store,
            AIGateway(FakeCompletionClient(AIClientError("down"))),
            property_id="p1",
            file_name="scan.png",
            file_type="image/png",
            content=b"\x89PNG",
        )
    )
    assert doc.expiry_date is None
    assert doc.document_type == "Other"
    assert doc.extraction_state == ExtractionState.READY


def test_extraction_crash_keeps_record_marked_failed():
    store = ss.Store(demo_state())
    doc = asyncio.run(
        upload_document(
            store,
            ExplodingGateway(FakeCompletionClient()),
            property_id="p1",
            file_name="eicr.pdf",
            file_type="application/pdf",
            content=b"%PDF",
        )
    )
    assert len(store.state.documents) == 1
    kept = store.state.documents[0]
    assert kept.id == doc.id
    assert kept.expiry_date == EXTRACTION_FAILED
    assert kept.document_type is None
    assert kept.extraction_state == ExtractionState.FAILED


def test_concurrent_uploads_write_back_to_their_own_placeholders():
    store = ss.Store(demo_state())
    gw = SlowFirstGateway(FakeCompletionClient())

    async def both():
        return await asyncio.gather(
            upload_document(store, gw, property_id="p1", file_name="gas.pdf", file_type="application/pdf", content=b"gas"),
            upload_document(store, gw, property_id="p1", file_name="epc.pdf", file_type="application/pdf", content=b"epc"),
        )

    gas, epc = asyncio.run(both())
    docs = {d.file_name: d for d in store.state.documents}
    assert docs["gas.pdf"].id == gas.id
    assert docs["gas.pdf"].expiry_date == "2025-01-01"
    assert docs["epc.pdf"].id == epc.id
    assert docs["epc.pdf"].document_type == "Energy Performance Certificate (EPC)"


def test_upload_to_unknown_property_adds_nothing():
    store = ss.Store(demo_state())
    out = asyncio.run(
        upload_document(store, AIGateway(FakeCompletionClient()), property_id="zzz", file_name="a.pdf", file_type="application/pdf", content=b"x")
    )
    assert out is None
    assert store.state.documents == ()


def test_report_issue_uses_triage_fallback_when_ai_is_down():
    store = ss.Store(demo_state())
    req = asyncio.run(
        report_maintenance_issue(
            store,
            AIGateway(FakeCompletionClient(AIClientError("down"))),
            property_id="p4",
            issue="Damp patch in bedroom",
            today=date(2024, 6, 3),
        )
    )
    assert req.urgency == MaintenanceUrgency.MEDIUM
    assert req.suggested_tradesperson == "General Handyman"
    assert store.state.maintenance_requests[0].id == req.id
