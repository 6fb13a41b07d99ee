# tests/test_api_routes.py
from __future__ import annotations

import csv
import io
from datetime import date

from landlord_hub.deps import store
from landlord_hub.integrations.gemini_client import AIClientError
from landlord_hub.models import EXTRACTION_FAILED


def test_health_and_enums(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert "X-Request-ID" in r.headers

    enums = client.get("/api/meta/enums").json()
    assert enums["maintenance_status"][0] == "New"
    assert "Under Offer" in enums["property_status"]


def test_request_id_is_echoed(client):
    r = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_property_create_and_view(client):
    r = client.post(
        "/api/properties",
        json={"address": "9 Mill Lane, York", "type": "LTD", "status": "Vacant", "rent_status": "Overdue", "current_rent": 700},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["rent_status"] == "Paid"

    view = client.get("/api/properties/p1").json()
    assert view["property"]["address"] == "123 Coronation Street, Manchester"
    assert view["tenant"]["name"] == "John Smith"
    assert {m["id"] for m in view["maintenance_requests"]} == {"m2"}

    assert client.get("/api/properties/nope").status_code == 404


def test_blank_address_rejected(client):
    r = client.post("/api/properties", json={"address": "  ", "current_rent": 700})
    assert r.status_code == 422


def test_tenant_conflicts_and_success(client):
    payload = {
        "name": "Rose Tyler",
        "property_id": "p1",
        "lease_start_date": "2024-06-01",
        "lease_end_date": "2025-05-31",
        "deposit_amount": 1400,
    }
    assert client.post("/api/tenants", json=payload).status_code == 409
    assert client.post("/api/tenants", json={**payload, "property_id": "p5"}).status_code == 409

    r = client.post("/api/tenants", json={**payload, "property_id": "p3"})
    assert r.status_code == 200, r.text
    assert r.json()["deposit_scheme"] == "Tenancy Deposit Scheme (TDS)"
    assert client.get("/api/tenants/available-properties").json() == []


def test_rent_payment_via_finance_endpoint(client):
    r = client.post(
        "/api/finance/transactions",
        json={"property_id": "p2", "type": "Income", "description": "June Rent", "amount": 2500, "date": "2024-06-01"},
    )
    assert r.status_code == 200, r.text
    props = {p["id"]: p for p in client.get("/api/properties").json()}
    assert props["p2"]["rent_status"] == "Paid"

    totals = client.get("/api/finance/totals").json()
    assert totals["income"] == 16450.0
    assert totals["expense"] == 310.0


def test_finance_report_and_years(client):
    assert client.get("/api/finance/years").json() == [2024]

    rep = client.get("/api/finance/report", params={"year": 2024, "month": 4, "property_id": "p4"}).json()
    assert rep["title"] == "Report for April 2024 - 45 Broad Street, Bristol"
    assert (rep["income"], rep["expense"], rep["net"]) == (950.0, 150.0, 800.0)

    series = client.get("/api/finance/cashflow").json()
    assert len(series) == 12
    assert set(series[0]) == {"key", "month", "income", "expense"}


def test_maintenance_report_triage_and_lifecycle(client, fake_ai):
    fake_ai.replies.append({"urgency": "Emergency", "suggestedTradesperson": "Gas Engineer"})
    r = client.post("/api/maintenance", json={"property_id": "p3", "issue": "Smell of gas in hallway"})
    assert r.status_code == 200, r.text
    req = r.json()
    assert req["urgency"] == "Emergency"
    assert req["status"] == "New"
    assert client.get("/api/maintenance").json()[0]["id"] == req["id"]

    rid = req["id"]
    q = client.post(f"/api/maintenance/{rid}/quotes", json={"tradesperson_id": "tp2", "amount": 180, "details": "today"}).json()
    quote_id = q["quotes"][0]["id"]
    assert q["status"] == "Awaiting Quote"

    approved = client.post(f"/api/maintenance/{rid}/quotes/{quote_id}/approve").json()
    assert approved["assigned_tradesperson_id"] == "tp2"
    assert approved["cost"] == 180

    assert client.post(f"/api/maintenance/{rid}/quotes/{quote_id}/approve").status_code == 409
    assert client.post(f"/api/maintenance/{rid}/status", json={"status": "New"}).status_code == 409

    done = client.post(f"/api/maintenance/{rid}/complete", json={}).json()
    assert done["status"] == "Completed"
    txns = client.get("/api/finance/transactions", params={"property_id": "p3"}).json()
    assert any(t["description"] == "Maintenance: Smell of gas in hallway" and t["amount"] == 180 for t in txns)


def test_maintenance_report_survives_ai_outage(client, fake_ai):
    fake_ai.replies.append(AIClientError("down"))
    r = client.post("/api/maintenance", json={"property_id": "p1", "issue": "Squeaky door"})
    assert r.status_code == 200
    assert r.json()["urgency"] == "Medium"
    assert r.json()["suggested_tradesperson"] == "General Handyman"


def test_maintenance_unknown_ids_404(client):
    assert client.post("/api/maintenance", json={"property_id": "nope", "issue": "x"}).status_code == 404
    assert client.post("/api/maintenance/m1/assign", json={"tradesperson_id": "nobody"}).status_code == 404
    assert client.post("/api/maintenance/m1/quotes/q_missing/approve").status_code == 404


def test_document_upload_extracts_in_background(client, fake_ai):
    fake_ai.replies.append({"expiryDate": "2099-01-01", "documentType": "Gas Safety Certificate"})
    r = client.post(
        "/api/documents",
        data={"property_id": "p1"},
        files={"file": ("gas.pdf", b"%PDF-1.4 fake", "application/pdf")},
    )
    assert r.status_code == 202, r.text
    placeholder = r.json()
    assert placeholder["extraction_state"] == "pending"
    assert placeholder["compliance"] is None

    doc = client.get(f"/api/documents/{placeholder['id']}").json()
    assert doc["extraction_state"] == "ready"
    assert doc["expiry_date"] == "2099-01-01"
    assert doc["compliance"]["status"] == "Valid"
    assert doc["file_data_url"].startswith("data:application/pdf;base64,")


def test_document_upload_rejects_other_types(client):
    r = client.post(
        "/api/documents",
        data={"property_id": "p1"},
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert r.status_code == 415


def test_document_extraction_crash_is_recorded(client, monkeypatch):
    from landlord_hub.services.ai_gateway import AIGateway

    async def boom(self, data_b64, mime_type):
        raise RuntimeError("reader crashed")

    monkeypatch.setattr(AIGateway, "extract_document_info", boom)
    r = client.post(
        "/api/documents",
        data={"property_id": "p2"},
        files={"file": ("eicr.png", b"\x89PNG", "image/png")},
    )
    assert r.status_code == 202
    doc = client.get(f"/api/documents/{r.json()['id']}").json()
    assert doc["expiry_date"] == EXTRACTION_FAILED
    assert doc["document_type"] is None
    assert doc["extraction_state"] == "failed"


def test_dashboard_stats_and_compliance_widget(client, fake_ai):
    stats = client.get("/api/dashboard/stats").json()
    assert stats["total_properties"] == 5
    assert stats["occupied_properties"] == 3
    assert stats["occupancy_rate"] == 60
    assert stats["open_maintenance"] == 3
    assert stats["rent_overdue"] == 1
    assert len(stats["recent_maintenance"]) == 5

    soon = date.fromordinal(date.today().toordinal() + 5).isoformat()
    fake_ai.replies.append({"expiryDate": soon, "documentType": "Electrical Installation Condition Report (EICR)"})
    client.post("/api/documents", data={"property_id": "p4"}, files={"file": ("eicr.pdf", b"%PDF", "application/pdf")})

    alerts = client.get("/api/dashboard/compliance").json()
    assert len(alerts) == 1
    assert alerts[0]["compliance"]["status"] == "Urgent"
    assert alerts[0]["compliance"]["days_left"] == 5

    docs = client.get("/api/documents").json()
    assert docs[0]["compliance"]["status"] == "Expires Soon"


def test_suggestions_success_and_failure(client, fake_ai):
    fake_ai.replies.append([{"title": "Chase arrears", "suggestion": "Contact Jane Doe about May rent."}])
    r = client.get("/api/dashboard/suggestions")
    assert r.status_code == 200
    assert r.json()[0]["title"] == "Chase arrears"

    fake_ai.replies.append({"not": "a list"})
    assert client.get("/api/dashboard/suggestions").status_code == 502


def test_guidance(client, fake_ai):
    prompts = client.get("/api/guidance/prompts").json()
    assert len(prompts) == 5

    fake_ai.replies.append("**Yes.** Annual gas checks are required.")
    r = client.post("/api/guidance", json={"prompt": prompts[0]})
    assert r.json()["text"].startswith("**Yes.**")

    fake_ai.replies.append(AIClientError("down"))
    assert client.post("/api/guidance", json={"prompt": "anything"}).status_code == 502


def test_tax_summary_flow(client, fake_ai):
    years = client.get("/api/reports/tax-years").json()
    assert len(years) == 5

    figures = client.get("/api/reports/tax-year", params={"tax_year": "2024/25", "property_id": "p1"}).json()
    assert figures["property_label"] == "123 Coronation Street, Manchester"
    assert figures["income"] == 1200.0
    assert figures["transaction_count"] == 1

    empty = client.post("/api/reports/tax-summary", json={"tax_year": "2019/20"}).json()
    assert empty["message"] == "No transactions found for the selected period and property."
    assert empty["report"] is None
    assert fake_ai.calls == []

    fake_ai.replies.append("# Tax Summary\nNet profit: £15,000")
    out = client.post("/api/reports/tax-summary", json={"tax_year": "2023/24"}).json()
    assert out["report"].startswith("# Tax Summary")
    assert out["property_label"] == "All Properties"

    fake_ai.replies.append("# Tax Summary\nok")
    pdf = client.post("/api/reports/tax-summary/pdf", json={"tax_year": "2023/24", "property_id": "p2"})
    assert pdf.headers["content-type"] == "application/pdf"
    assert 'filename="tax-summary-2023-24-p2.pdf"' in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")

    assert client.get("/api/reports/tax-year", params={"tax_year": "nonsense"}).status_code == 422


def test_exports_are_attachments(client):
    r = client.get("/api/exports/properties.csv")
    assert r.status_code == 200
    assert f'filename="properties-{date.today().isoformat()}.csv"' in r.headers["content-disposition"]
    rows = list(csv.DictReader(io.StringIO(r.text)))
    assert len(rows) == 5
    assert "id" not in rows[0]

    pdf = client.get("/api/exports/maintenance.pdf")
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

    assert client.get("/api/exports/properties.xlsx").status_code == 422


def test_fixture_resets_store(client):
    assert len(store.state.properties) == 5


def test_concurrent_transaction_posts_are_all_kept(client):
    import asyncio

    import httpx

    from landlord_hub.main import app

    before = len(store.state.transactions)

    async def post_many():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://hub.test") as ac:
            return await asyncio.gather(
                *[
                    ac.post(
                        "/api/finance/transactions",
                        json={"property_id": "p3", "type": "Expense", "description": f"bulk {i}", "amount": 5, "date": "2024-06-01"},
                    )
                    for i in range(200)
                ]
            )

    responses = asyncio.run(post_many())
    assert all(r.status_code == 200 for r in responses)
    assert len(store.state.transactions) == before + 200


def test_document_without_expiry_shows_na_badge(client, fake_ai):
    fake_ai.replies.append({"expiryDate": None, "documentType": "Other"})
    r = client.post(
        "/api/documents",
        data={"property_id": "p1"},
        files={"file": ("inventory.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert r.status_code == 202
    assert r.json()["compliance"] is None

    doc = client.get(f"/api/documents/{r.json()['id']}").json()
    assert doc["extraction_state"] == "ready"
    assert doc["expiry_date"] is None
    assert doc["compliance"] == {"status": "N/A", "days_left": None, "color": "slate"}
