# tests/test_export_formats.py
from __future__ import annotations

import csv
import io
from datetime import date

from landlord_hub.seed.demo_data import demo_state
from landlord_hub.services.export_service import (
    export_maintenance,
    export_properties,
    export_transactions,
    format_gbp,
    strip_markdown,
    tax_summary_filename,
    tax_summary_pdf,
    to_csv,
    to_pdf_table,
)

TODAY = date(2024, 6, 1)


def test_csv_quotes_commas_and_doubles_quotes():
    out = to_csv([{"description": 'Say "hi", please', "amount": 12.5}, {"description": "plain", "amount": 3.0}])
    lines = out.split("\n")
    assert lines[0] == "description,amount"
    assert lines[1] == '"Say ""hi"", please",12.5'
    assert lines[2] == "plain,3"
    assert not out.endswith("\n")

    parsed = list(csv.reader(io.StringIO(out)))
    assert parsed[1][0] == 'Say "hi", please'


def test_csv_empty_is_empty_string():
    assert to_csv([]) == ""
    art = export_properties([], "csv", today=TODAY)
    assert art.content == b""
    assert art.filename == "properties-2024-06-01.csv"


def test_property_csv_drops_id_and_uses_display_values():
    art = export_properties(demo_state().properties, "csv", today=TODAY)
    text = art.content.decode("utf-8")
    header, first = text.split("\n")[:2]
    assert header == "address,type,status,rent_status,current_rent"
    assert first == '"123 Coronation Street, Manchester",Personal,Occupied,Paid,1200'


def test_transaction_csv_drops_internal_ids():
    art = export_transactions(demo_state().transactions, "csv", today=TODAY)
    header = art.content.decode("utf-8").split("\n")[0]
    assert "id" not in header.split(",")
    assert "property_id" not in header.split(",")
    assert art.media_type.startswith("text/csv")


def test_maintenance_rows_name_assignee_or_na():
    state = demo_state()
    art = export_maintenance(state.maintenance_requests, state.tradespeople, "csv", today=TODAY)
    rows = list(csv.DictReader(io.StringIO(art.content.decode("utf-8"))))
    by_issue = {r["issue"]: r for r in rows}
    assert by_issue["Boiler not providing hot water"]["assigned_to"] == "Northern Gas Services"
    assert by_issue["Leaking tap in kitchen"]["assigned_to"] == "N/A"
    assert by_issue["Fence panel blown down in storm"]["cost"] == "£150.00"


def test_pdf_table_with_empty_body_still_renders():
    pdf = to_pdf_table("Property List", ["Address", "Type"], [])
    assert pdf.startswith(b"%PDF")

    art = export_transactions([], "pdf", today=TODAY)
    assert art.filename == "transactions-2024-06-01.pdf"
    assert art.media_type == "application/pdf"
    assert art.content.startswith(b"%PDF")


def test_currency_and_markdown_helpers():
    assert format_gbp(1200) == "£1200.00"
    assert format_gbp(85.5) == "£85.50"
    assert strip_markdown("## Income\n**Total**: `£100`") == "Income\nTotal: £100"


def test_tax_summary_pdf():
    pdf = tax_summary_pdf(report="# Summary\n" + "line\n" * 200, property_label="All Properties", tax_year="2024/25")
    assert pdf.startswith(b"%PDF")
    assert tax_summary_filename("2024/25", "all") == "tax-summary-2024-25-all.pdf"
