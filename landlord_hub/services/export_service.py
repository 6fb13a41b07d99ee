# landlord_hub/services/export_service.py
from __future__ import annotations

import csv
import io
import re
from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm, mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..models import MaintenanceRequest, Property, Tradesperson, Transaction

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
PDF_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    media_type: str
    content: bytes


def export_filename(entity: str, ext: str, today: Optional[date] = None) -> str:
    return f"{entity}-{(today or date.today()).isoformat()}.{ext}"


def format_gbp(amount: float) -> str:
    return f"£{float(amount):.2f}"


def _cell(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if v is None:
        return ""
    return v


# -------------------- CSV --------------------

def to_csv(rows: Sequence[dict[str, Any]]) -> str:
    """
    Header comes from the first row's keys. Fields containing a comma, quote
    or newline are quoted with embedded quotes doubled. Rows are joined by
    "\\n" with no trailing newline; no rows -> "".
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=headers, lineterminator="\n", quoting=csv.QUOTE_MINIMAL, extrasaction="ignore")
    writer.writeheader()
    for r in rows:
        writer.writerow({k: _cell(r.get(k)) for k in headers})
    out = buf.getvalue()
    return out[:-1] if out.endswith("\n") else out


def _without(record: Any, *excluded: str) -> dict[str, Any]:
    d = asdict(record)
    for k in excluded:
        d.pop(k, None)
    return d


# -------------------- PDF --------------------

def to_pdf_table(title: str, header: Sequence[str], body: Sequence[Sequence[str]]) -> bytes:
    """One-line title, then a grid: header row plus one row per record."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=1.4 * cm,
        rightMargin=1.4 * cm,
        topMargin=1.4 * cm,
        bottomMargin=1.4 * cm,
        title=title,
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"].clone("cell", fontSize=8, leading=10)

    data: list[list[Any]] = [list(header)]
    for row in body:
        data.append([Paragraph(_escape(str(c)), cell_style) for c in row])

    table = Table(data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1f2937")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 9),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )

    doc.build([Paragraph(_escape(title), styles["Title"]), Spacer(1, 0.3 * cm), table])
    return buf.getvalue()


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


_MD_MARKERS = re.compile(r"#{1,6} |\*\*|\*|`")


def strip_markdown(text: str) -> str:
    return _MD_MARKERS.sub("", text)


def tax_summary_pdf(*, report: str, property_label: str, tax_year: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    width, height = A4
    left = 14 * mm
    y = height - 22 * mm

    c.setFont("Helvetica-Bold", 18)
    c.drawString(left, y, "Property Tax Summary Report")

    y -= 28
    c.setFont("Helvetica", 11)
    c.setFillGray(0.4)
    c.drawString(left, y, f"Property: {property_label}")
    y -= 16
    c.drawString(left, y, f"Tax Year: {tax_year}")
    c.setFillGray(0)

    y -= 30
    c.setFont("Helvetica", 10)
    max_width = width - 2 * left
    for para in strip_markdown(report).splitlines():
        lines = simpleSplit(para, "Helvetica", 10, max_width) or [""]
        for line in lines:
            if y < 50:
                c.showPage()
                c.setFont("Helvetica", 10)
                y = height - 50
            c.drawString(left, y, line)
            y -= 13

    c.save()
    return buf.getvalue()


def tax_summary_filename(tax_year: str, property_id: str) -> str:
    return f"tax-summary-{tax_year.replace('/', '-')}-{property_id}.pdf"


# -------------------- Entity exports --------------------

def export_properties(properties: Iterable[Property], fmt: str, *, today: Optional[date] = None) -> ExportArtifact:
    props = list(properties)
    if fmt == "csv":
        content = to_csv([_without(p, "id") for p in props]).encode("utf-8")
        return ExportArtifact(export_filename("properties", "csv", today), CSV_MEDIA_TYPE, content)

    body = [[p.address, p.type.value, p.status.value, p.rent_status.value, format_gbp(p.current_rent)] for p in props]
    pdf = to_pdf_table("Property List", ["Address", "Type", "Status", "Rent Status", "Current Rent"], body)
    return ExportArtifact(export_filename("properties", "pdf", today), PDF_MEDIA_TYPE, pdf)


def export_transactions(transactions: Iterable[Transaction], fmt: str, *, today: Optional[date] = None) -> ExportArtifact:
    txns = list(transactions)
    if fmt == "csv":
        content = to_csv([_without(t, "id", "property_id") for t in txns]).encode("utf-8")
        return ExportArtifact(export_filename("transactions", "csv", today), CSV_MEDIA_TYPE, content)

    body = [[t.date, t.property_address, t.description, t.type.value, format_gbp(t.amount)] for t in txns]
    pdf = to_pdf_table("Transaction History", ["Date", "Property", "Description", "Type", "Amount"], body)
    return ExportArtifact(export_filename("transactions", "pdf", today), PDF_MEDIA_TYPE, pdf)


def maintenance_rows(requests: Iterable[MaintenanceRequest], tradespeople: Iterable[Tradesperson]) -> list[dict[str, Any]]:
    names = {t.id: t.name for t in tradespeople}
    return [
        {
            "reported_date": r.reported_date,
            "property": r.property_address,
            "issue": r.issue,
            "status": r.status.value,
            "urgency": r.urgency.value,
            "assigned_to": names.get(r.assigned_tradesperson_id, "N/A") if r.assigned_tradesperson_id else "N/A",
            "cost": format_gbp(r.cost),
        }
        for r in requests
    ]


def export_maintenance(
    requests: Iterable[MaintenanceRequest],
    tradespeople: Iterable[Tradesperson],
    fmt: str,
    *,
    today: Optional[date] = None,
) -> ExportArtifact:
    rows = maintenance_rows(requests, tradespeople)
    if fmt == "csv":
        return ExportArtifact(export_filename("maintenance", "csv", today), CSV_MEDIA_TYPE, to_csv(rows).encode("utf-8"))

    body = [[str(v) for v in r.values()] for r in rows]
    pdf = to_pdf_table(
        "Maintenance Records",
        ["Date", "Property", "Issue", "Status", "Urgency", "Assigned To", "Cost"],
        body,
    )
    return ExportArtifact(export_filename("maintenance", "pdf", today), PDF_MEDIA_TYPE, pdf)
