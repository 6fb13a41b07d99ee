from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from ..models import Document, EXPIRY_SENTINELS, has_concrete_expiry


# -------------------- Expiry status --------------------
# Two threshold ladders exist on purpose and must stay separate:
#   dashboard widget  : Expired / Urgent (<=7) / Upcoming (<=30, <=60) / Valid
#   document table    : Expired / Expires Soon (<=30) / Upcoming (<=60) / Valid

EXPIRED = "Expired"
URGENT = "Urgent"
EXPIRES_SOON = "Expires Soon"
UPCOMING = "Upcoming"
VALID = "Valid"
UNKNOWN = "Unknown"
NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class ComplianceStatus:
    status: str
    days_left: Optional[int]
    color: str  # red|orange|yellow|green|slate


def _as_date(v: Any) -> Optional[date]:
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v).strip()
    if not s or s in EXPIRY_SENTINELS:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def days_until(expiry: Any, today: Optional[date] = None) -> Optional[int]:
    """
    Whole days from today to expiry, both taken at midnight.
    Negative once the date has passed; None when there is no usable date.
    """
    exp = _as_date(expiry)
    if exp is None:
        return None
    ref = _as_date(today) or date.today()
    seconds = (datetime.combine(exp, datetime.min.time()) - datetime.combine(ref, datetime.min.time())).total_seconds()
    return int(math.ceil(seconds / 86400))


def dashboard_compliance_status(expiry_date: Any, today: Optional[date] = None) -> ComplianceStatus:
    days = days_until(expiry_date, today)
    if days is None:
        return ComplianceStatus(UNKNOWN, None, "slate")
    if days < 0:
        return ComplianceStatus(EXPIRED, days, "red")
    if days <= 7:
        return ComplianceStatus(URGENT, days, "red")
    if days <= 30:
        return ComplianceStatus(UPCOMING, days, "orange")
    if days <= 60:
        return ComplianceStatus(UPCOMING, days, "yellow")
    return ComplianceStatus(VALID, days, "green")


def document_compliance_status(expiry_date: Any, today: Optional[date] = None) -> ComplianceStatus:
    days = days_until(expiry_date, today)
    if days is None:
        return ComplianceStatus(NOT_APPLICABLE, None, "slate")
    if days < 0:
        return ComplianceStatus(EXPIRED, days, "red")
    if days <= 30:
        return ComplianceStatus(EXPIRES_SOON, days, "orange")
    if days <= 60:
        return ComplianceStatus(UPCOMING, days, "yellow")
    return ComplianceStatus(VALID, days, "green")


# -------------------- Dashboard widget --------------------

@dataclass(frozen=True)
class ComplianceAlert:
    document_id: str
    property_id: str
    file_name: str
    document_type: Optional[str]
    expiry_date: str
    compliance: ComplianceStatus


def compliance_watchlist(
    documents: Iterable[Document],
    *,
    today: Optional[date] = None,
    window_days: int = 60,
) -> list[ComplianceAlert]:
    """
    Documents that are expired or expire within window_days, soonest first.
    Placeholders and documents without an expiry date are skipped.
    """
    out: list[ComplianceAlert] = []
    for d in documents:
        if not has_concrete_expiry(d):
            continue
        st = dashboard_compliance_status(d.expiry_date, today)
        if st.days_left is None or st.days_left > window_days:
            continue
        out.append(
            ComplianceAlert(
                document_id=d.id,
                property_id=d.property_id,
                file_name=d.file_name,
                document_type=d.document_type,
                expiry_date=str(d.expiry_date),
                compliance=st,
            )
        )
    out.sort(key=lambda a: a.compliance.days_left)
    return out
