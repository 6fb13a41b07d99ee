# landlord_hub/domain/cashflow.py
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

from ..models import Transaction, TransactionType

ALL_PROPERTIES = "all"


def _as_date(v: Any) -> Optional[date]:
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    try:
        return date.fromisoformat(str(v).strip()[:10])
    except ValueError:
        return None


def month_key(d: date) -> str:
    return f"{d.year}-{d.month:02d}"


def _shift_month(y: int, m: int, delta: int) -> tuple[int, int]:
    idx = y * 12 + (m - 1) + delta
    return idx // 12, idx % 12 + 1


# -------------------- Totals --------------------

@dataclass(frozen=True)
class Totals:
    income: float
    expense: float
    net: float


def totals(txns: Iterable[Transaction]) -> Totals:
    income = 0.0
    expense = 0.0
    for t in txns:
        amt = float(t.amount or 0.0)
        if t.type == TransactionType.INCOME:
            income += amt
        elif t.type == TransactionType.EXPENSE:
            expense += amt
    return Totals(income=float(income), expense=float(expense), net=float(income - expense))


# -------------------- 12-month series --------------------

@dataclass(frozen=True)
class MonthBucket:
    key: str  # YYYY-MM
    label: str  # e.g. "May 24"
    income: float
    expense: float


def twelve_month_series(txns: Iterable[Transaction], today: Optional[date] = None) -> list[MonthBucket]:
    """
    Twelve calendar months ending with today's month, oldest first.
    Transactions outside the window are ignored (never wrapped into it).
    """
    ref = today or date.today()

    keys: list[tuple[str, str]] = []
    income: dict[str, float] = {}
    expense: dict[str, float] = {}
    for back in range(11, -1, -1):
        y, m = _shift_month(ref.year, ref.month, -back)
        key = f"{y}-{m:02d}"
        keys.append((key, f"{calendar.month_abbr[m]} {y % 100:02d}"))
        income[key] = 0.0
        expense[key] = 0.0

    for t in txns:
        d = _as_date(t.date)
        if d is None:
            continue
        key = month_key(d)
        if key not in income:
            continue
        if t.type == TransactionType.INCOME:
            income[key] += float(t.amount)
        else:
            expense[key] += float(t.amount)

    return [MonthBucket(key=k, label=label, income=income[k], expense=expense[k]) for k, label in keys]


def available_years(txns: Iterable[Transaction], today: Optional[date] = None) -> list[int]:
    years = {d.year for d in (_as_date(t.date) for t in txns) if d is not None}
    if not years:
        return [(today or date.today()).year]
    return sorted(years, reverse=True)


# -------------------- Period reports --------------------

@dataclass(frozen=True)
class PeriodReport:
    income: float
    expense: float
    net: float
    transactions: list[Transaction]


def _matches_property(t: Transaction, property_id: Optional[str]) -> bool:
    return not property_id or property_id == ALL_PROPERTIES or t.property_id == property_id


def _report(filtered: list[Transaction]) -> PeriodReport:
    tot = totals(filtered)
    return PeriodReport(income=tot.income, expense=tot.expense, net=tot.net, transactions=filtered)


def period_report(
    txns: Iterable[Transaction],
    *,
    year: int,
    month: Optional[int] = None,
    property_id: Optional[str] = ALL_PROPERTIES,
) -> PeriodReport:
    """
    Monthly report when month is given, annual (calendar year) report otherwise.
    A filter that matches nothing yields an empty report.
    """
    out: list[Transaction] = []
    for t in txns:
        d = _as_date(t.date)
        if d is None or d.year != int(year):
            continue
        if month is not None and d.month != int(month):
            continue
        if not _matches_property(t, property_id):
            continue
        out.append(t)
    return _report(out)


def report_title(*, year: int, month: Optional[int] = None, property_name: str = "All Properties") -> str:
    if month is not None:
        period = f"{calendar.month_name[int(month)]} {year}"
    else:
        period = f"Year {year}"
    return f"Report for {period} - {property_name}"


# -------------------- UK tax year --------------------
# Tax year N/N+1 runs 6 April N .. 5 April N+1 inclusive, labelled "2024/25".

def tax_year_label(start_year: int) -> str:
    return f"{start_year}/{str(start_year + 1)[-2:]}"


def parse_tax_year(label: str) -> int:
    """Start year of a "YYYY/YY" label (a bare "YYYY" is accepted too)."""
    head = str(label).strip().split("/")[0]
    if len(head) != 4 or not head.isdigit():
        raise ValueError(f"invalid tax year label: {label!r}")
    return int(head)


def tax_year_bounds(label: str) -> tuple[date, date]:
    start_year = parse_tax_year(label)
    return date(start_year, 4, 6), date(start_year + 1, 4, 5)


def tax_year_start_for(d: date) -> int:
    if (d.month, d.day) <= (4, 5):
        return d.year - 1
    return d.year


def tax_year_options(today: Optional[date] = None, count: int = 5) -> list[str]:
    """Most recent tax-year labels, current one first."""
    start = tax_year_start_for(today or date.today())
    return [tax_year_label(start - i) for i in range(count)]


def filter_tax_year(txns: Iterable[Transaction], label: str) -> list[Transaction]:
    start, end = tax_year_bounds(label)
    out: list[Transaction] = []
    for t in txns:
        d = _as_date(t.date)
        if d is not None and start <= d <= end:
            out.append(t)
    return out


def tax_year_report(
    txns: Iterable[Transaction],
    *,
    tax_year: str,
    property_id: Optional[str] = ALL_PROPERTIES,
) -> PeriodReport:
    filtered = [t for t in filter_tax_year(txns, tax_year) if _matches_property(t, property_id)]
    return _report(filtered)
