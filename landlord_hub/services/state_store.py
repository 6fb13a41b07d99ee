# landlord_hub/services/state_store.py
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Callable, Optional, TypeVar

from ..models import (
    MAINTENANCE_STATUS_ORDER,
    DepositScheme,
    Document,
    DocumentType,
    EXTRACTION_FAILED,
    ExtractionState,
    MaintenanceRequest,
    MaintenanceStatus,
    MaintenanceUrgency,
    Property,
    PropertyStatus,
    PropertyType,
    Quote,
    QuoteStatus,
    RentStatus,
    Tenant,
    Tradesperson,
    Transaction,
    TransactionType,
)

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Application state store
# -----------------------------------------------------------------------------
# AppState is immutable. Every action takes the current state and returns
# (new_state, record). Nothing is edited in place; collections are rebuilt.
#
# Lookup failures (unknown property/request/tradesperson id) are no-ops:
# the action returns the state it was given and record=None.
# -----------------------------------------------------------------------------


class InvalidTransition(ValueError):
    """Raised when an action would move a record backwards or out of order."""


@dataclass(frozen=True)
class AppState:
    properties: tuple[Property, ...] = field(default_factory=tuple)
    tenants: tuple[Tenant, ...] = field(default_factory=tuple)
    maintenance_requests: tuple[MaintenanceRequest, ...] = field(default_factory=tuple)
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    documents: tuple[Document, ...] = field(default_factory=tuple)
    tradespeople: tuple[Tradesperson, ...] = field(default_factory=tuple)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def _today_iso(today: Optional[date]) -> str:
    return (today or date.today()).isoformat()


def _replace_by_id(items: tuple[Any, ...], record_id: str, new: Any) -> tuple[Any, ...]:
    return tuple(new if getattr(x, "id") == record_id else x for x in items)


def _sorted_newest_first(txns: tuple[Transaction, ...]) -> tuple[Transaction, ...]:
    return tuple(sorted(txns, key=lambda t: t.date, reverse=True))


# -------------------- Lookups --------------------

def find_property(state: AppState, property_id: str) -> Optional[Property]:
    return next((p for p in state.properties if p.id == property_id), None)


def find_request(state: AppState, request_id: str) -> Optional[MaintenanceRequest]:
    return next((r for r in state.maintenance_requests if r.id == request_id), None)


def find_tradesperson(state: AppState, tradesperson_id: str) -> Optional[Tradesperson]:
    return next((t for t in state.tradespeople if t.id == tradesperson_id), None)


def find_document(state: AppState, document_id: str) -> Optional[Document]:
    return next((d for d in state.documents if d.id == document_id), None)


def tenant_for_property(state: AppState, property_id: str) -> Optional[Tenant]:
    return next((t for t in state.tenants if t.property_id == property_id), None)


def available_properties_for_tenancy(state: AppState) -> list[Property]:
    tenanted = {t.property_id for t in state.tenants}
    return [p for p in state.properties if p.id not in tenanted and p.status != PropertyStatus.UNDER_OFFER]


def _missing(kind: str, ref: str, state: AppState) -> tuple[AppState, None]:
    log.warning("%s not found; action dropped", kind, extra={"request_ref": ref})
    return state, None


# -------------------- Properties / tenants / tradespeople --------------------

def add_property(
    state: AppState,
    *,
    address: str,
    type: PropertyType,
    status: PropertyStatus,
    current_rent: float,
    rent_status: RentStatus = RentStatus.PAID,
) -> tuple[AppState, Property]:
    if status == PropertyStatus.VACANT:
        # nothing is owed on an empty property
        rent_status = RentStatus.PAID

    prop = Property(
        id=new_id("p"),
        address=address,
        type=type,
        status=status,
        rent_status=rent_status,
        current_rent=float(current_rent),
    )
    return replace(state, properties=state.properties + (prop,)), prop


def add_tenant(
    state: AppState,
    *,
    name: str,
    email: str,
    phone: str,
    property_id: str,
    lease_start_date: str,
    lease_end_date: str,
    deposit_amount: float,
    deposit_scheme: DepositScheme,
) -> tuple[AppState, Optional[Tenant]]:
    prop = find_property(state, property_id)
    if prop is None:
        return _missing("property", property_id, state)

    tenant = Tenant(
        id=new_id("ten"),
        name=name,
        email=email,
        phone=phone,
        property_id=prop.id,
        property_address=prop.address,
        lease_start_date=lease_start_date,
        lease_end_date=lease_end_date,
        deposit_amount=float(deposit_amount),
        deposit_scheme=deposit_scheme,
    )
    occupied = replace(prop, status=PropertyStatus.OCCUPIED)
    return (
        replace(
            state,
            tenants=state.tenants + (tenant,),
            properties=_replace_by_id(state.properties, prop.id, occupied),
        ),
        tenant,
    )


def add_tradesperson(state: AppState, *, name: str, trade: str, contact: str) -> tuple[AppState, Tradesperson]:
    tp = Tradesperson(id=new_id("tp"), name=name, trade=trade, contact=contact)
    return replace(state, tradespeople=state.tradespeople + (tp,)), tp


# -------------------- Transactions --------------------

def add_transaction(
    state: AppState,
    *,
    property_id: str,
    type: TransactionType,
    description: str,
    amount: float,
    date: str,
) -> tuple[AppState, Optional[Transaction]]:
    """
    Records a transaction (list kept newest first).

    An Income payment covering the property's full current rent marks its
    rent as Paid; a smaller payment leaves rent status alone.
    """
    prop = find_property(state, property_id)
    if prop is None:
        return _missing("property", property_id, state)

    txn = Transaction(
        id=new_id("tr"),
        property_id=prop.id,
        property_address=prop.address,
        type=type,
        description=description,
        amount=float(amount),
        date=date,
    )
    properties = state.properties
    if type == TransactionType.INCOME and txn.amount >= float(prop.current_rent):
        properties = _replace_by_id(properties, prop.id, replace(prop, rent_status=RentStatus.PAID))

    return (
        replace(state, transactions=_sorted_newest_first((txn,) + state.transactions), properties=properties),
        txn,
    )


# -------------------- Maintenance --------------------

def _rank(status: MaintenanceStatus) -> int:
    return MAINTENANCE_STATUS_ORDER.index(status)


def add_maintenance_request(
    state: AppState,
    *,
    property_id: str,
    issue: str,
    urgency: MaintenanceUrgency,
    suggested_tradesperson: str,
    today: Optional[date] = None,
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    prop = find_property(state, property_id)
    if prop is None:
        return _missing("property", property_id, state)

    req = MaintenanceRequest(
        id=new_id("m"),
        property_id=prop.id,
        property_address=prop.address,
        issue=issue,
        status=MaintenanceStatus.NEW,
        urgency=urgency,
        suggested_tradesperson=suggested_tradesperson,
        reported_date=_today_iso(today),
        cost=0.0,
    )
    # newest first
    return replace(state, maintenance_requests=(req,) + state.maintenance_requests), req


def _put_request(state: AppState, req: MaintenanceRequest) -> AppState:
    return replace(state, maintenance_requests=_replace_by_id(state.maintenance_requests, req.id, req))


def assign_tradesperson(
    state: AppState, request_id: str, tradesperson_id: str
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    if find_tradesperson(state, tradesperson_id) is None:
        return _missing("tradesperson", tradesperson_id, state)

    updated = replace(req, assigned_tradesperson_id=tradesperson_id)
    return _put_request(state, updated), updated


def add_quote(
    state: AppState,
    request_id: str,
    *,
    tradesperson_id: str,
    amount: float,
    details: str,
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    tp = find_tradesperson(state, tradesperson_id)
    if tp is None:
        return _missing("tradesperson", tradesperson_id, state)
    if _rank(req.status) > _rank(MaintenanceStatus.AWAITING_QUOTE):
        raise InvalidTransition(f"cannot add a quote to a request in status {req.status.value!r}")

    quote = Quote(
        id=new_id("q"),
        tradesperson_id=tp.id,
        tradesperson_name=tp.name,
        amount=float(amount),
        details=details,
    )
    updated = replace(req, quotes=req.quotes + (quote,), status=MaintenanceStatus.AWAITING_QUOTE)
    return _put_request(state, updated), updated


def approve_quote(state: AppState, request_id: str, quote_id: str) -> tuple[AppState, Optional[MaintenanceRequest]]:
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    quote = next((q for q in req.quotes if q.id == quote_id), None)
    if quote is None:
        return _missing("quote", quote_id, state)
    if quote.status != QuoteStatus.PENDING:
        raise InvalidTransition(f"quote {quote_id} is already {quote.status.value.lower()}")
    if _rank(req.status) > _rank(MaintenanceStatus.AWAITING_QUOTE):
        raise InvalidTransition(f"cannot approve a quote for a request in status {req.status.value!r}")

    quotes = tuple(
        replace(q, status=QuoteStatus.APPROVED)
        if q.id == quote_id
        else (replace(q, status=QuoteStatus.REJECTED) if q.status == QuoteStatus.PENDING else q)
        for q in req.quotes
    )
    updated = replace(
        req,
        quotes=quotes,
        status=MaintenanceStatus.QUOTE_APPROVED,
        assigned_tradesperson_id=quote.tradesperson_id,
        cost=quote.amount,
    )
    return _put_request(state, updated), updated


def mark_work_complete(
    state: AppState,
    request_id: str,
    *,
    final_invoice_url: Optional[str] = None,
    cost: Optional[float] = None,
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    if _rank(req.status) >= _rank(MaintenanceStatus.WORK_COMPLETE):
        raise InvalidTransition(f"request already {req.status.value!r}")

    updated = replace(
        req,
        status=MaintenanceStatus.WORK_COMPLETE,
        final_invoice_url=final_invoice_url if final_invoice_url is not None else req.final_invoice_url,
        cost=float(cost) if cost is not None else req.cost,
    )
    return _put_request(state, updated), updated


def complete_maintenance_request(
    state: AppState,
    request_id: str,
    *,
    cost: Optional[float] = None,
    today: Optional[date] = None,
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    """
    Closes a request. A non-zero cost is booked as an Expense transaction
    against the same property, dated on completion.
    """
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    if req.status == MaintenanceStatus.COMPLETED:
        return state, req

    updated = replace(req, status=MaintenanceStatus.COMPLETED, cost=float(cost) if cost is not None else req.cost)
    state = _put_request(state, updated)

    if updated.cost > 0:
        state, _txn = add_transaction(
            state,
            property_id=updated.property_id,
            type=TransactionType.EXPENSE,
            description=f"Maintenance: {updated.issue}",
            amount=updated.cost,
            date=_today_iso(today),
        )
    return state, updated


def advance_maintenance_status(
    state: AppState,
    request_id: str,
    status: MaintenanceStatus,
    *,
    today: Optional[date] = None,
) -> tuple[AppState, Optional[MaintenanceRequest]]:
    req = find_request(state, request_id)
    if req is None:
        return _missing("maintenance request", request_id, state)
    if status == req.status:
        return state, req
    if _rank(status) < _rank(req.status):
        raise InvalidTransition(f"cannot move request from {req.status.value!r} back to {status.value!r}")

    if status == MaintenanceStatus.COMPLETED:
        return complete_maintenance_request(state, request_id, today=today)

    updated = replace(req, status=status)
    return _put_request(state, updated), updated


# -------------------- Documents --------------------

def add_document_placeholder(
    state: AppState,
    *,
    property_id: str,
    file_name: str,
    file_type: str,
    file_data_url: str,
) -> tuple[AppState, Optional[Document]]:
    if find_property(state, property_id) is None:
        return _missing("property", property_id, state)

    doc = Document(
        id=new_id("doc"),
        property_id=property_id,
        file_name=file_name,
        file_type=file_type,
        file_data_url=file_data_url,
    )
    return replace(state, documents=state.documents + (doc,)), doc


def resolve_document(
    state: AppState,
    document_id: str,
    *,
    expiry_date: Optional[str],
    document_type: Optional[DocumentType],
) -> tuple[AppState, Optional[Document]]:
    doc = find_document(state, document_id)
    if doc is None:
        return _missing("document", document_id, state)

    updated = replace(
        doc,
        expiry_date=expiry_date,
        document_type=document_type.value if document_type is not None else None,
        extraction_state=ExtractionState.READY,
    )
    return replace(state, documents=_replace_by_id(state.documents, document_id, updated)), updated


def fail_document(state: AppState, document_id: str) -> tuple[AppState, Optional[Document]]:
    doc = find_document(state, document_id)
    if doc is None:
        return _missing("document", document_id, state)

    updated = replace(
        doc,
        expiry_date=EXTRACTION_FAILED,
        document_type=None,
        extraction_state=ExtractionState.FAILED,
    )
    return replace(state, documents=_replace_by_id(state.documents, document_id, updated)), updated


# -------------------- Store --------------------

R = TypeVar("R")


class Store:
    """
    Owns the current AppState for the process.

    Sync routes run in FastAPI's threadpool while background extraction runs
    on the event loop, so dispatch() holds a lock across "read state, run
    action, store result". Readers see whole states without locking.
    """

    def __init__(self, state: Optional[AppState] = None) -> None:
        self._state = state or AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def reset(self, state: Optional[AppState] = None) -> None:
        with self._lock:
            self._state = state or AppState()

    def dispatch(self, action: Callable[..., tuple[AppState, R]], *args: Any, **kwargs: Any) -> R:
        with self._lock:
            new_state, record = action(self._state, *args, **kwargs)
            self._state = new_state
        return record
