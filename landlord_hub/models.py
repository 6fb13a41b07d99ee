# landlord_hub/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# -------------------- Enumerations --------------------
# Values are the display strings used in exports and API payloads.

class PropertyType(str, Enum):
    LTD = "LTD"
    PERSONAL = "Personal"


class PropertyStatus(str, Enum):
    OCCUPIED = "Occupied"
    VACANT = "Vacant"
    UNDER_OFFER = "Under Offer"


class RentStatus(str, Enum):
    PAID = "Paid"
    OVERDUE = "Overdue"
    PARTIALLY_PAID = "Partially Paid"


class MaintenanceStatus(str, Enum):
    NEW = "New"
    IN_PROGRESS = "In Progress"
    AWAITING_QUOTE = "Awaiting Quote"
    QUOTE_APPROVED = "Quote Approved"
    WORK_COMPLETE = "Work Complete"  # work done, awaiting invoice/payment
    COMPLETED = "Completed"  # invoice paid, closed


# Lifecycle order; requests only ever move forward through it.
MAINTENANCE_STATUS_ORDER: tuple[MaintenanceStatus, ...] = tuple(MaintenanceStatus)


class MaintenanceUrgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    EMERGENCY = "Emergency"


class QuoteStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TransactionType(str, Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class DocumentType(str, Enum):
    GAS_SAFETY = "Gas Safety Certificate"
    EICR = "Electrical Installation Condition Report (EICR)"
    EPC = "Energy Performance Certificate (EPC)"
    OTHER = "Other"


class DepositScheme(str, Enum):
    TDS = "Tenancy Deposit Scheme (TDS)"
    DPS = "Deposit Protection Service (DPS)"
    MY_DEPOSITS = "MyDeposits"


class ExtractionState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


# Sentinels stored in Document fields while extraction is in flight / after it failed.
EXTRACTING = "extracting..."
EXTRACTION_FAILED = "extraction-failed"
EXPIRY_SENTINELS = frozenset({EXTRACTING, EXTRACTION_FAILED})


# -------------------- Records --------------------
# Immutable: every change produces a new record via dataclasses.replace().

@dataclass(frozen=True)
class Property:
    id: str
    address: str
    type: PropertyType
    status: PropertyStatus
    rent_status: RentStatus
    current_rent: float


@dataclass(frozen=True)
class Tenant:
    id: str
    name: str
    email: str
    phone: str
    property_id: str
    property_address: str  # snapshot at creation time
    lease_start_date: str
    lease_end_date: str
    deposit_amount: float
    deposit_scheme: DepositScheme


@dataclass(frozen=True)
class Quote:
    id: str
    tradesperson_id: str
    tradesperson_name: str
    amount: float
    details: str
    status: QuoteStatus = QuoteStatus.PENDING


@dataclass(frozen=True)
class MaintenanceRequest:
    id: str
    property_id: str
    property_address: str  # snapshot at creation time
    issue: str
    status: MaintenanceStatus
    urgency: MaintenanceUrgency
    suggested_tradesperson: str
    reported_date: str
    cost: float = 0.0
    assigned_tradesperson_id: Optional[str] = None
    quotes: tuple[Quote, ...] = field(default_factory=tuple)
    final_invoice_url: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    id: str
    property_id: str
    property_address: str  # snapshot at creation time
    type: TransactionType
    description: str
    amount: float
    date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class Document:
    """
    Uploaded compliance/property document.

    Placeholder lifecycle (keyed by ``id``, never by position):
      PENDING -> expiry_date/document_type hold EXTRACTING
      READY   -> AI-derived expiry_date (ISO date or None) and document_type
      FAILED  -> expiry_date = EXTRACTION_FAILED, document_type = None
    """

    id: str
    property_id: str
    file_name: str
    file_type: str
    file_data_url: str
    document_type: Optional[str] = EXTRACTING
    expiry_date: Optional[str] = EXTRACTING
    extraction_state: ExtractionState = ExtractionState.PENDING


@dataclass(frozen=True)
class Tradesperson:
    id: str
    name: str
    trade: str
    contact: str


def has_concrete_expiry(doc: Document) -> bool:
    return bool(doc.expiry_date) and doc.expiry_date not in EXPIRY_SENTINELS
