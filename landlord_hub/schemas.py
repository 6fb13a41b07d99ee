# landlord_hub/schemas.py
from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .domain.compliance import document_compliance_status
from .models import (
    Document,
    DepositScheme,
    ExtractionState,
    MaintenanceStatus,
    MaintenanceUrgency,
    PropertyStatus,
    PropertyType,
    QuoteStatus,
    RentStatus,
    TransactionType,
)


def _not_blank(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("must not be blank")
    return v.strip()


# -------------------- Properties --------------------

class PropertyCreate(BaseModel):
    address: str
    type: PropertyType = PropertyType.PERSONAL
    status: PropertyStatus = PropertyStatus.VACANT
    rent_status: RentStatus = RentStatus.PAID
    current_rent: float = Field(ge=0)

    @field_validator("address")
    @classmethod
    def _check_address(cls, v: str) -> str:
        return _not_blank(v)


class PropertyOut(BaseModel):
    id: str
    address: str
    type: PropertyType
    status: PropertyStatus
    rent_status: RentStatus
    current_rent: float
    model_config = ConfigDict(from_attributes=True)


# -------------------- Tenants --------------------

class TenantCreate(BaseModel):
    name: str
    email: str = ""
    phone: str = ""
    property_id: str
    lease_start_date: date
    lease_end_date: date
    deposit_amount: float = Field(gt=0)
    deposit_scheme: DepositScheme = DepositScheme.TDS

    @field_validator("name", "property_id")
    @classmethod
    def _check_text(cls, v: str) -> str:
        return _not_blank(v)

    @model_validator(mode="after")
    def _lease_order(self) -> "TenantCreate":
        if self.lease_end_date < self.lease_start_date:
            raise ValueError("lease_end_date cannot be before lease_start_date")
        return self


class TenantOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    property_id: str
    property_address: str
    lease_start_date: str
    lease_end_date: str
    deposit_amount: float
    deposit_scheme: DepositScheme
    model_config = ConfigDict(from_attributes=True)


# -------------------- Tradespeople --------------------

class TradespersonCreate(BaseModel):
    name: str
    trade: str
    contact: str

    @field_validator("name", "trade", "contact")
    @classmethod
    def _check_text(cls, v: str) -> str:
        return _not_blank(v)


class TradespersonOut(TradespersonCreate):
    id: str
    model_config = ConfigDict(from_attributes=True)


# -------------------- Maintenance --------------------

class MaintenanceCreate(BaseModel):
    property_id: str
    issue: str

    @field_validator("property_id", "issue")
    @classmethod
    def _check_text(cls, v: str) -> str:
        return _not_blank(v)


class QuoteCreate(BaseModel):
    tradesperson_id: str
    amount: float = Field(gt=0)
    details: str = ""


class QuoteOut(BaseModel):
    id: str
    tradesperson_id: str
    tradesperson_name: str
    amount: float
    details: str
    status: QuoteStatus
    model_config = ConfigDict(from_attributes=True)


class AssignIn(BaseModel):
    tradesperson_id: str


class StatusIn(BaseModel):
    status: MaintenanceStatus


class WorkCompleteIn(BaseModel):
    final_invoice_url: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)


class CompleteIn(BaseModel):
    cost: Optional[float] = Field(default=None, ge=0)


class MaintenanceOut(BaseModel):
    id: str
    property_id: str
    property_address: str
    issue: str
    status: MaintenanceStatus
    urgency: MaintenanceUrgency
    suggested_tradesperson: str
    assigned_tradesperson_id: Optional[str] = None
    quotes: list[QuoteOut] = Field(default_factory=list)
    final_invoice_url: Optional[str] = None
    reported_date: str
    cost: float
    model_config = ConfigDict(from_attributes=True)


# -------------------- Finance --------------------

class TransactionCreate(BaseModel):
    property_id: str
    type: TransactionType = TransactionType.EXPENSE
    description: str
    amount: float = Field(gt=0)
    date: dt.date = Field(default_factory=dt.date.today)

    @field_validator("property_id", "description")
    @classmethod
    def _check_text(cls, v: str) -> str:
        return _not_blank(v)


class TransactionOut(BaseModel):
    id: str
    property_id: str
    property_address: str
    type: TransactionType
    description: str
    amount: float
    date: str
    model_config = ConfigDict(from_attributes=True)


class TotalsOut(BaseModel):
    income: float
    expense: float
    net: float
    model_config = ConfigDict(from_attributes=True)


class MonthBucketOut(BaseModel):
    key: str
    month: str = Field(validation_alias="label")
    income: float
    expense: float
    model_config = ConfigDict(from_attributes=True)


class PeriodReportOut(BaseModel):
    title: str
    income: float
    expense: float
    net: float
    transactions: list[TransactionOut]


# -------------------- Documents --------------------

class ComplianceOut(BaseModel):
    status: str
    days_left: Optional[int] = None
    color: str
    model_config = ConfigDict(from_attributes=True)


class DocumentOut(BaseModel):
    id: str
    property_id: str
    property_address: Optional[str] = None
    file_name: str
    file_type: str
    document_type: Optional[str] = None
    expiry_date: Optional[str] = None
    extraction_state: ExtractionState
    file_data_url: Optional[str] = None
    compliance: Optional[ComplianceOut] = None

    @classmethod
    def from_record(cls, doc: Document, *, property_address: Optional[str] = None, today: Optional[date] = None) -> "DocumentOut":
        # placeholders get no badge; a resolved document without a usable expiry shows N/A
        badge = None if doc.extraction_state == ExtractionState.PENDING else document_compliance_status(doc.expiry_date, today)
        return cls(
            id=doc.id,
            property_id=doc.property_id,
            property_address=property_address,
            file_name=doc.file_name,
            file_type=doc.file_type,
            document_type=doc.document_type,
            expiry_date=doc.expiry_date,
            extraction_state=doc.extraction_state,
            file_data_url=doc.file_data_url,
            compliance=ComplianceOut.model_validate(badge) if badge else None,
        )


class ComplianceAlertOut(BaseModel):
    document_id: str
    property_id: str
    file_name: str
    document_type: Optional[str] = None
    expiry_date: str
    compliance: ComplianceOut
    model_config = ConfigDict(from_attributes=True)


# -------------------- Dashboard / AI --------------------

class DashboardStatsOut(BaseModel):
    total_properties: int
    occupied_properties: int
    occupancy_rate: int
    open_maintenance: int
    rent_overdue: int
    recent_maintenance: list[MaintenanceOut]
    model_config = ConfigDict(from_attributes=True)


class SuggestionOut(BaseModel):
    title: str
    suggestion: str
    model_config = ConfigDict(from_attributes=True)


class GuidanceIn(BaseModel):
    prompt: str

    @field_validator("prompt")
    @classmethod
    def _check_prompt(cls, v: str) -> str:
        return _not_blank(v)


class NarrativeOut(BaseModel):
    text: str


class TaxSummaryIn(BaseModel):
    tax_year: str
    property_id: str = "all"


class TaxSummaryOut(BaseModel):
    tax_year: str
    property_id: str
    property_label: str
    income: float
    expense: float
    net: float
    transaction_count: int
    report: Optional[str] = None
    message: Optional[str] = None


ExportFormat = Literal["csv", "pdf"]


class PropertyViewOut(BaseModel):
    property: PropertyOut
    tenant: Optional[TenantOut] = None
    maintenance_requests: list[MaintenanceOut]
    transactions: list[TransactionOut]
    documents: list[DocumentOut]
