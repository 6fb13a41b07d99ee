# landlord_hub/routers/meta.py
from __future__ import annotations

from fastapi import APIRouter

from ..config import settings
from ..models import (
    DepositScheme,
    DocumentType,
    MaintenanceStatus,
    MaintenanceUrgency,
    PropertyStatus,
    PropertyType,
    QuoteStatus,
    RentStatus,
    TransactionType,
)

router = APIRouter(tags=["meta"])

_ENUMS = {
    "property_type": PropertyType,
    "property_status": PropertyStatus,
    "rent_status": RentStatus,
    "maintenance_status": MaintenanceStatus,
    "maintenance_urgency": MaintenanceUrgency,
    "quote_status": QuoteStatus,
    "transaction_type": TransactionType,
    "document_type": DocumentType,
    "deposit_scheme": DepositScheme,
}


@router.get("/health", response_model=dict)
def health():
    return {"ok": True, "env": settings.app_env, "version": settings.app_version}


@router.get("/meta/enums", response_model=dict)
def enums():
    """Display values for every closed set, in lifecycle order where one exists."""
    return {name: [m.value for m in enum] for name, enum in _ENUMS.items()}
