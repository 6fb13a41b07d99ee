# landlord_hub/services/ownership.py
from __future__ import annotations

from fastapi import HTTPException

from ..models import Document, MaintenanceRequest, Property, Tradesperson
from .state_store import AppState, find_document, find_property, find_request, find_tradesperson


def must_get_property(state: AppState, *, property_id: str) -> Property:
    row = find_property(state, property_id)
    if not row:
        raise HTTPException(status_code=404, detail="property not found")
    return row


def must_get_request(state: AppState, *, request_id: str) -> MaintenanceRequest:
    row = find_request(state, request_id)
    if not row:
        raise HTTPException(status_code=404, detail="maintenance request not found")
    return row


def must_get_tradesperson(state: AppState, *, tradesperson_id: str) -> Tradesperson:
    row = find_tradesperson(state, tradesperson_id)
    if not row:
        raise HTTPException(status_code=404, detail="tradesperson not found")
    return row


def must_get_document(state: AppState, *, document_id: str) -> Document:
    row = find_document(state, document_id)
    if not row:
        raise HTTPException(status_code=404, detail="document not found")
    return row
