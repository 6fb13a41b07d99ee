# landlord_hub/services/ai_gateway.py
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..integrations.gemini_client import AIClientError, GeminiClient, inline_part, text_part
from ..models import (
    DocumentType,
    MaintenanceRequest,
    MaintenanceUrgency,
    Property,
    Tenant,
    Transaction,
)

log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# AI gateway
# -----------------------------------------------------------------------------
# Three kinds of inference, three failure policies:
#   triage      -> never raises; fixed fallback on any failure
#   extraction  -> never raises for AI failures; {expiry: None, type: Other}
#   narratives  -> raise AIServiceError so the caller can offer a retry
#
# Structured replies are schema-checked before use. Anything that does not
# validate is a failure, never passed through.
# -----------------------------------------------------------------------------

GUIDANCE_SYSTEM_INSTRUCTION = (
    "You are an expert on UK landlord and property management regulations. "
    "Provide clear, concise, and accurate guidance. Use markdown for formatting."
)

TAX_SUMMARY_SYSTEM_INSTRUCTION = (
    "You are a UK property tax assistant preparing figures for a landlord's self assessment. "
    "Be precise with numbers, use GBP, and use markdown headings and bullet lists."
)

GUIDANCE_PROMPTS: tuple[str, ...] = (
    "What are my legal obligations regarding gas safety certificates?",
    "How do I correctly serve a Section 21 notice?",
    "What are the rules for protecting a tenant's deposit?",
    "Explain the requirements for an Electrical Installation Condition Report (EICR).",
    "What minimum EPC rating does a rental property need?",
)

DEFAULT_TRADESPERSON = "General Handyman"


class AIServiceError(RuntimeError):
    """A narrative request failed; safe to show a retry to the user."""


class CompletionClient(Protocol):
    async def generate(
        self,
        *,
        parts: list[dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
    ) -> str: ...


# -------------------- Response schemas --------------------

class TriageResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    urgency: MaintenanceUrgency
    suggested_tradesperson: str = Field(alias="suggestedTradesperson")

    @field_validator("suggested_tradesperson")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("suggestedTradesperson must not be blank")
        return v.strip()


TRIAGE_FALLBACK = TriageResult(urgency=MaintenanceUrgency.MEDIUM, suggested_tradesperson=DEFAULT_TRADESPERSON)


class DocumentInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    expiry_date: Optional[str] = Field(default=None, alias="expiryDate")
    document_type: Optional[DocumentType] = Field(default=None, alias="documentType")


EXTRACTION_FALLBACK = DocumentInfo(expiry_date=None, document_type=DocumentType.OTHER)


class Suggestion(BaseModel):
    title: str
    suggestion: str


_suggestions_adapter = TypeAdapter(list[Suggestion])


TRIAGE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "urgency": {
            "type": "STRING",
            "description": "The urgency of the maintenance request.",
            "enum": [u.value for u in MaintenanceUrgency],
        },
        "suggestedTradesperson": {
            "type": "STRING",
            "description": "The type of tradesperson needed, e.g., Plumber, Electrician, General Handyman.",
        },
    },
    "required": ["urgency", "suggestedTradesperson"],
}

DOCUMENT_INFO_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "expiryDate": {
            "type": "STRING",
            "nullable": True,
            "description": "The expiry date of the document in YYYY-MM-DD format, or null if none is found.",
        },
        "documentType": {
            "type": "STRING",
            "nullable": True,
            "enum": [d.value for d in DocumentType],
            "description": "Which kind of compliance document this is.",
        },
    },
    "required": ["expiryDate", "documentType"],
}

SUGGESTIONS_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING", "description": "A short, concise title for the suggestion."},
            "suggestion": {
                "type": "STRING",
                "description": "A detailed, actionable suggestion for the property manager.",
            },
        },
        "required": ["title", "suggestion"],
    },
}


# -------------------- Parsing helpers --------------------

def _loads(text: str) -> Any:
    s = (text or "").strip()
    # tolerate ```json fences around the payload
    if s.startswith("```"):
        s = s.strip("`")
        if s.lower().startswith("json"):
            s = s[4:]
    return json.loads(s)


def parse_triage(text: str) -> TriageResult:
    data = _loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"triage reply must be an object; got {type(data).__name__}")
    return TriageResult.model_validate(data)


def coerce_document_info(data: Any) -> DocumentInfo:
    """
    Field-level coercion for extraction replies:
      - expiryDate: kept when it is a non-empty string, otherwise None
      - documentType: enum member kept, unknown strings become Other, null stays null
    """
    if not isinstance(data, dict):
        raise ValueError(f"document info reply must be an object; got {type(data).__name__}")

    raw_expiry = data.get("expiryDate")
    expiry: Optional[str] = None
    if isinstance(raw_expiry, str) and raw_expiry.strip() and raw_expiry.strip().lower() != "null":
        expiry = raw_expiry.strip()

    raw_type = data.get("documentType")
    doc_type: Optional[DocumentType] = None
    if isinstance(raw_type, str) and raw_type.strip():
        try:
            doc_type = DocumentType(raw_type.strip())
        except ValueError:
            doc_type = DocumentType.OTHER
    elif raw_type is not None:
        doc_type = DocumentType.OTHER

    return DocumentInfo(expiry_date=expiry, document_type=doc_type)


def parse_suggestions(text: str) -> list[Suggestion]:
    data = _loads(text)
    if not isinstance(data, list):
        raise ValueError(f"suggestions reply must be an array; got {type(data).__name__}")
    return _suggestions_adapter.validate_python(data)


def _records_json(records: Sequence[Any]) -> str:
    return json.dumps([asdict(r) for r in records], indent=2, default=str)


def _portfolio_context(
    properties: Sequence[Property],
    maintenance_requests: Sequence[MaintenanceRequest],
    tenants: Sequence[Tenant],
) -> str:
    return (
        "Here is a summary of my UK property portfolio:\n"
        f"- Total Properties: {len(properties)}\n"
        f"- Properties Details: {_records_json(properties)}\n"
        f"- Active Tenants: {len(tenants)}\n"
        f"- Tenants Details: {_records_json(tenants)}\n"
        f"- Maintenance Requests: {len(maintenance_requests)}\n"
        f"- Maintenance Details: {_records_json(maintenance_requests)}\n"
    )


# -------------------- Gateway --------------------

class AIGateway:
    def __init__(self, client: Optional[CompletionClient] = None) -> None:
        self.client: CompletionClient = client or GeminiClient()

    # ---- triage ----

    async def triage_maintenance_request(self, issue_description: str) -> TriageResult:
        prompt = (
            f'A tenant has reported the following issue: "{issue_description}".\n'
            "Based on this, determine the urgency and suggest an appropriate tradesperson.\n"
            f"Urgency must be one of: {', '.join(u.value for u in MaintenanceUrgency)}."
        )
        try:
            text = await self.client.generate(parts=[text_part(prompt)], response_schema=TRIAGE_SCHEMA)
            return parse_triage(text)
        except Exception as e:  # any failure degrades to the fixed fallback
            log.warning("triage failed, using fallback: %s", e, extra={"ai_task": "triage"})
            return TRIAGE_FALLBACK

    # ---- document extraction ----

    async def extract_document_info(self, data_b64: str, mime_type: str) -> DocumentInfo:
        prompt = (
            "Analyze this document and find the expiration date, 'valid until' date, or expiry date. "
            "Return the date in YYYY-MM-DD format. If no specific expiry date is found, return null for expiryDate. "
            "Also classify the document as one of: "
            f"{', '.join(d.value for d in DocumentType)}."
        )
        try:
            text = await self.client.generate(
                parts=[inline_part(data_b64, mime_type), text_part(prompt)],
                response_schema=DOCUMENT_INFO_SCHEMA,
            )
            return coerce_document_info(_loads(text))
        except (AIClientError, ValueError) as e:
            log.warning("document extraction failed, using fallback: %s", e, extra={"ai_task": "extract_document"})
            return EXTRACTION_FALLBACK

    # ---- narratives ----

    async def _narrative(self, prompt: str, *, system_instruction: str, task: str) -> str:
        try:
            return await self.client.generate(parts=[text_part(prompt)], system_instruction=system_instruction)
        except AIClientError as e:
            log.warning("%s failed: %s", task, e, extra={"ai_task": task})
            raise AIServiceError(f"Failed to fetch {task} from AI service.") from e

    async def get_guidance(self, prompt: str) -> str:
        return await self._narrative(prompt, system_instruction=GUIDANCE_SYSTEM_INSTRUCTION, task="guidance")

    async def get_tax_summary(self, transactions: Sequence[Transaction], property_address: str, tax_year: str) -> str:
        prompt = (
            f"Prepare a tax summary for the UK tax year {tax_year} (6 April to 5 April) "
            f"for: {property_address}.\n"
            "Group income and allowable expenses, give totals and the net taxable profit, "
            "and flag any expense that may not be allowable.\n\n"
            f"Transactions:\n{_records_json(transactions)}"
        )
        return await self._narrative(prompt, system_instruction=TAX_SUMMARY_SYSTEM_INSTRUCTION, task="tax summary")

    async def get_portfolio_summary(
        self,
        properties: Sequence[Property],
        maintenance_requests: Sequence[MaintenanceRequest],
        tenants: Sequence[Tenant],
    ) -> str:
        prompt = (
            "Write a short overview of this UK property portfolio for its landlord: occupancy, "
            "rent arrears, open maintenance and anything that needs attention soon.\n\n"
            f"{_portfolio_context(properties, maintenance_requests, tenants)}"
        )
        return await self._narrative(prompt, system_instruction=GUIDANCE_SYSTEM_INSTRUCTION, task="portfolio summary")

    async def get_top_suggestions(
        self,
        properties: Sequence[Property],
        maintenance_requests: Sequence[MaintenanceRequest],
        tenants: Sequence[Tenant],
        *,
        today: Optional[date] = None,
    ) -> list[Suggestion]:
        summary = _portfolio_context(properties, maintenance_requests, tenants)
        prompt = (
            "Based on the following UK property portfolio summary, act as an expert property management consultant.\n"
            "Identify potential risks, opportunities for improvement, and upcoming deadlines.\n"
            "Provide exactly 10 actionable and insightful suggestions to help me manage my portfolio more effectively.\n"
            "Focus on things like preventative maintenance, tenant relations, compliance, and financial optimization.\n"
            f"Today's date is {(today or date.today()).isoformat()}.\n\n"
            f"{summary}"
        )
        try:
            text = await self.client.generate(parts=[text_part(prompt)], response_schema=SUGGESTIONS_SCHEMA)
            return parse_suggestions(text)
        except (AIClientError, ValueError, ValidationError) as e:
            log.warning("suggestions failed: %s", e, extra={"ai_task": "suggestions"})
            raise AIServiceError("Failed to fetch suggestions from AI service.") from e
