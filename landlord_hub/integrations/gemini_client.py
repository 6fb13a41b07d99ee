# landlord_hub/integrations/gemini_client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..config import settings


class AIClientError(RuntimeError):
    """Transport failure, non-2xx reply, or a reply without any text."""


@dataclass
class GeminiConfig:
    """
    Gemini REST endpoint:
      POST {base_url}/models/{model}:generateContent
    """
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    timeout: Optional[float] = None

    @classmethod
    def from_settings(cls) -> "GeminiConfig":
        return cls(
            base_url=settings.gemini_base_url,
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            timeout=settings.ai_timeout_seconds,
        )


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def inline_part(data_b64: str, mime_type: str) -> Dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data_b64}}


class GeminiClient:
    """
    Thin async client for text / JSON completions.

    generate() returns the raw text of the first candidate. Parsing and
    schema checks belong to the caller (services.ai_gateway).
    """

    def __init__(self, cfg: Optional[GeminiConfig] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg = cfg or GeminiConfig.from_settings()
        self._transport = transport

    def enabled(self) -> bool:
        return bool(self.cfg.api_key)

    def _url(self) -> str:
        return f"{self.cfg.base_url.rstrip('/')}/models/{self.cfg.model}:generateContent"

    @staticmethod
    def build_payload(
        *,
        parts: list[Dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [text_part(system_instruction)]}
        if response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }
        return payload

    async def generate(
        self,
        *,
        parts: list[Dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        if not self.enabled():
            raise AIClientError("gemini_api_key not set")

        payload = self.build_payload(
            parts=parts,
            system_instruction=system_instruction,
            response_schema=response_schema,
        )
        headers = {"x-goog-api-key": self.cfg.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.cfg.timeout, transport=self._transport) as client:
                r = await client.post(self._url(), json=payload, headers=headers)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AIClientError(f"generateContent failed: {e}") from e

        return extract_text(data)


def extract_text(data: Any) -> str:
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(candidates, list) or not candidates:
        raise AIClientError("no candidates in response")

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise AIClientError("candidate has no content parts")

    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    if not text.strip():
        raise AIClientError("empty completion text")
    return text
