# tests/conftest.py
from __future__ import annotations

import json
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from landlord_hub.deps import get_gateway, store
from landlord_hub.integrations.gemini_client import AIClientError
from landlord_hub.main import app
from landlord_hub.seed.demo_data import demo_state
from landlord_hub.services.ai_gateway import AIGateway


class FakeCompletionClient:
    """
    Stands in for GeminiClient. Replies are consumed in order; an Exception
    instance in the queue is raised instead of returned.
    """

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    async def generate(
        self,
        *,
        parts: list[dict[str, Any]],
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
    ) -> str:
        self.calls.append(
            {"parts": parts, "system_instruction": system_instruction, "response_schema": response_schema}
        )
        if not self.replies:
            raise AIClientError("no reply queued")
        r = self.replies.pop(0)
        if isinstance(r, Exception):
            raise r
        if isinstance(r, (dict, list)):
            return json.dumps(r)
        return r


@pytest.fixture
def fake_ai() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def client(fake_ai: FakeCompletionClient):
    store.reset(demo_state())
    app.dependency_overrides[get_gateway] = lambda: AIGateway(fake_ai)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        store.reset(demo_state())
