# landlord_hub/deps.py
from __future__ import annotations

from functools import lru_cache

from .config import settings
from .seed.demo_data import demo_state
from .services.ai_gateway import AIGateway
from .services.state_store import AppState, Store


def initial_state() -> AppState:
    return demo_state() if settings.seed_demo_data else AppState()


# One store per process; state is lost on restart.
store = Store(initial_state())


def get_store() -> Store:
    return store


@lru_cache(maxsize=1)
def _gateway() -> AIGateway:
    return AIGateway()


def get_gateway() -> AIGateway:
    """
    FastAPI dependency. Tests swap it via app.dependency_overrides.
    """
    return _gateway()
