from __future__ import annotations

import pytest

from lunch_roulette.app import app
from lunch_roulette.state.store import MemoryStore, get_store


@pytest.fixture(autouse=True)
def store():
    """Give every test its own empty in-memory document."""
    memory = MemoryStore()
    app.dependency_overrides[get_store] = lambda: memory
    yield memory
    app.dependency_overrides.clear()
