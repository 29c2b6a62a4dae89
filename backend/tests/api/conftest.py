"""API test fixtures — FastAPI app over httpx with a deterministic threshold.

Invariants:
    - Every test starts with an empty in-memory session registry
    - get_threshold_source overridden with one shared FixedThresholdSource
      (tests change threshold_source.value to script pops)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from bart.api.dependencies import get_threshold_source
from bart.api.routes.game_session import _sessions
from bart.main import app
from tests.fakes import FixedThresholdSource


@pytest.fixture
def threshold_source():
    return FixedThresholdSource(5)


@pytest.fixture
async def client(threshold_source):
    app.dependency_overrides[get_threshold_source] = lambda: threshold_source
    _sessions.clear()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    _sessions.clear()


@pytest.fixture
async def session_id(client):
    res = await client.post("/api/v1/sessions")
    return res.json()["session_id"]
