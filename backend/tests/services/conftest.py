"""Service test fixtures — FastAPI app wired to a fake upstream + async test client.

Invariants:
    - Every test gets a fresh app, fresh settings and a fresh FakeUpstream
    - The real MusicServiceClient runs against httpx.MockTransport

Design Decisions:
    - raise_app_exceptions=False: the recovery guard, not the transport, must
      turn unexpected exceptions into responses
"""

import pytest
from httpx import ASGITransport, AsyncClient

from pms.main import create_app
from tests.services.mock_upstream import FakeUpstream


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def app(settings, fake_upstream):
    application = create_app(settings, music_client=fake_upstream.client())
    yield application
    await application.state.music_client.aclose()


@pytest.fixture
async def client(app):
    """Async test client bound to the in-process app."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
