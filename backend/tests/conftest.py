"""
MRI Soundscape Backend - Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── store: Empty MemoryStore
    ├── test_app: FastAPI app serving `store`
    └── test_client: HTTPX AsyncClient bound to `test_app`
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["GENERATION_DELAY_SECONDS"] = "0"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from soundscape_api.main import create_app
from soundscape_api.store import MemoryStore


@pytest.fixture
def store():
    """A fresh, empty MemoryStore."""
    return MemoryStore()


@pytest.fixture
def test_app(store):
    """
    A FastAPI app built around the `store` fixture.

    Tests can seed or inspect `store` directly and see the same data
    through HTTP.
    """
    return create_app(store=store)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight to the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def ocean_session_data():
    """Body for POST /api/sessions with only volume overridden."""
    return {"soundscapeType": "ocean", "volume": 50}
