"""
MRI Soundscape Backend - Middleware Tests
==========================================

What:  Rate limiting and request IDs. Most tests use a minimal app so the
       limit can be tiny; one runs against the full application stack.
"""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from soundscape_api.config import settings
from soundscape_api.main import create_app
from soundscape_api.middleware.rate_limit import RateLimitMiddleware
from soundscape_api.middleware.request_id import RequestIDMiddleware


def _limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()

    @app.get("/api/ping")
    async def ping():
        return {"ok": True}

    @app.get("/api/health")
    async def health():
        return {"status": "healthy"}

    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    app.add_middleware(RequestIDMiddleware)
    return app


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_rejects_after_limit(self):
        transport = ASGITransport(app=_limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/api/ping")).status_code == 200
            assert (await client.get("/api/ping")).status_code == 200
            response = await client.get("/api/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        body = response.json()
        assert body["error"] == "rate_limit_exceeded"
        assert body["details"]["retry_after"] == int(response.headers["Retry-After"])

    @pytest.mark.asyncio
    async def test_rejection_carries_request_id(self):
        transport = ASGITransport(app=_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/api/ping")
            response = await client.get("/api/ping", headers={"X-Request-ID": "abc123"})

        assert response.status_code == 429
        assert response.json()["request_id"] == "abc123"
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/api/ping")
            for _ in range(3):
                response = await client.get("/api/health")
                assert response.status_code == 200


class TestApplicationStack:

    @pytest.mark.asyncio
    async def test_rate_limited_response_has_generated_request_id(self, store, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 1)
        transport = ASGITransport(app=create_app(store=store))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/api/analytics/summary")).status_code == 200
            response = await client.get("/api/analytics/summary")

        assert response.status_code == 429
        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8
        assert response.json()["request_id"] == rid
