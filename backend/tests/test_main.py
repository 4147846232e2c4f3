"""
Tests for the root, health and error-handling surface of the app.
"""

import pytest
import structlog
from httpx import AsyncClient

from app.core.config import get_settings
from app.core.logging import mask_credentials, setup_logging
from app.infrastructure.memory_store import InMemoryDocumentStore
from app.infrastructure.store import StoreUnavailableError
from app.infrastructure.store_factory import get_store
from app.main import app


class UnreachableStore(InMemoryDocumentStore):
    async def get(self, path):
        raise StoreUnavailableError("get")

    async def ping(self) -> bool:
        return False


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["store"]["reachable"] is True


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-Response-Time" in response.headers


@pytest.mark.asyncio
async def test_unreachable_store(client: AsyncClient):
    app.dependency_overrides[get_store] = lambda: UnreachableStore()

    health = await client.get("/health")
    assert health.json()["status"] == "degraded"

    response = await client.get("/api/v1/cars/")
    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "store/unavailable"


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_writes_total" in response.text


def test_credentials_are_masked_in_logs():
    event = mask_credentials(None, "info", {"event": "login", "email": "a@b.in", "password": "hunter2"})
    assert event == {"event": "login", "email": "a@b.in", "password": "***"}


def test_development_console_is_coloured(monkeypatch):
    seen = {}

    class RecordingRenderer:
        def __init__(self, **kwargs):
            seen.update(kwargs)

        def __call__(self, logger, method_name, event_dict):
            return str(event_dict)

    monkeypatch.setattr(get_settings(), "ENVIRONMENT", "development")
    monkeypatch.setattr(structlog.dev, "ConsoleRenderer", RecordingRenderer)
    try:
        setup_logging()
    finally:
        monkeypatch.undo()
        setup_logging()

    assert seen["colors"] is True
