"""
Pytest fixtures for the store, HTTP client, and authenticated users.

Every test gets a fresh InMemoryDocumentStore injected through the
get_store dependency, so tests are isolated without any external service.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core.security import create_access_token
from app.infrastructure.memory_store import InMemoryDocumentStore
from app.infrastructure.store_factory import get_store
from app.seed import seed_catalog

BUYER_ID = "buyer-uid-1"
OTHER_BUYER_ID = "buyer-uid-2"
ADMIN_ID = "admin-uid-1"


@pytest_asyncio.fixture(scope="function")
async def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest_asyncio.fixture(scope="function")
async def client(store: InMemoryDocumentStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the store dependency pointed at the test store."""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def catalog(store: InMemoryDocumentStore) -> InMemoryDocumentStore:
    """The default six-car catalog."""
    await seed_catalog(store)
    return store


async def _profile(store: InMemoryDocumentStore, uid: str, role: str, name: str) -> None:
    await store.set(f"users/{uid}", {
        "email": f"{uid}@example.com",
        "fullName": name,
        "phoneNumber": "9876543210",
        "role": role,
        "createdAt": "2025-01-01T00:00:00+00:00",
    })


@pytest_asyncio.fixture
async def buyer(store: InMemoryDocumentStore) -> str:
    await _profile(store, BUYER_ID, "buyer", "Asha Buyer")
    return BUYER_ID


@pytest_asyncio.fixture
async def other_buyer(store: InMemoryDocumentStore) -> str:
    await _profile(store, OTHER_BUYER_ID, "buyer", "Ravi Buyer")
    return OTHER_BUYER_ID


@pytest_asyncio.fixture
async def admin(store: InMemoryDocumentStore) -> str:
    await _profile(store, ADMIN_ID, "admin", "Meera Admin")
    return ADMIN_ID


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user_id})}"}


@pytest.fixture
def auth_headers(buyer: str) -> dict:
    """Authorization headers for the buyer."""
    return bearer(buyer)


@pytest.fixture
def other_headers(other_buyer: str) -> dict:
    return bearer(other_buyer)


@pytest.fixture
def admin_headers(admin: str) -> dict:
    return bearer(admin)
