"""
Tests for the role-gated access check.
"""

import pytest
from httpx import AsyncClient

from app.models.user import Role
from app.services.access_service import Area, decide_access, post_login_redirect, resolve_access


@pytest.mark.parametrize("area", [Area.ADMIN, Area.BUYER])
def test_unauthenticated_goes_to_signin(area):
    assert decide_access(False, None, area) == "/auth/signin"


@pytest.mark.parametrize("authenticated", [True, False])
@pytest.mark.parametrize("role", [None, Role.ADMIN, Role.BUYER])
def test_public_area_never_redirects(authenticated, role):
    assert decide_access(authenticated, role, Area.PUBLIC) is None


def test_admin_area():
    assert decide_access(True, Role.ADMIN, Area.ADMIN) is None
    assert decide_access(True, Role.BUYER, Area.ADMIN) == "/"
    assert decide_access(True, None, Area.ADMIN) == "/"


def test_buyer_area():
    assert decide_access(True, Role.BUYER, Area.BUYER) is None
    assert decide_access(True, Role.ADMIN, Area.BUYER) == "/admin-dashboard"
    assert decide_access(True, None, Area.BUYER) == "/"


def test_post_login_redirect():
    assert post_login_redirect(Role.ADMIN) == "/admin-dashboard"
    assert post_login_redirect(Role.BUYER) == "/home"
    assert post_login_redirect(None) == "/home"


@pytest.mark.asyncio
async def test_resolve_access_reads_profile_without_writing(store, admin):
    before = store.snapshot()
    decision = await resolve_access(store, admin, Area.BUYER)

    assert decision.role == Role.ADMIN
    assert decision.redirect_to == "/admin-dashboard"
    assert not decision.allowed
    assert store.snapshot() == before


@pytest.mark.asyncio
async def test_resolve_access_missing_or_unknown_role(store):
    await store.set("users/odd", {"fullName": "Odd", "role": "superuser"})

    missing = await resolve_access(store, "nobody", Area.ADMIN)
    unknown = await resolve_access(store, "odd", Area.BUYER)

    assert missing.role is None and missing.redirect_to == "/"
    assert unknown.role is None and unknown.redirect_to == "/"


@pytest.mark.asyncio
async def test_access_endpoint_guest(client: AsyncClient):
    response = await client.get("/api/v1/access", params={"area": "buyer"})
    assert response.status_code == 200
    assert response.json() == {
        "area": "buyer",
        "role": None,
        "allowed": False,
        "redirectTo": "/auth/signin",
    }


@pytest.mark.asyncio
async def test_access_endpoint_buyer(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/access", params={"area": "buyer"}, headers=auth_headers)
    data = response.json()
    assert data["allowed"] is True
    assert data["role"] == "buyer"

    response = await client.get("/api/v1/access", params={"area": "admin"}, headers=auth_headers)
    assert response.json()["redirectTo"] == "/"


@pytest.mark.asyncio
async def test_access_endpoint_invalid_token_is_a_guest(client: AsyncClient):
    response = await client.get(
        "/api/v1/access",
        params={"area": "admin"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.json()["redirectTo"] == "/auth/signin"


@pytest.mark.asyncio
async def test_access_endpoint_rejects_unknown_area(client: AsyncClient):
    response = await client.get("/api/v1/access", params={"area": "backstage"})
    assert response.status_code == 422
