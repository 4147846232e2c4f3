"""
Tests for authentication endpoints: registration and login.
"""

import pytest
from httpx import AsyncClient

from app.services.auth_service import DEFAULT_AUTH_ERROR, auth_error_message, email_key

SIGNUP = {
    "fullName": "Asha Kapoor",
    "phoneNumber": "98765 43210",
    "email": "asha@example.com",
    "password": "secret123",
    "confirmPassword": "secret123",
}


async def _register(client: AsyncClient, **overrides):
    return await client.post("/api/v1/auth/register", json={**SIGNUP, **overrides})


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient, store):
    """Successful registration creates a buyer profile and signs in."""
    response = await _register(client)
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "buyer"
    assert data["redirectTo"] == "/home"
    assert data["tokenType"] == "bearer"
    assert data["profile"]["phoneNumber"] == "9876543210"
    assert "hashedPassword" not in data["profile"]  # Never expose password hash

    uid = data["profile"]["uid"]
    profile = await store.get(f"users/{uid}")
    assert profile["role"] == "buyer"
    assert await store.get("accountEmails/asha@example,com") == uid


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient):
    """Duplicate email (case-insensitive) returns 409 with a provider-style code."""
    await _register(client)
    response = await _register(client, email="ASHA@example.com")
    assert response.status_code == 409
    assert response.json()["detail"] == {
        "code": "auth/email-already-in-use",
        "message": "An account with this email already exists.",
    }


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    response = await _register(client, password="12345", confirmPassword="12345")
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "auth/weak-password"


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"fullName": "A"},
    {"phoneNumber": "12345"},
    {"email": "not-an-email"},
    {"confirmPassword": "different"},
])
async def test_register_form_validation(client: AsyncClient, overrides):
    response = await _register(client, **overrides)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient):
    """Valid credentials return a JWT and the post-login redirect."""
    await _register(client)
    response = await client.post("/api/v1/auth/login", json={
        "email": "asha@example.com",
        "password": "secret123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["accessToken"]
    assert data["role"] == "buyer"
    assert data["redirectTo"] == "/home"

    me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert me.json()["fullName"] == "Asha Kapoor"


@pytest.mark.asyncio
async def test_admin_login_redirects_to_dashboard(client: AsyncClient, store):
    registered = (await _register(client)).json()
    await store.update(f"users/{registered['profile']['uid']}", {"role": "admin"})

    response = await client.post("/api/v1/auth/login", json={
        "email": "asha@example.com",
        "password": "secret123",
    })
    assert response.json()["redirectTo"] == "/admin-dashboard"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await _register(client)
    response = await client.post("/api/v1/auth/login", json={
        "email": "asha@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json()["detail"]["message"] == "Incorrect password. Please try again."


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "auth/user-not-found"


@pytest.mark.asyncio
async def test_login_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"email": "nope", "password": "x"})
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "auth/invalid-email"


@pytest.mark.asyncio
async def test_login_throttled_after_repeated_failures(client: AsyncClient):
    await _register(client)
    for _ in range(5):
        await client.post("/api/v1/auth/login", json={"email": "asha@example.com", "password": "bad"})

    response = await client.post("/api/v1/auth/login", json={
        "email": "asha@example.com",
        "password": "secret123",
    })
    assert response.status_code == 429
    assert response.json()["detail"]["code"] == "auth/too-many-requests"


def test_unmapped_error_code_falls_back():
    assert auth_error_message("auth/popup-closed") == DEFAULT_AUTH_ERROR
    assert auth_error_message("auth/network-request-failed").startswith("Network error")


def test_email_key_escapes_dots():
    assert email_key(" Asha.K@Example.com ") == "asha,k@example,com"
