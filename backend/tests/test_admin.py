"""
Tests for staff, showroom and contact management.
"""

from datetime import date

import pytest
from httpx import AsyncClient

from app.services.staff_service import compute_age, username_for

STAFF = {
    "firstName": "Priya",
    "middleName": "K",
    "lastName": "Sharma",
    "dateOfBirth": "1990-06-15",
    "contactNumber": "9876500000",
    "emailAddress": "priya@yelocar.in",
    "role": "Sales Executive",
    "department": "Sales",
    "salary": 45000,
}

SHOWROOM = {
    "name": "YeloCar Andheri",
    "address": "12 Link Road",
    "city": "Mumbai",
    "state": "Maharashtra",
    "phone": "02212345678",
}


def test_compute_age_before_and_after_birthday():
    assert compute_age("1990-06-15", today=date(2025, 6, 14)) == 34
    assert compute_age("1990-06-15", today=date(2025, 6, 15)) == 35
    assert compute_age("") is None
    assert compute_age("15/06/1990") is None


def test_username_for():
    assert username_for("Mary Ann", "De Souza") == "maryann.desouza"


@pytest.mark.asyncio
async def test_create_staff_derives_fields(client: AsyncClient, admin_headers, store):
    response = await client.post("/api/v1/staff/", json=STAFF, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["fullName"] == "Priya K Sharma"
    assert data["username"] == "priya.sharma"
    assert data["employeeId"].startswith("EMP")
    assert len(data["employeeId"]) == 9
    assert data["age"] == compute_age("1990-06-15")

    stored = await store.get(f"staff/{data['id']}")
    assert stored["employeeId"] == data["employeeId"]


@pytest.mark.asyncio
async def test_update_staff_keeps_employee_id(client: AsyncClient, admin_headers):
    created = (await client.post("/api/v1/staff/", json=STAFF, headers=admin_headers)).json()

    response = await client.put(
        f"/api/v1/staff/{created['id']}",
        json={**STAFF, "lastName": "Verma", "employeeId": "EMP999999"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["employeeId"] == created["employeeId"]
    assert data["createdAt"] == created["createdAt"]
    assert data["username"] == "priya.verma"


@pytest.mark.asyncio
async def test_staff_search_and_delete(client: AsyncClient, admin_headers):
    priya = (await client.post("/api/v1/staff/", json=STAFF, headers=admin_headers)).json()
    await client.post(
        "/api/v1/staff/",
        json={**STAFF, "firstName": "Arjun", "emailAddress": "arjun@yelocar.in", "department": "Service"},
        headers=admin_headers,
    )

    found = await client.get("/api/v1/staff/", params={"search": "priya"}, headers=admin_headers)
    assert [m["id"] for m in found.json()] == [priya["id"]]

    service = await client.get("/api/v1/staff/", params={"department": "Service"}, headers=admin_headers)
    assert [m["firstName"] for m in service.json()] == ["Arjun"]

    assert (await client.delete(f"/api/v1/staff/{priya['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"/api/v1/staff/{priya['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_staff_requires_admin(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/staff/", json=STAFF, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_staff_rejects_bad_email(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/staff/",
        json={**STAFF, "emailAddress": "priya-at-yelocar"},
        headers=admin_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_showroom_lifecycle(client: AsyncClient, admin_headers, store):
    created = await client.post("/api/v1/showrooms/", json=SHOWROOM, headers=admin_headers)
    assert created.status_code == 201
    showroom = created.json()
    assert showroom["status"] == "active"

    toggled = await client.post(f"/api/v1/showrooms/{showroom['id']}/toggle", headers=admin_headers)
    assert toggled.json()["status"] == "inactive"
    assert (await store.get(f"showrooms/{showroom['id']}/status")) == "inactive"
    assert (await store.get(f"showrooms/{showroom['id']}/name")) == "YeloCar Andheri"

    listed = await client.get("/api/v1/showrooms/", headers=admin_headers)
    assert [s["status"] for s in listed.json()] == ["inactive"]

    assert (await client.delete(f"/api/v1/showrooms/{showroom['id']}", headers=admin_headers)).status_code == 204
    assert (await client.post(f"/api/v1/showrooms/{showroom['id']}/toggle", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_user_message_replaces_previous(client: AsyncClient, auth_headers, store, buyer):
    first = {"fullName": "Asha", "phone": "9876543210", "email": "asha@example.com", "message": "Is the City available?"}
    response = await client.post("/api/v1/contact/", json=first, headers=auth_headers)
    assert response.status_code == 201
    assert response.json() == {"id": buyer, "message": "Message sent successfully"}

    await client.post("/api/v1/contact/", json={**first, "message": "Never mind"}, headers=auth_headers)
    stored = await store.get("messages")
    assert list(stored) == [buyer]
    assert stored[buyer]["message"] == "Never mind"


@pytest.mark.asyncio
async def test_guest_messages_are_appended(client: AsyncClient, store):
    payload = {"fullName": "Guest", "phone": "9000000000", "email": "guest@example.com", "message": "Hi"}
    first = await client.post("/api/v1/contact/", json=payload)
    second = await client.post("/api/v1/contact/", json=payload)
    assert first.json()["id"] != second.json()["id"]
    assert len(await store.get("contactForms")) == 2


@pytest.mark.asyncio
async def test_admin_inbox_merges_sources(client: AsyncClient, admin_headers, store):
    await store.set("messages/old-user", {
        "FullName": "Legacy User",
        "Contactno": "9111111111",
        "Email": "legacy@example.com",
        "Message": "Old form",
        "createdAt": "2024-01-01T00:00:00Z",
    })
    await store.set("contactForms/guest-1", {
        "fullName": "Walk In",
        "phone": "9222222222",
        "email": "walkin@example.com",
        "message": "Test drive?",
        "createdAt": "2025-01-01T00:00:00Z",
    })

    response = await client.get("/api/v1/contact/", headers=admin_headers)
    assert response.status_code == 200
    guest, user = response.json()
    assert guest["source"] == "Guest"
    assert guest["userId"] is None
    assert user == {
        "id": "old-user",
        "name": "Legacy User",
        "email": "legacy@example.com",
        "phone": "9111111111",
        "message": "Old form",
        "createdAt": "2024-01-01T00:00:00Z",
        "source": "User",
        "userId": "old-user",
    }

    searched = await client.get("/api/v1/contact/", params={"search": "test drive"}, headers=admin_headers)
    assert [m["id"] for m in searched.json()] == ["guest-1"]


@pytest.mark.asyncio
async def test_inbox_requires_admin(client: AsyncClient, auth_headers):
    assert (await client.get("/api/v1/contact/", headers=auth_headers)).status_code == 403


@pytest.mark.asyncio
async def test_invalid_staff_and_showroom_ids(client: AsyncClient, admin_headers):
    assert (await client.get("/api/v1/staff/a$b", headers=admin_headers)).status_code == 400
    assert (await client.delete("/api/v1/showrooms/a.b", headers=admin_headers)).status_code == 400
