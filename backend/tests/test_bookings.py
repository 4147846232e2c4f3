"""
Tests for booking endpoints, legacy-key migration, and the admin stream.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from app.services import booking_service
from app.services.booking_service import migrate_legacy_bookings, stream_all_bookings
from app.services.reconciliation import booking_key

FORM = {
    "carId": "honda-city",
    "fullName": "Asha Kapoor",
    "phoneNumber": "9876543210",
    "emailAddress": "asha@example.com",
    "preferredVariant": "Blue",
    "bookingDate": "2025-04-01",
    "city": "Delhi",
    "paymentPreference": "Finance",
    "agreedToTerms": True,
}


async def _book(client: AsyncClient, headers: dict, **overrides):
    return await client.post("/api/v1/bookings/", json={**FORM, **overrides}, headers=headers)


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, auth_headers, catalog, store, buyer):
    """A valid form writes a synthetic-key record and returns it reconciled."""
    response = await _book(client, auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["carId"] == "honda-city"
    assert data["carName"] == "Honda City"
    assert data["price"] == 1200000
    assert data["discount"] == 50000
    assert data["status"] == "Confirmed"
    assert data["paymentPreference"] == "finance"
    assert data["userId"] == buyer
    assert data["id"].startswith("honda-city_")

    record = await store.get(f"bookings/{buyer}/{data['id']}")
    assert record["carId"] == "honda-city"
    assert record["carYear"] == "2023"


@pytest.mark.asyncio
async def test_same_car_can_be_booked_twice(client: AsyncClient, auth_headers, catalog):
    first = await _book(client, auth_headers)
    await asyncio.sleep(0.002)
    second = await _book(client, auth_headers, preferredVariant="Grey")

    assert first.status_code == second.status_code == 201
    assert first.json()["id"] != second.json()["id"]

    listed = await client.get("/api/v1/bookings/", headers=auth_headers)
    assert [b["preferredVariant"] for b in listed.json()] == ["Grey", "Blue"]


@pytest.mark.asyncio
async def test_create_booking_unauthenticated(client: AsyncClient, catalog):
    response = await client.post("/api/v1/bookings/", json=FORM)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_cannot_book(client: AsyncClient, admin_headers, catalog):
    response = await _book(client, admin_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_book_nonexistent_car(client: AsyncClient, auth_headers, catalog):
    response = await _book(client, auth_headers, carId="flying-car")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_terms_must_be_agreed(client: AsyncClient, auth_headers, catalog, store, buyer):
    response = await _book(client, auth_headers, agreedToTerms=False)
    assert response.status_code == 400
    assert await store.get(f"bookings/{buyer}") is None


@pytest.mark.asyncio
async def test_variant_must_be_offered(client: AsyncClient, auth_headers, catalog):
    response = await _book(client, auth_headers, preferredVariant="Purple")
    assert response.status_code == 400
    assert "Blue" in response.json()["detail"]


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"phoneNumber": "123"},
    {"emailAddress": "asha"},
    {"paymentPreference": "barter"},
    {"city": "   "},
    {"bookingDate": ""},
])
async def test_form_validation(client: AsyncClient, auth_headers, catalog, overrides):
    response = await _book(client, auth_headers, **overrides)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_reconciles_legacy_records(client: AsyncClient, auth_headers, catalog, store, buyer):
    """Old records are served with catalog data and defaults filled in."""
    await store.set(f"bookings/{buyer}/honda-city", {
        "carName": "Honda City (old)",
        "price": 999,
        "ownerName": "Asha",
        "createdAt": "2024-01-01T00:00:00Z",
    })
    await store.set(f"bookings/{buyer}/deleted-car-1", {
        "carName": "Old Sedan",
        "createdAt": "2024-06-01T00:00:00Z",
        "status": "cancelled",
    })

    response = await client.get("/api/v1/bookings/", headers=auth_headers)
    assert response.status_code == 200
    deleted, honda = response.json()

    assert honda["price"] == 1200000
    assert honda["carName"] == "Honda City"
    assert honda["ownerName"] == "Asha"
    assert deleted["carName"] == "Old Sedan"
    assert deleted["price"] == 0
    assert deleted["carImage"] == "/placeholder.png"
    assert deleted["status"] == "Cancelled"


@pytest.mark.asyncio
async def test_cancel_booking(client: AsyncClient, auth_headers, catalog, store, buyer):
    booking_id = (await _book(client, auth_headers)).json()["id"]

    response = await client.delete(f"/api/v1/bookings/{booking_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["bookingId"] == booking_id
    assert await store.get(f"bookings/{buyer}/{booking_id}") is None

    again = await client.delete(f"/api/v1/bookings/{booking_id}", headers=auth_headers)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_cannot_cancel_someone_elses_booking(client: AsyncClient, auth_headers, other_headers, catalog):
    booking_id = (await _book(client, auth_headers)).json()["id"]

    response = await client.delete(f"/api/v1/bookings/{booking_id}", headers=other_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_sees_all_bookings(
    client: AsyncClient, auth_headers, other_headers, admin_headers, catalog, buyer, other_buyer
):
    await _book(client, auth_headers)
    await _book(client, other_headers, carId="tata-nexon-ev", preferredVariant="White")

    response = await client.get("/api/v1/bookings/all", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert {b["userId"] for b in data} == {buyer, other_buyer}
    assert data[0]["carId"] == "tata-nexon-ev"

    forbidden = await client.get("/api/v1/bookings/all", headers=auth_headers)
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_migrate_legacy_keys(client: AsyncClient, admin_headers, auth_headers, catalog, store, buyer):
    await store.set(f"bookings/{buyer}/honda-city", {
        "ownerName": "Asha",
        "createdAt": "2025-03-01T00:00:00Z",
    })
    await store.set(f"bookings/{buyer}/tata-nexon-ev_1740787200000", {"carId": "tata-nexon-ev"})

    response = await client.post("/api/v1/bookings/migrate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"migrated": 1, "skipped": 0}

    tree = await store.get(f"bookings/{buyer}")
    assert set(tree) == {"honda-city_1740787200000", "tata-nexon-ev_1740787200000"}
    assert tree["honda-city_1740787200000"] == {
        "ownerName": "Asha",
        "createdAt": "2025-03-01T00:00:00Z",
        "carId": "honda-city",
    }

    # Running it again is a no-op
    assert await migrate_legacy_bookings(store) == (0, 0)


@pytest.mark.asyncio
async def test_stream_emits_on_every_change(store, catalog, buyer):
    stream = stream_all_bookings(store)

    initial = await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert initial == []

    await store.set(f"bookings/{buyer}/honda-city", {"ownerName": "Asha"})
    update = await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert [b.car_name for b in update] == ["Honda City"]

    await stream.aclose()
    assert store.watcher_count == 0


@pytest.mark.asyncio
async def test_stream_requires_admin(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/bookings/stream", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_simultaneous_submits_are_all_kept(client: AsyncClient, auth_headers, catalog):
    responses = await asyncio.gather(*(_book(client, auth_headers) for _ in range(5)))

    assert [r.status_code for r in responses] == [201] * 5
    ids = {r.json()["id"] for r in responses}
    assert len(ids) == 5

    listed = await client.get("/api/v1/bookings/", headers=auth_headers)
    assert {b["id"] for b in listed.json()} == ids


@pytest.mark.asyncio
async def test_taken_booking_key_is_skipped(store, monkeypatch):
    created = datetime(2030, 1, 1, tzinfo=timezone.utc)
    millis = int(created.timestamp() * 1000)
    monkeypatch.setattr(booking_service, "_last_key_millis", 0)
    await store.set(f"bookings/u1/{booking_key('honda-city', millis)}", {"ownerName": "Someone"})

    key = await booking_service._free_booking_key(store, "u1", "honda-city", created)
    assert key == booking_key("honda-city", millis + 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("car_id", ["honda.city", "honda-city/", "honda/city", "a#b"])
async def test_car_id_must_be_a_single_key(client: AsyncClient, auth_headers, catalog, store, car_id):
    response = await _book(client, auth_headers, carId=car_id)
    assert response.status_code == 422
    assert await store.get("bookings") is None


@pytest.mark.asyncio
async def test_cancel_with_invalid_id(client: AsyncClient, auth_headers):
    response = await client.delete("/api/v1/bookings/a.b", headers=auth_headers)
    assert response.status_code == 400
