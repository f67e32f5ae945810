"""
Integration tests for booking endpoints.
Tests email normalization, event reference checks and updates.
"""
import uuid
import pytest
from httpx import AsyncClient

from app.db.repositories import event_exists
from app.services import booking_service


@pytest.fixture
def lookup_counter(monkeypatch):
    """Count event existence lookups made by the booking service."""
    calls = []

    async def counting_event_exists(db, event_id):
        calls.append(event_id)
        return await event_exists(db, event_id)

    monkeypatch.setattr(booking_service, "db_event_exists", counting_event_exists)
    return calls


@pytest.mark.integration
@pytest.mark.asyncio
class TestBookingEndpoints:
    """Test booking API endpoints."""

    async def test_create_booking_normalizes_email(self, client: AsyncClient, test_event):
        response = await client.post(
            "/api/v1/bookings/",
            json={"event_id": str(test_event.id), "email": "  User@Example.com "},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "user@example.com"
        assert data["event_id"] == str(test_event.id)

    async def test_create_booking_invalid_email(self, client: AsyncClient, test_event):
        response = await client.post(
            "/api/v1/bookings/",
            json={"event_id": str(test_event.id), "email": "not-an-email"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_EMAIL"

    async def test_create_booking_for_unknown_event(self, client: AsyncClient, db_session):
        response = await client.post(
            "/api/v1/bookings/",
            json={"event_id": str(uuid.uuid4()), "email": "user@example.com"},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "DANGLING_REFERENCE"

    async def test_create_booking_missing_event_id(self, client: AsyncClient, db_session):
        response = await client.post("/api/v1/bookings/", json={"email": "user@example.com"})

        assert response.status_code == 422
        assert response.json()["code"] == "REQUIRED_FIELD"

    async def test_email_update_does_not_recheck_event(
        self, client: AsyncClient, test_booking, lookup_counter
    ):
        response = await client.patch(
            f"/api/v1/bookings/{test_booking.id}",
            json={"email": "New@Example.com"},
        )

        assert response.status_code == 200
        assert response.json()["email"] == "new@example.com"
        assert lookup_counter == []

    async def test_event_id_update_is_checked(self, client: AsyncClient, test_booking, lookup_counter):
        missing = uuid.uuid4()
        response = await client.patch(
            f"/api/v1/bookings/{test_booking.id}",
            json={"event_id": str(missing)},
        )

        assert response.status_code == 404
        assert lookup_counter == [missing]

    async def test_update_unknown_booking(self, client: AsyncClient, db_session):
        response = await client.patch(f"/api/v1/bookings/{uuid.uuid4()}", json={"email": "a@b.co"})

        assert response.status_code == 404
        assert response.json()["code"] == "BOOKING_NOT_FOUND"

    async def test_list_bookings_for_event(self, client: AsyncClient, test_event, test_booking):
        response = await client.get(f"/api/v1/events/{test_event.slug}/bookings")

        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [str(test_booking.id)]

    async def test_booking_updates_event_detail_count(self, client: AsyncClient, test_event):
        before = await client.get(f"/api/v1/events/{test_event.slug}")
        await client.post(
            "/api/v1/bookings/",
            json={"event_id": str(test_event.id), "email": "user@example.com"},
        )
        after = await client.get(f"/api/v1/events/{test_event.slug}")

        assert before.json()["bookings_count"] == 0
        assert after.json()["bookings_count"] == 1
