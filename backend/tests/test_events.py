"""
Tests for event endpoints: creation, owner-scoped updates and deletes, logos.
"""

import pytest
from datetime import datetime, timezone, timedelta
from httpx import AsyncClient

from tests.conftest import attendee_payload


def future_date(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, auth_headers):
    """Authenticated admin can create an event; the counter starts at zero."""
    response = await client.post(
        "/api/v1/events/",
        json={
            "name": "Python Conference 2026",
            "description": "Annual Python gathering",
            "date": future_date(),
            "venue": "Convention Center",
            "capacity": 500,
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "Python Conference 2026"
    assert data["capacity"] == 500
    assert data["registrations"] == 0


@pytest.mark.asyncio
async def test_create_event_default_capacity(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/events/",
        json={"name": "Meetup", "date": future_date(), "venue": "Pub"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["capacity"] == 100


@pytest.mark.asyncio
async def test_created_event_belongs_to_creator(client: AsyncClient, auth_headers):
    created = await client.post(
        "/api/v1/events/",
        json={"name": "Mine", "date": future_date(), "venue": "Here"},
        headers=auth_headers,
    )
    event_id = created.json()["data"]["id"]

    mine = await client.get("/api/v1/events/", headers=auth_headers)
    assert [e["id"] for e in mine.json()["data"]] == [event_id]


@pytest.mark.asyncio
async def test_create_event_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/events/", json={
        "name": "Unauthorized Event",
        "date": future_date(),
        "venue": "Nowhere",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_event_missing_fields(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/events/", json={"description": "no name"}, headers=auth_headers)
    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"name", "date", "venue"}


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [0, -5])
async def test_create_event_invalid_capacity(client: AsyncClient, auth_headers, capacity):
    response = await client.post(
        "/api/v1/events/",
        json={"name": "Bad", "date": future_date(), "venue": "Hall", "capacity": capacity},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "capacity" in response.json()["errors"]


@pytest.mark.asyncio
async def test_superadmin_cannot_use_owner_routes(client: AsyncClient, super_headers):
    response = await client.post(
        "/api/v1/events/",
        json={"name": "Root Event", "date": future_date(), "venue": "Hall"},
        headers=super_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_event_is_public(client: AsyncClient, test_event):
    response = await client.get(f"/api/v1/events/{test_event.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == test_event.id
    assert data["registrations"] == 0


@pytest.mark.asyncio
async def test_get_nonexistent_event(client: AsyncClient):
    response = await client.get("/api/v1/events/99999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Event not found"}


@pytest.mark.asyncio
async def test_list_and_count_only_own_events(client: AsyncClient, auth_headers, test_event, full_event, other_event):
    listed = await client.get("/api/v1/events/", headers=auth_headers)
    assert {e["id"] for e in listed.json()["data"]} == {test_event.id, full_event.id}

    counted = await client.get("/api/v1/events/count", headers=auth_headers)
    assert counted.json()["data"] == {"count": 2}


@pytest.mark.asyncio
async def test_update_event_partial(client: AsyncClient, auth_headers, test_event):
    """Only supplied fields change."""
    response = await client.put(
        f"/api/v1/events/{test_event.id}",
        json={"venue": "Room 101"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["venue"] == "Room 101"
    assert data["name"] == test_event.name
    assert data["capacity"] == 100


@pytest.mark.asyncio
async def test_update_event_not_owner(client: AsyncClient, other_headers, test_event):
    response = await client.put(
        f"/api/v1/events/{test_event.id}",
        json={"name": "Hijacked"},
        headers=other_headers,
    )
    assert response.status_code == 403
    assert response.json()["message"] == "You are not authorized to update this event"


@pytest.mark.asyncio
async def test_update_unknown_event_is_forbidden(client: AsyncClient, auth_headers):
    """Ownership is checked first, so an id the admin does not own is a 403 even if it does not exist."""
    response = await client.put("/api/v1/events/99999", json={"name": "x"}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_event_blank_required_field(client: AsyncClient, auth_headers, test_event):
    response = await client.put(f"/api/v1/events/{test_event.id}", json={"name": ""}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_capacity_cannot_drop_below_registrations(client: AsyncClient, auth_headers, full_event):
    response = await client.put(
        f"/api/v1/events/{full_event.id}",
        json={"capacity": 3},
        headers=auth_headers,
    )
    assert response.status_code == 409

    unchanged = await client.get(f"/api/v1/events/{full_event.id}")
    assert unchanged.json()["data"]["capacity"] == 5


@pytest.mark.asyncio
async def test_capacity_increase_reopens_full_event(client: AsyncClient, auth_headers, full_event):
    response = await client.put(
        f"/api/v1/events/{full_event.id}",
        json={"capacity": 6},
        headers=auth_headers,
    )
    assert response.status_code == 200

    admitted = await client.post("/api/v1/registrations/", json=attendee_payload(full_event.id))
    assert admitted.status_code == 201


@pytest.mark.asyncio
async def test_delete_event(client: AsyncClient, auth_headers, test_event):
    response = await client.delete(f"/api/v1/events/{test_event.id}", headers=auth_headers)
    assert response.status_code == 200

    gone = await client.get(f"/api/v1/events/{test_event.id}")
    assert gone.status_code == 404

    count = await client.get("/api/v1/events/count", headers=auth_headers)
    assert count.json()["data"]["count"] == 0


@pytest.mark.asyncio
async def test_delete_event_with_registrations(client: AsyncClient, auth_headers, test_event, registration):
    response = await client.delete(f"/api/v1/events/{test_event.id}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Cannot delete event. Event has associated registrations."


@pytest.mark.asyncio
async def test_delete_event_not_owner(client: AsyncClient, other_headers, test_event):
    response = await client.delete(f"/api/v1/events/{test_event.id}", headers=other_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_upload_logo(client: AsyncClient, auth_headers, test_event, media_storage):
    response = await client.put(
        f"/api/v1/events/{test_event.id}/logo",
        files={"logo": ("logo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 200
    logo_url = response.json()["data"]["logoUrl"]
    assert logo_url.startswith("/media/event-logos/")
    assert logo_url.endswith(".png")

    stored = media_storage.root / logo_url[len("/media/"):]
    assert stored.read_bytes() == b"\x89PNG\r\n\x1a\nfake"


@pytest.mark.asyncio
async def test_replacing_logo_removes_previous_file(client: AsyncClient, auth_headers, test_event, media_storage):
    first = await client.put(
        f"/api/v1/events/{test_event.id}/logo",
        files={"logo": ("a.jpg", b"first", "image/jpeg")},
        headers=auth_headers,
    )
    first_path = media_storage.root / first.json()["data"]["logoUrl"][len("/media/"):]
    assert first_path.exists()

    await client.put(
        f"/api/v1/events/{test_event.id}/logo",
        files={"logo": ("b.jpg", b"second", "image/jpeg")},
        headers=auth_headers,
    )
    assert not first_path.exists()


@pytest.mark.asyncio
async def test_upload_logo_rejects_other_types(client: AsyncClient, auth_headers, test_event):
    response = await client.put(
        f"/api/v1/events/{test_event.id}/logo",
        files={"logo": ("logo.gif", b"GIF89a", "image/gif")},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "logo" in response.json()["errors"]


@pytest.mark.asyncio
async def test_upload_logo_not_owner(client: AsyncClient, other_headers, test_event):
    response = await client.put(
        f"/api/v1/events/{test_event.id}/logo",
        files={"logo": ("logo.png", b"png", "image/png")},
        headers=other_headers,
    )
    assert response.status_code == 403
