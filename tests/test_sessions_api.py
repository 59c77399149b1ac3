"""Tests for session endpoints."""

from uuid import uuid4

from fastapi.testclient import TestClient

from folk_art_platform.api.app import create_app
from tests.conftest import World, auth_headers


def _booking(world: World, start: str = "2030-01-01T10:00:00Z", duration: int = 60):
    return {
        "artistId": str(world.artist.id),
        "sessionType": "lesson",
        "title": "Warli basics",
        "scheduledDate": start,
        "duration": duration,
        "format": "online",
        "meetingLink": "https://meet.example.com/warli",
        "pricing": {"amount": 500},
    }


def _complete(client: TestClient, world: World, session_id: str) -> None:
    for status in ("confirmed", "completed"):
        response = client.put(
            f"/sessions/{session_id}/status",
            json={"status": status},
            headers=auth_headers(world.artist_user),
        )
        assert response.status_code == 200


def test_book_session(container, world) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Session booked successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["payment_status"] == "pending"
    assert data["customer"]["name"] == "Asha"
    assert data["artist"]["name"] == "Jivya Mashe"
    assert data["pricing"] == {"amount": 500.0, "currency": "INR"}
    assert data["meeting_link"] == "https://meet.example.com/warli"
    assert data["ends_at"].startswith("2030-01-01T11:00:00")


def test_book_session_accepts_snake_case(container, world) -> None:
    client = TestClient(create_app(container))
    payload = {
        "artist_id": str(world.artist.id),
        "session_type": "workshop",
        "title": "Pithora workshop",
        "scheduled_date": "2030-02-01T10:00:00+00:00",
        "duration": 90,
        "format": "in-person",
        "location": {"address": "Kala Ghoda", "city": "Mumbai"},
        "pricing": {"amount": 1200, "currency": "INR"},
    }

    response = client.post("/sessions", json=payload, headers=auth_headers(world.customer))

    assert response.status_code == 201
    assert response.json()["data"]["location"]["city"] == "Mumbai"


def test_book_overlapping_session_fails(container, world) -> None:
    client = TestClient(create_app(container))
    client.post("/sessions", json=_booking(world), headers=auth_headers(world.customer))

    overlap = client.post(
        "/sessions",
        json=_booking(world, start="2030-01-01T10:30:00Z"),
        headers=auth_headers(world.other_customer),
    )
    adjacent = client.post(
        "/sessions",
        json=_booking(world, start="2030-01-01T11:00:00Z", duration=30),
        headers=auth_headers(world.other_customer),
    )

    assert overlap.status_code == 400
    assert overlap.json() == {
        "success": False,
        "message": "Artist is not available at the requested time",
    }
    assert adjacent.status_code == 201


def test_book_session_validation_errors(container, world) -> None:
    client = TestClient(create_app(container))
    payload = _booking(world)
    payload["sessionType"] = "concert"

    response = client.post("/sessions", json=payload, headers=auth_headers(world.customer))

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "sessionType" in response.json()["message"]


def test_book_session_unknown_artist(container, world) -> None:
    client = TestClient(create_app(container))
    payload = _booking(world)
    payload["artistId"] = str(uuid4())

    response = client.post("/sessions", json=payload, headers=auth_headers(world.customer))

    assert response.status_code == 404
    assert response.json()["message"] == "Artist not found"


def test_list_sessions_paginated(container, world) -> None:
    client = TestClient(create_app(container))
    for hour in ("10", "12", "14"):
        client.post(
            "/sessions",
            json=_booking(world, start=f"2030-01-01T{hour}:00:00Z"),
            headers=auth_headers(world.customer),
        )

    response = client.get(
        "/sessions", params={"limit": 2, "page": 2}, headers=auth_headers(world.customer)
    )
    artist_view = client.get("/sessions", headers=auth_headers(world.artist_user))

    body = response.json()
    assert body["count"] == 1
    assert body["total"] == 3
    assert body["totalPages"] == 2
    assert body["currentPage"] == 2
    assert artist_view.json()["total"] == 3


def test_list_sessions_status_filter(container, world) -> None:
    client = TestClient(create_app(container))
    created = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]
    client.put(
        f"/sessions/{created['id']}/status",
        json={"status": "cancelled"},
        headers=auth_headers(world.customer),
    )

    cancelled = client.get(
        "/sessions", params={"status": "cancelled"}, headers=auth_headers(world.customer)
    )
    pending = client.get(
        "/sessions", params={"status": "pending"}, headers=auth_headers(world.customer)
    )

    assert cancelled.json()["total"] == 1
    assert pending.json()["total"] == 0


def test_get_session_visibility(container, world) -> None:
    client = TestClient(create_app(container))
    session_id = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]["id"]

    own = client.get(f"/sessions/{session_id}", headers=auth_headers(world.customer))
    stranger = client.get(
        f"/sessions/{session_id}", headers=auth_headers(world.other_customer)
    )
    missing = client.get(f"/sessions/{uuid4()}", headers=auth_headers(world.customer))

    assert own.status_code == 200
    assert own.json()["data"]["id"] == session_id
    assert stranger.status_code == 403
    assert missing.status_code == 404
    assert missing.json()["message"] == "Session not found"


def test_update_status_invalid_transition(container, world) -> None:
    client = TestClient(create_app(container))
    session_id = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]["id"]

    response = client.put(
        f"/sessions/{session_id}/status",
        json={"status": "completed"},
        headers=auth_headers(world.artist_user),
    )
    unknown = client.put(
        f"/sessions/{session_id}/status",
        json={"status": "archived"},
        headers=auth_headers(world.artist_user),
    )

    assert response.status_code == 400
    assert response.json()["message"] == (
        "Cannot change session status from pending to completed"
    )
    assert unknown.status_code == 400
    assert unknown.json()["message"] == "Invalid status"


def test_rate_session_flow(container, world) -> None:
    client = TestClient(create_app(container))
    session_id = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]["id"]

    early = client.put(
        f"/sessions/{session_id}/rate",
        json={"score": 5},
        headers=auth_headers(world.customer),
    )
    assert early.status_code == 400
    assert early.json()["message"] == "Session must be completed before rating"

    _complete(client, world, session_id)
    rated = client.put(
        f"/sessions/{session_id}/rate",
        json={"score": 4, "review": "Patient and clear"},
        headers=auth_headers(world.customer),
    )
    again = client.put(
        f"/sessions/{session_id}/rate",
        json={"score": 5},
        headers=auth_headers(world.customer),
    )
    artist = client.get(f"/artists/{world.artist.id}").json()["data"]

    assert rated.status_code == 200
    assert rated.json()["message"] == "Session rated successfully"
    assert rated.json()["data"]["rating"]["score"] == 4
    assert again.status_code == 400
    assert artist["ratings"] == {"average": 4.0, "count": 1}


def test_rate_session_rejects_bad_score_and_other_users(container, world) -> None:
    client = TestClient(create_app(container))
    session_id = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]["id"]
    _complete(client, world, session_id)

    out_of_range = client.put(
        f"/sessions/{session_id}/rate",
        json={"score": 6},
        headers=auth_headers(world.customer),
    )
    by_artist = client.put(
        f"/sessions/{session_id}/rate",
        json={"score": 5},
        headers=auth_headers(world.artist_user),
    )

    assert out_of_range.status_code == 400
    assert out_of_range.json()["message"] == "Rating must be between 1 and 5"
    assert by_artist.status_code == 403


def test_sessions_require_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/sessions")

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Not authorized to access this route",
    }


def test_reconfirm_into_taken_slot_fails(container, world) -> None:
    client = TestClient(create_app(container))
    first_id = client.post(
        "/sessions", json=_booking(world), headers=auth_headers(world.customer)
    ).json()["data"]["id"]
    for status in ("confirmed", "rescheduled"):
        client.put(
            f"/sessions/{first_id}/status",
            json={"status": status},
            headers=auth_headers(world.artist_user),
        )
    client.post("/sessions", json=_booking(world), headers=auth_headers(world.other_customer))

    response = client.put(
        f"/sessions/{first_id}/status",
        json={"status": "confirmed"},
        headers=auth_headers(world.artist_user),
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Artist is not available at the requested time",
    }


def test_list_sessions_clamps_large_limit(container, world) -> None:
    client = TestClient(create_app(container))
    client.post("/sessions", json=_booking(world), headers=auth_headers(world.customer))

    response = client.get(
        "/sessions", params={"limit": 1000}, headers=auth_headers(world.customer)
    )

    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["totalPages"] == 1
