"""
Tests for booking endpoints including venue conflict scenarios.
"""

import copy

import pytest
from httpx import AsyncClient


def _session(venue, start, end, day="2026-12-12", name="Session"):
    return {
        "session_name": name,
        "venue": venue,
        "start_time": start,
        "end_time": end,
        "session_date": day,
    }


def _with_sessions(payload: dict, *sessions) -> dict:
    data = copy.deepcopy(payload)
    data["sessions"] = list(sessions)
    return data


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, booking_payload):
    """Successful booking returns 201 with a generated booking number."""
    response = await client.post("/api/bookings", json=booking_payload)
    assert response.status_code == 201
    data = response.json()
    assert data["booking_number"].startswith("BK-20261212-")
    assert data["status"] == "booked"
    assert data["event_duration"] == 1
    assert len(data["sessions"]) == 1
    assert data["sessions"][0]["venue"] == "Hall A"


@pytest.mark.asyncio
async def test_overlapping_booking_returns_409(client: AsyncClient, booking_payload):
    """Same venue, same day, overlapping time is rejected with the conflict pairs."""
    first = await client.post("/api/bookings", json=booking_payload)
    assert first.status_code == 201

    second = await client.post(
        "/api/bookings",
        json=_with_sessions(booking_payload, _session("Hall A", "20:00", "23:00")),
    )
    assert second.status_code == 409
    body = second.json()
    assert body["conflicts"] == [{"date": "2026-12-12", "venue": "Hall A"}]


@pytest.mark.asyncio
async def test_touching_sessions_allowed(client: AsyncClient, booking_payload):
    """A session starting exactly when another ends is not a conflict."""
    await client.post("/api/bookings", json=booking_payload)

    response = await client.post(
        "/api/bookings",
        json=_with_sessions(booking_payload, _session("Hall A", "14:00", "18:00")),
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_other_venue_same_time_allowed(client: AsyncClient, booking_payload):
    await client.post("/api/bookings", json=booking_payload)

    response = await client.post(
        "/api/bookings",
        json=_with_sessions(booking_payload, _session("Hall B", "18:00", "22:00")),
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_multi_day_booking_conflicts_on_middle_day(client: AsyncClient, booking_payload):
    """A 3-day booking repeats its sessions daily, so it blocks the middle day too."""
    multi_day = _with_sessions(booking_payload, _session("Hall A", "19:00", "23:00", day="2026-12-11"))
    multi_day.update(event_date="2026-12-11", event_end_date="2026-12-13", event_duration=3)
    response = await client.post("/api/bookings", json=multi_day)
    assert response.status_code == 201
    assert response.json()["event_duration"] == 3

    clash = _with_sessions(booking_payload, _session("Hall A", "21:00", "23:30"))
    response = await client.post("/api/bookings", json=clash)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_self_overlapping_sessions_rejected(client: AsyncClient, booking_payload):
    payload = _with_sessions(
        booking_payload,
        _session("Hall A", "10:00", "12:00"),
        _session("Hall A", "11:00", "13:00"),
    )
    response = await client.post("/api/bookings", json=payload)
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "session, field",
    [
        (_session("Hall A", "9:00", "12:00"), "start_time"),
        (_session("Hall A", "14:00", "12:00"), "sessions[0].end_time"),
        (_session("  ", "10:00", "12:00"), "sessions[0].venue"),
        (_session("Hall A", "10:00", "12:00", day="2026-12-20"), "sessions[0].session_date"),
    ],
)
async def test_invalid_sessions_return_400(client: AsyncClient, booking_payload, session, field):
    response = await client.post("/api/bookings", json=_with_sessions(booking_payload, session))
    assert response.status_code == 400
    assert response.json()["field"] == field


@pytest.mark.asyncio
async def test_end_date_before_start_returns_400(client: AsyncClient, booking_payload):
    payload = copy.deepcopy(booking_payload)
    payload["event_end_date"] = "2026-12-10"
    response = await client.post("/api/bookings", json=payload)
    assert response.status_code == 400
    assert response.json()["field"] == "event_end_date"


@pytest.mark.asyncio
async def test_missing_required_field_returns_422(client: AsyncClient, booking_payload):
    payload = copy.deepcopy(booking_payload)
    del payload["client_name"]
    response = await client.post("/api/bookings", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_check_conflicts_dry_run(client: AsyncClient, booking_payload):
    """The dry-run reports conflicts without saving anything."""
    await client.post("/api/bookings", json=booking_payload)

    clash = _with_sessions(booking_payload, _session("Hall A", "17:00", "19:00"))
    response = await client.post("/api/bookings/check-conflicts", json=clash)
    assert response.status_code == 200
    assert response.json() == {
        "has_conflict": True,
        "conflicts": [{"date": "2026-12-12", "venue": "Hall A"}],
    }

    bookings = await client.get("/api/bookings")
    assert len(bookings.json()) == 1


@pytest.mark.asyncio
async def test_cancel_booking(client: AsyncClient, booking_payload):
    """Cancellation frees the venue for a new booking."""
    booking_id = (await client.post("/api/bookings", json=booking_payload)).json()["id"]

    cancel_response = await client.post(
        f"/api/bookings/{booking_id}/cancel",
        json={"reason": "Client postponed"},
    )
    assert cancel_response.status_code == 200
    assert cancel_response.json()["status"] == "cancelled"
    assert cancel_response.json()["cancelled_at"] is not None

    rebook = await client.post("/api/bookings", json=booking_payload)
    assert rebook.status_code == 201


@pytest.mark.asyncio
async def test_cancel_already_cancelled(client: AsyncClient, booking_payload):
    """Double-cancelling returns 400."""
    booking_id = (await client.post("/api/bookings", json=booking_payload)).json()["id"]

    await client.post(f"/api/bookings/{booking_id}/cancel")

    response = await client.post(f"/api/bookings/{booking_id}/cancel")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_bookings_filters(client: AsyncClient, booking_payload):
    await client.post("/api/bookings", json=booking_payload)
    tentative = _with_sessions(booking_payload, _session("Hall B", "10:00", "12:00", day="2026-12-15"))
    tentative.update(event_date="2026-12-15", status="tentative")
    await client.post("/api/bookings", json=tentative)

    all_bookings = await client.get("/api/bookings")
    assert len(all_bookings.json()) == 2

    by_status = await client.get("/api/bookings", params={"status": "tentative"})
    assert [b["event_date"] for b in by_status.json()] == ["2026-12-15"]

    by_date = await client.get("/api/bookings", params={"date": "2026-12-12"})
    assert [b["status"] for b in by_date.json()] == ["booked"]


@pytest.mark.asyncio
async def test_update_booking_rechecks_conflicts(client: AsyncClient, booking_payload):
    await client.post("/api/bookings", json=booking_payload)
    other = _with_sessions(booking_payload, _session("Hall B", "18:00", "22:00"))
    other_id = (await client.post("/api/bookings", json=other)).json()["id"]

    moved = await client.patch(
        f"/api/bookings/{other_id}",
        json={"sessions": [_session("Hall A", "19:00", "21:00")]},
    )
    assert moved.status_code == 409

    renamed = await client.patch(f"/api/bookings/{other_id}", json={"client_name": "Arjun Mehta"})
    assert renamed.status_code == 200
    assert renamed.json()["client_name"] == "Arjun Mehta"
    assert renamed.json()["sessions"][0]["venue"] == "Hall B"


@pytest.mark.asyncio
async def test_update_booking_does_not_conflict_with_itself(client: AsyncClient, booking_payload):
    booking_id = (await client.post("/api/bookings", json=booking_payload)).json()["id"]

    response = await client.patch(
        f"/api/bookings/{booking_id}",
        json={"sessions": [_session("Hall A", "17:00", "23:00")]},
    )
    assert response.status_code == 200
    assert response.json()["sessions"][0]["start_time"] == "17:00"


@pytest.mark.asyncio
async def test_booking_occupancy_endpoint(client: AsyncClient, booking_payload):
    payload = _with_sessions(
        booking_payload,
        _session("Hall A", "12:00", "15:00", day="2026-12-12", name="Lunch"),
    )
    payload.update(event_end_date="2026-12-13")
    booking_id = (await client.post("/api/bookings", json=payload)).json()["id"]

    response = await client.get(f"/api/bookings/{booking_id}/occupancy")
    assert response.status_code == 200
    entries = response.json()
    assert [(e["date"], e["session_label"]) for e in entries] == [
        ("2026-12-12", "Day 1"),
        ("2026-12-13", "Day 2"),
    ]


@pytest.mark.asyncio
async def test_get_nonexistent_booking(client: AsyncClient):
    """Unknown booking id returns 404."""
    response = await client.get("/api/bookings/99999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_padded_venue_name_still_conflicts(client: AsyncClient, booking_payload):
    """Venue names are compared after trimming, the same way they are stored."""
    await client.post("/api/bookings", json=booking_payload)

    response = await client.post(
        "/api/bookings",
        json=_with_sessions(booking_payload, _session("Hall A ", "20:00", "23:00")),
    )
    assert response.status_code == 409
    assert response.json()["conflicts"] == [{"date": "2026-12-12", "venue": "Hall A"}]

    calendar = await client.get("/api/calendar/conflicts", params={"start": "2026-12-12", "end": "2026-12-12"})
    assert calendar.json()["days"] == []


@pytest.mark.asyncio
async def test_padded_hall_conflicts_with_hall(client: AsyncClient, booking_payload):
    sessionless = _with_sessions(booking_payload)
    sessionless.update(hall="Hall C", event_start_time="10:00", event_end_time="14:00")
    first = await client.post("/api/bookings", json=sessionless)
    assert first.status_code == 201
    assert first.json()["hall"] == "Hall C"

    padded = dict(sessionless, hall="  Hall C")
    response = await client.post("/api/bookings", json=padded)
    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["event_date", "status", "client_name", "confirmed_pax", "sessions"])
async def test_update_rejects_null_for_required_fields(client: AsyncClient, booking_payload, field):
    booking_id = (await client.post("/api/bookings", json=booking_payload)).json()["id"]

    response = await client.patch(f"/api/bookings/{booking_id}", json={field: None})
    assert response.status_code == 422

    unchanged = await client.get(f"/api/bookings/{booking_id}")
    assert unchanged.json()["event_date"] == "2026-12-12"
    assert unchanged.json()["status"] == "booked"


@pytest.mark.asyncio
async def test_update_allows_clearing_optional_fields(client: AsyncClient, booking_payload):
    payload = dict(booking_payload, notes="Stage on the east wall")
    booking_id = (await client.post("/api/bookings", json=payload)).json()["id"]

    response = await client.patch(f"/api/bookings/{booking_id}", json={"notes": None, "email": None})
    assert response.status_code == 200
    assert response.json()["notes"] is None
    assert response.json()["email"] is None


@pytest.mark.asyncio
async def test_reactivating_cancelled_booking_clears_cancellation(client: AsyncClient, booking_payload):
    booking_id = (await client.post("/api/bookings", json=booking_payload)).json()["id"]
    await client.post(f"/api/bookings/{booking_id}/cancel", json={"reason": "Client postponed"})

    response = await client.patch(f"/api/bookings/{booking_id}", json={"status": "booked"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "booked"
    assert data["cancelled_at"] is None
    assert data["cancellation_reason"] is None
