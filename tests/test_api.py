"""HTTP API tests against stores in a temp dir."""
import pytest

from slotbook.core.storage import write_json

RANGE = {"start": "2099-01-05T00:00:00", "end": "2099-01-06T00:00:00"}


@pytest.fixture
def payload():
    return {
        "name": "Lin",
        "email": "lin@example.com",
        "startTime": "2099-01-05T08:00:00.000Z",
        "endTime": "2099-01-05T08:30:00.000Z",
        "meetingType": "intro",
        "notes": "hi",
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_public_config(client):
    response = client.get("/api/config")

    assert response.status_code == 200
    data = response.json()
    assert data == {
        "ownerName": "Ada Owner",
        "meetingTypes": [
            {"id": "intro", "name": "Intro Call", "duration": 30, "description": "Quick intro call"},
            {"id": "deep-dive", "name": "Deep Dive", "duration": 60, "description": "In-depth session"},
        ],
        "timezone": "Europe/Madrid",
        "brandColor": "#4F46E5",
    }


def test_config_is_reread_every_request(client, config_store):
    write_json(config_store.path, {"ownerName": "Changed"})

    assert client.get("/api/config").json()["ownerName"] == "Changed"


def test_slots_for_a_monday(client):
    response = client.get("/api/slots", params=RANGE)

    assert response.status_code == 200
    data = response.json()
    assert data["timezone"] == "Europe/Madrid"
    assert data["slots"][:2] == [
        {"start": "2099-01-05T08:00:00Z", "end": "2099-01-05T08:30:00Z"},
        {"start": "2099-01-05T08:45:00Z", "end": "2099-01-05T09:15:00Z"},
    ]
    assert len(data["slots"]) == 11


def test_slots_duration_param(client):
    data = client.get("/api/slots", params={**RANGE, "duration": "60"}).json()

    assert data["slots"][0] == {"start": "2099-01-05T08:00:00Z", "end": "2099-01-05T09:00:00Z"}
    assert data["slots"][1]["start"] == "2099-01-05T09:15:00Z"


@pytest.mark.parametrize("duration", ["abc", "0", "-5", ""])
def test_bad_duration_falls_back_to_configured(client, duration):
    data = client.get("/api/slots", params={**RANGE, "duration": duration}).json()

    assert data["slots"][0]["end"] == "2099-01-05T08:30:00Z"


@pytest.mark.parametrize("duration, end", [("30abc", "08:30"), ("45min", "08:45"), (" 60", "09:00")])
def test_duration_uses_leading_integer(client, duration, end):
    data = client.get("/api/slots", params={**RANGE, "duration": duration}).json()

    assert data["slots"][0]["end"] == f"2099-01-05T{end}:00Z"


def test_slots_default_range_is_in_the_future(client):
    response = client.get("/api/slots")

    assert response.status_code == 200
    # Default window always covers at least one weekday
    assert response.json()["slots"]


def test_slots_bad_start(client):
    response = client.get("/api/slots", params={"start": "soon"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid start date"}


def test_book_list_cancel_round_trip(client, payload, sent_emails):
    response = client.post("/api/book", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    booking = body["booking"]
    assert booking["id"]
    assert booking["createdAt"]
    assert booking["name"] == "Lin"
    assert booking["meetingType"] == "intro"
    assert booking["notes"] == "hi"

    assert client.get("/api/bookings").json() == [booking]
    assert [b.id for _, b in sent_emails] == [booking["id"]]

    response = client.delete(f"/api/bookings/{booking['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "cancelled": booking}
    assert client.get("/api/bookings").json() == []


def test_booked_slot_disappears_from_listing(client, payload, sent_emails):
    client.post("/api/book", json=payload)

    starts = [s["start"] for s in client.get("/api/slots", params=RANGE).json()["slots"]]

    assert "2099-01-05T08:00:00Z" not in starts
    assert starts[0] == "2099-01-05T08:45:00Z"


@pytest.mark.parametrize("field", ["name", "email", "startTime", "endTime"])
def test_book_missing_required_field(client, payload, field, sent_emails):
    del payload[field]

    response = client.post("/api/book", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert client.get("/api/bookings").json() == []
    assert sent_emails == []


def test_book_blank_field_counts_as_missing(client, payload, sent_emails):
    payload["email"] = "  "

    response = client.post("/api/book", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


def test_book_optional_fields_can_be_omitted(client, payload, sent_emails):
    del payload["meetingType"]
    del payload["notes"]

    booking = client.post("/api/book", json=payload).json()["booking"]

    assert booking["meetingType"] is None
    assert booking["notes"] is None


def test_book_end_before_start(client, payload, sent_emails):
    payload["endTime"] = "2099-01-05T07:00:00Z"

    response = client.post("/api/book", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "startTime must be before endTime"}


def test_book_overlap_conflict(client, payload, sent_emails):
    assert client.post("/api/book", json=payload).status_code == 200

    payload["startTime"] = "2099-01-05T08:15:00Z"
    payload["endTime"] = "2099-01-05T08:45:00Z"
    response = client.post("/api/book", json=payload)

    assert response.status_code == 409
    assert response.json() == {"error": "Slot already booked"}
    assert len(client.get("/api/bookings").json()) == 1


def test_book_non_json_body(client):
    response = client.post("/api/book", content=b"nope", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_book_without_body(client, sent_emails):
    response = client.post("/api/book")

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert sent_emails == []


def test_book_with_unreadable_bookings_file(client, booking_store, payload, sent_emails):
    booking_store.path.write_text("{{{", encoding="utf-8")

    response = client.post("/api/book", json=payload)

    assert response.status_code == 503
    assert response.json() == {"error": "Bookings storage unavailable"}
    assert booking_store.path.read_text(encoding="utf-8") == "{{{"
    assert sent_emails == []


def test_cancel_unknown_id(client):
    response = client.delete("/api/bookings/unknown-id")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}
