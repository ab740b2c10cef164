import pytest
from fastapi.testclient import TestClient

from ride_booking.api.v1.deps import get_system
from ride_booking.main import app

API = "/api/v1"


@pytest.fixture
def client(system):
    app.dependency_overrides[get_system] = lambda: system
    # Not used as a context manager, so the snapshot lifespan does not run
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_people(client):
    response = client.post(f"{API}/users/passengers", json={
        "user_id": "P1",
        "name": "Tanvir",
        "phone": "01303910166",
        "payment_method": {"kind": "card", "reference": "4111111111111111"},
    })
    assert response.status_code == 201
    response = client.post(f"{API}/users/drivers", json={
        "user_id": "D1",
        "name": "Abdur Rahim",
        "phone": "01735537376",
        "vehicle": {
            "vehicle_id": "V1",
            "kind": "car",
            "model": "Toyota Camry",
            "license_plate": "ABC123",
        },
    })
    assert response.status_code == 201


def verify(client, driver_id="D1"):
    for document in ("driving_license", "vehicle_registration"):
        client.post(f"{API}/users/{driver_id}/documents", json={"document": document})
    return client.post(f"{API}/users/{driver_id}/verify")


def book(client, distance=10):
    response = client.post(f"{API}/rides/", json={
        "passenger_id": "P1",
        "driver_id": "D1",
        "distance_km": distance,
        "scheduled_time": "2024-05-01T09:30:00",
    })
    return response


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_registration_masks_card(client):
    register_people(client)
    passenger = client.get(f"{API}/users/P1").json()
    assert passenger["role"] == "passenger"
    assert passenger["payment_reference"].endswith("1111")
    assert "4111" not in passenger["payment_reference"]

    driver = client.get(f"{API}/users/D1").json()
    assert driver["verified"] is False
    assert driver["commission_rate"] == 0.2
    assert driver["vehicle"]["available"] is True


def test_list_users_by_role(client):
    register_people(client)
    drivers = client.get(f"{API}/users/", params={"role": "driver"}).json()
    assert [d["user_id"] for d in drivers] == ["D1"]
    assert len(client.get(f"{API}/users/").json()) == 3


def test_unverified_driver_booking_is_a_conflict(client):
    register_people(client)
    response = book(client)
    assert response.status_code == 409
    assert response.json()["error"] == "driver_not_verified"


def test_full_ride_over_http(client):
    register_people(client)
    assert verify(client).json()["verified"] is True

    ride = book(client).json()
    assert ride["ride_id"] == "RIDE-1"
    assert ride["status"] == "pending"

    client.post(f"{API}/rides/RIDE-1/fare/propose", json={"amount": 150, "proposed_by": "P1"})
    client.post(f"{API}/rides/RIDE-1/fare/propose", json={"amount": 160, "proposed_by": "D1"})
    accepted = client.post(f"{API}/rides/RIDE-1/fare/accept").json()
    assert accepted["status"] == "pending"
    assert accepted["is_fare_negotiated"] is True
    assert accepted["negotiated_fare"] == 160.0

    assert client.post(f"{API}/rides/RIDE-1/start").json()["status"] == "ongoing"
    ended = client.post(f"{API}/rides/RIDE-1/end").json()
    assert ended["status"] == "completed"
    assert ended["fare"] == 160.0

    driver = client.get(f"{API}/users/D1").json()
    assert driver["earnings"] == pytest.approx(128.0)
    assert driver["ride_history"] == ["RIDE-1"]

    rides = client.get(f"{API}/users/P1/rides", params={"status": "completed"}).json()
    assert [r["ride_id"] for r in rides] == ["RIDE-1"]


def test_illegal_transition_is_reported(client):
    register_people(client)
    verify(client)
    book(client)
    response = client.post(f"{API}/rides/RIDE-1/end")
    assert response.status_code == 409
    assert response.json()["error"] == "invalid_state_transition"

    response = client.post(f"{API}/rides/RIDE-1/fare/accept")
    assert response.json()["error"] == "invalid_negotiation_state"


def test_cancel_with_reason(client):
    register_people(client)
    verify(client)
    book(client)
    cancelled = client.post(f"{API}/rides/RIDE-1/cancel", json={"reason": "plans changed"}).json()
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancellation_reason"] == "plans changed"


def test_missing_ride_is_404(client):
    response = client.get(f"{API}/rides/RIDE-9")
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_complaints_over_http(client):
    register_people(client)
    filed = client.post(f"{API}/complaints/", json={
        "reporter_id": "P1", "reported_id": "D1", "details": "Rude driver",
    }).json()
    assert filed["complaint_id"] == "CMP-1"

    resolved = client.post(f"{API}/complaints/CMP-1/resolve").json()
    assert resolved["resolved"] is True
    missing = client.post(f"{API}/complaints/CMP-7/resolve")
    assert missing.status_code == 200
    assert missing.json()["resolved"] is False

    against = client.get(f"{API}/users/D1/complaints").json()
    assert against[0]["resolved"] is True
    assert client.get(f"{API}/complaints/", params={"unresolved_only": True}).json() == []


def test_surge_and_quote(client):
    response = client.put(f"{API}/system/surge", json={"surge_multiplier": 2.0})
    assert response.json()["surge_multiplier"] == 2.0
    quote = client.get(f"{API}/rides/quote", params={"kind": "bike", "distance_km": 10}).json()
    assert quote["estimated_fare"] == 140.0

    assert client.put(f"{API}/system/surge", json={"surge_multiplier": 0.5}).status_code == 422


def test_status_reports_next_ids(client):
    status = client.get(f"{API}/system/status").json()
    assert status["next_ride_id"] == "RIDE-1"
    assert status["next_complaint_id"] == "CMP-1"
    assert status["users"] == 1


def test_taken_user_id_is_a_conflict(client):
    register_people(client)
    response = client.post(f"{API}/users/passengers", json={
        "user_id": "D1",
        "name": "Impostor",
        "phone": "0100",
    })
    assert response.status_code == 409
    assert response.json()["error"] == "duplicate_user"
    assert client.get(f"{API}/users/D1").json()["role"] == "driver"


def test_ride_listing_rejects_negative_paging(client):
    assert client.get(f"{API}/rides/", params={"offset": -1}).status_code == 422
    assert client.get(f"{API}/rides/", params={"limit": 0}).status_code == 422
