"""
Integration tests for reservation, room assignment, discount and calendar routes.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

RESERVATION = {
    "start_date": "2024-06-01",
    "end_date": "2024-06-03",
    "external_user_id": 5,
    "total_cost": "300.00",
}


def create_reservation(client: TestClient, **overrides) -> int:
    response = client.post("/reservations", json={**RESERVATION, **overrides})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.integration
def test_create_and_get_reservation(client: TestClient) -> None:
    """Test that a reservation is created active and can be read back."""
    reservation_id = create_reservation(client)

    response = client.get(f"/reservations/{reservation_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["overall_status"] == "ACTIVA"
    assert data["is_active"] is True
    assert Decimal(data["total_cost"]) == Decimal("300")
    assert [r["id"] for r in client.get("/reservations").json()] == [reservation_id]


@pytest.mark.integration
def test_create_reservation_with_inverted_dates_returns_400(client: TestClient) -> None:
    """Test that start after end is rejected."""
    response = client.post(
        "/reservations", json={**RESERVATION, "start_date": "2024-06-05", "end_date": "2024-06-01"}
    )

    assert response.status_code == 400


@pytest.mark.integration
def test_get_unknown_reservation_returns_404(client: TestClient) -> None:
    """Test that an unknown id is a 404."""
    assert client.get("/reservations/404").status_code == 404


@pytest.mark.integration
def test_update_reservation(client: TestClient) -> None:
    """Test status updates and the empty-update rejection."""
    reservation_id = create_reservation(client)

    response = client.patch(f"/reservations/{reservation_id}", json={"overall_status": "EXPIRADO"})
    assert response.status_code == 200
    assert response.json()["overall_status"] == "EXPIRADO"

    assert client.patch(f"/reservations/{reservation_id}", json={}).status_code == 400
    assert client.patch("/reservations/404", json={"is_active": False}).status_code == 404


@pytest.mark.integration
def test_delete_reservation_is_logical(client: TestClient) -> None:
    """Test that DELETE cancels the reservation but keeps it readable."""
    reservation_id = create_reservation(client)

    assert client.delete(f"/reservations/{reservation_id}").status_code == 200

    data = client.get(f"/reservations/{reservation_id}").json()
    assert data["overall_status"] == "CANCELADA"
    assert data["is_active"] is False


@pytest.mark.integration
def test_rooms_discounts_and_calendar(client: TestClient) -> None:
    """Test assigning a room, applying a discount and reading the room's calendar."""
    reservation_id = create_reservation(client)

    room = client.post(
        f"/reservations/{reservation_id}/rooms",
        json={"room_id": "R1", "capacity": 2, "computed_cost": "300.00"},
    )
    assert room.status_code == 201
    assignment_id = room.json()["id"]

    duplicate = client.post(f"/reservations/{reservation_id}/rooms", json={"room_id": "R1"})
    assert duplicate.status_code == 400
    assert client.post("/reservations/404/rooms", json={"room_id": "R1"}).status_code == 404

    assert client.get("/rooms/R1/occupied-dates").json() == [
        "2024-06-01",
        "2024-06-02",
        "2024-06-03",
    ]

    discount = client.post(
        f"/room-assignments/{assignment_id}/discounts", json={"discount_id": 3, "amount": "15.00"}
    )
    assert discount.status_code == 201
    assert [d["discount_id"] for d in client.get(f"/room-assignments/{assignment_id}/discounts").json()] == [3]
    assert client.delete(f"/room-assignments/{assignment_id}/discounts/3").status_code == 200
    assert client.delete(f"/room-assignments/{assignment_id}/discounts/3").status_code == 404

    assert client.delete(f"/room-assignments/{assignment_id}").status_code == 200
    assert client.get(f"/reservations/{reservation_id}/rooms").json() == []
    assert client.get("/rooms/R1/occupied-dates").json() == []


@pytest.mark.integration
def test_cancelled_reservation_frees_calendar(client: TestClient) -> None:
    """Test the mixed-case "Cancelada" scenario through the HTTP surface."""
    reservation_id = create_reservation(client, overall_status="Cancelada")
    client.post(f"/reservations/{reservation_id}/rooms", json={"room_id": "R1"})

    assert client.get("/rooms/R1/occupied-dates").json() == []
