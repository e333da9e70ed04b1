"""
Integration tests for hold routes.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_create_hold_returns_201(client: TestClient) -> None:
    """Test that creating a hold returns it with its computed expiry flag."""
    response = client.post("/holds", json={"room_id": "R1", "duration_seconds": 900})

    assert response.status_code == 201
    data = response.json()
    assert data["room_id"] == "R1"
    assert data["status"] == "active"
    assert data["expired"] is False
    assert data["hold_id"]


@pytest.mark.integration
def test_create_hold_uses_default_duration(client: TestClient) -> None:
    """Test that the configured default hold duration applies when omitted."""
    response = client.post("/holds", json={"room_id": "R1"})

    assert response.status_code == 201
    assert response.json()["duration_seconds"] == 900


@pytest.mark.integration
def test_create_hold_invalid_duration_returns_400(client: TestClient) -> None:
    """Test that a non-positive duration is rejected."""
    response = client.post("/holds", json={"room_id": "R1", "duration_seconds": 0})

    assert response.status_code == 400
    assert "duration_seconds" in response.json()["detail"]


@pytest.mark.integration
def test_get_list_and_release_hold(client: TestClient) -> None:
    """Test the read and release paths of a hold."""
    client.post("/holds", json={"room_id": "R1", "hold_id": "h-1"})
    client.post("/holds", json={"room_id": "R2", "hold_id": "h-2"})

    assert client.get("/holds/h-1").json()["room_id"] == "R1"
    assert {h["hold_id"] for h in client.get("/holds").json()} == {"h-1", "h-2"}
    assert [h["hold_id"] for h in client.get("/holds", params={"room_id": "R2"}).json()] == ["h-2"]

    first = client.delete("/holds/h-1")
    second = client.delete("/holds/h-1")

    assert first.status_code == 200 and first.json()["released"] is True
    assert second.status_code == 200 and second.json()["released"] is False
    assert client.get("/holds/h-1").status_code == 404


@pytest.mark.integration
def test_update_hold_status(client: TestClient) -> None:
    """Test that a hold's status can be patched and unknown statuses are rejected."""
    client.post("/holds", json={"room_id": "R1", "hold_id": "h-1"})

    assert client.patch("/holds/h-1", json={"status": "confirmed"}).json()["status"] == "confirmed"
    assert client.patch("/holds/h-1", json={"status": "bogus"}).status_code == 400
    assert client.patch("/holds/missing", json={"status": "active"}).status_code == 404
