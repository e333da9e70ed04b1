"""
Unit tests for reservation id extraction from booking authority responses.
"""

from __future__ import annotations

import pytest

from hotel_booking.normalizers.booking_authority import extract_reservation_id


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {"idReserva": 42},
        {"IdReserva": 42, "CostoTotalReserva": 150.5},
        {"id_reserva": "42"},
        {"reservationId": 42},
        {"id": 42},
        {"reserva": {"idReserva": 42}},
        {"data": {"reservation_id": 42}},
        {"Result": {"Id": " 42 "}},
    ],
)
def test_extract_reservation_id_from_known_shapes(payload) -> None:
    """Test that every supported key casing and envelope yields the id."""
    assert extract_reservation_id(payload) == 42


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"idReserva": 0},
        {"idReserva": -3},
        {"idReserva": "abc"},
        {"idReserva": True},
        {"mensaje": "ok"},
        {"data": [1, 2, 3]},
        [{"idReserva": 42}],
        "Reserva creada",
        None,
    ],
)
def test_extract_reservation_id_returns_none_when_unknown(payload) -> None:
    """Test that unusable payloads never produce a guessed id."""
    assert extract_reservation_id(payload) is None


@pytest.mark.unit
def test_top_level_id_wins_over_envelope() -> None:
    """Test that a top-level id is preferred to one nested in an envelope."""
    assert extract_reservation_id({"idReserva": 5, "data": {"id": 9}}) == 5
