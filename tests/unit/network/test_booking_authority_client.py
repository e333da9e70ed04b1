"""
Unit tests for the booking authority HTTP client.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from hotel_booking.domain.records import BookingRequest, GuestDetails
from hotel_booking.errors import UpstreamError
from hotel_booking.network.booking_authority import BOOK_ENDPOINT, build_payload, create_booking

BASE_URL = "http://authority.test"


def make_request() -> BookingRequest:
    return BookingRequest(
        room_id="R1",
        hold_id="hold-abc",
        guest=GuestDetails(
            first_name="Ana",
            last_name="Pérez",
            email="ana@example.com",
            document_type="CEDULA",
            document_number="1712345678",
        ),
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 3),
        guest_count=2,
    )


def make_response(status_code: int, body=None, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status_code
    if body is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = body
    response.text = text
    return response


@pytest.mark.unit
def test_build_payload_uses_authority_contract() -> None:
    """Test that the request body carries every field the authority expects."""
    payload = build_payload(make_request())

    assert payload == {
        "idHabitacion": "R1",
        "idHold": "hold-abc",
        "nombre": "Ana",
        "apellido": "Pérez",
        "correo": "ana@example.com",
        "tipoDocumento": "CEDULA",
        "documento": "1712345678",
        "fechaInicio": "2024-06-01",
        "fechaFin": "2024-06-03",
        "numeroHuespedes": 2,
    }


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_success(mock_post: Mock) -> None:
    """Test that a 2xx answer returns the status code and decoded body."""
    mock_post.return_value = make_response(201, {"idReserva": 42})

    status_code, content = create_booking(make_request(), base_url=BASE_URL, timeout=5)

    assert status_code == 201
    assert content == {"idReserva": 42}
    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == BASE_URL + BOOK_ENDPOINT
    assert kwargs["timeout"] == 5
    assert kwargs["json"]["idHold"] == "hold-abc"


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_non_success_preserves_status_and_body(mock_post: Mock) -> None:
    """Test that a rejection is raised with the authority's own status and content."""
    mock_post.return_value = make_response(409, {"mensaje": "Habitación no disponible"})

    with pytest.raises(UpstreamError) as exc_info:
        create_booking(make_request(), base_url=BASE_URL)

    assert exc_info.value.status_code == 409
    assert exc_info.value.content == {"mensaje": "Habitación no disponible"}


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_non_json_error_body_kept_as_text(mock_post: Mock) -> None:
    """Test that a non-JSON error body is surfaced as raw text."""
    mock_post.return_value = make_response(500, text="Internal Server Error")

    with pytest.raises(UpstreamError) as exc_info:
        create_booking(make_request(), base_url=BASE_URL)

    assert exc_info.value.status_code == 500
    assert exc_info.value.content == "Internal Server Error"


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_timeout_is_503_and_not_retried(mock_post: Mock) -> None:
    """Test that a timeout becomes a 503 UpstreamError after a single attempt."""
    mock_post.side_effect = requests.Timeout("read timed out")

    with pytest.raises(UpstreamError) as exc_info:
        create_booking(make_request(), base_url=BASE_URL)

    assert exc_info.value.status_code == 503
    assert exc_info.value.content["error"] == "Could not reach the booking service"
    assert mock_post.call_count == 1


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_connection_error_is_503(mock_post: Mock) -> None:
    """Test that an unreachable authority becomes a 503 UpstreamError."""
    mock_post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(UpstreamError) as exc_info:
        create_booking(make_request(), base_url=BASE_URL)

    assert exc_info.value.status_code == 503


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.time.sleep")
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_retries_rate_limit(mock_post: Mock, mock_sleep: Mock) -> None:
    """Test that a 429 is retried and the eventual success is returned."""
    mock_post.side_effect = [
        make_response(429, {"mensaje": "slow down"}),
        make_response(200, {"idReserva": 7}),
    ]

    status_code, content = create_booking(make_request(), base_url=BASE_URL)

    assert status_code == 200
    assert content == {"idReserva": 7}
    assert mock_post.call_count == 2
    mock_sleep.assert_called_once()


@pytest.mark.unit
@patch("hotel_booking.network.booking_authority.time.sleep")
@patch("hotel_booking.network.booking_authority.requests.post")
def test_create_booking_gives_up_after_max_rate_limit_retries(
    mock_post: Mock, mock_sleep: Mock
) -> None:
    """Test that repeated 429s end in an UpstreamError carrying the 429."""
    mock_post.return_value = make_response(429, {"mensaje": "slow down"})

    with pytest.raises(UpstreamError) as exc_info:
        create_booking(make_request(), base_url=BASE_URL)

    assert exc_info.value.status_code == 429
    assert mock_post.call_count == 3
