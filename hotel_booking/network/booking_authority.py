"""
Client for the booking authority, the external service of record that turns
a hold into a definitive reservation.
"""

import time
from typing import Any, Optional, Tuple
from urllib.parse import urljoin

import requests
import structlog

from hotel_booking.config import BOOKING_AUTHORITY_TIMEOUT, BOOKING_AUTHORITY_URL
from hotel_booking.domain.records import BookingRequest
from hotel_booking.errors import UpstreamError
from hotel_booking.metrics import authority_latency, authority_requests

logger = structlog.get_logger(__name__)

BOOK_ENDPOINT = "/api/v1/hoteles/book"
MAX_RETRIES = 2
RATE_LIMIT_DELAY = 1.0


def build_payload(request: BookingRequest) -> dict[str, Any]:
    """
    Serialize a booking request into the authority's JSON contract (camelCase, ISO dates).
    """
    return {
        "idHabitacion": request.room_id,
        "idHold": request.hold_id,
        "nombre": request.guest.first_name,
        "apellido": request.guest.last_name,
        "correo": request.guest.email,
        "tipoDocumento": request.guest.document_type,
        "documento": request.guest.document_number,
        "fechaInicio": request.start_date.isoformat(),
        "fechaFin": request.end_date.isoformat(),
        "numeroHuespedes": request.guest_count,
    }


def read_content(res: requests.Response) -> Any:
    """Decode a JSON body, falling back to the raw text."""
    try:
        return res.json()
    except ValueError:
        return res.text


def create_booking(
    request: BookingRequest,
    base_url: str = BOOKING_AUTHORITY_URL,
    timeout: Optional[float] = BOOKING_AUTHORITY_TIMEOUT,
) -> Tuple[int, Any]:
    """
    Ask the booking authority to create the definitive reservation for a hold.

    Only 429 responses are retried: the request was rejected before being
    processed. Timeouts are not retried because the booking may or may not
    have been created upstream.

    Args:
        request (BookingRequest): Hold, room, guest and date range.
        base_url (str): Booking authority root URL.
        timeout (Optional[float]): Seconds to wait for the authority.

    Returns:
        Tuple[int, Any]: HTTP status code and decoded body of the success response.

    Raises:
        UpstreamError: On connection failure or timeout (status 503) or any
            non-2xx answer (status and body preserved).
    """
    url = urljoin(base_url, BOOK_ENDPOINT)
    payload = build_payload(request)
    retries = 0

    while True:
        start_time = time.time()
        try:
            res = requests.post(url, json=payload, timeout=timeout)
        except requests.RequestException as err:
            authority_requests.labels(status_code="error").inc()
            logger.error(
                "booking_authority_unreachable",
                hold_id=request.hold_id,
                error=str(err),
            )
            raise UpstreamError(
                503,
                {"error": "Could not reach the booking service", "details": str(err)},
                message=f"Booking authority unreachable: {err}",
            ) from err
        finally:
            authority_latency.observe(time.time() - start_time)

        authority_requests.labels(status_code=str(res.status_code)).inc()

        if res.status_code == 429 and retries < MAX_RETRIES:
            retries += 1
            logger.warning(
                "booking_authority_rate_limited",
                hold_id=request.hold_id,
                retry=retries,
            )
            time.sleep(RATE_LIMIT_DELAY * retries)
            continue

        content = read_content(res)
        if not 200 <= res.status_code < 300:
            logger.warning(
                "booking_authority_error",
                hold_id=request.hold_id,
                status_code=res.status_code,
                content=content,
            )
            raise UpstreamError(res.status_code, content)

        logger.info(
            "booking_authority_response",
            hold_id=request.hold_id,
            status_code=res.status_code,
        )
        return res.status_code, content
