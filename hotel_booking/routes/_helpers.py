"""
Internal helper functions for route handlers.

Turns lifecycle results into HTTP errors and records into response schemas.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from hotel_booking.domain.records import Hold, OperationResult
from hotel_booking.schemas.holds import HoldOut
from hotel_booking.services.lifecycle import BookingLifecycle


def unwrap_or_raise(result: OperationResult) -> Any:
    """
    Return the result's data, or raise the matching HTTPException.

    Args:
        result: Outcome of a lifecycle operation

    Returns:
        Any: result.data when the operation succeeded

    Raises:
        HTTPException: 404 if something was not found, 400 for invalid input
    """
    if result.success:
        return result.data
    if result.not_found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)


def hold_out(lifecycle: BookingLifecycle, hold: Hold) -> HoldOut:
    return HoldOut(**asdict(hold), expired=lifecycle.hold_is_expired(hold))


def mirror_upstream(status_code: int, content: Any) -> Response:
    """Answer with the booking authority's own status code and body."""
    if isinstance(content, (dict, list)):
        return JSONResponse(status_code=status_code, content=content)
    return PlainTextResponse(status_code=status_code, content="" if content is None else str(content))
