"""
Prometheus metrics endpoint for monitoring and observability.

Example:
    GET /metrics

    Response:
        # HELP booking_confirmations_total Hold confirmations by outcome
        # TYPE booking_confirmations_total counter
        booking_confirmations_total{outcome="success"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text-based exposition format.

    Returns:
        Response: Metrics in Prometheus format with Content-Type: text/plain
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
