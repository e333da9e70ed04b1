"""
Prometheus metrics for the hold/reservation lifecycle and its upstream calls.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from hotel_booking.metrics import confirmations_total
    >>> confirmations_total.labels(outcome="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Hold Metrics
# =============================================================================

holds_created = Counter(
    "booking_holds_created_total",
    "Total number of room holds created",
)

holds_released = Counter(
    "booking_holds_released_total",
    "Total number of room holds released explicitly",
)

holds_purged = Counter(
    "booking_holds_purged_total",
    "Total number of expired room holds removed by the sweep",
)

# =============================================================================
# Lifecycle Metrics
# =============================================================================

confirmations_total = Counter(
    "booking_confirmations_total",
    "Hold confirmations by outcome",
    ["outcome"],
)
"""
Labels:
    outcome: success, hold_invalid, upstream_error, upstream_unparseable
"""

payments_total = Counter(
    "booking_payments_total",
    "Payment inserts performed after a confirmation, by outcome",
    ["outcome"],
)
"""
Labels:
    outcome: inserted, duplicate, failed
"""

cancellations_total = Counter(
    "booking_cancellations_total",
    "Reservation cancellations with refund, by outcome",
    ["outcome"],
)
"""
Labels:
    outcome: success, rejected, storage_error
"""

# =============================================================================
# Booking Authority Metrics
# =============================================================================

authority_requests = Counter(
    "booking_authority_requests_total",
    "Total requests sent to the booking authority",
    ["status_code"],
)

authority_latency = Histogram(
    "booking_authority_latency_seconds",
    "Booking authority request latency in seconds",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

# =============================================================================
# Availability Metrics
# =============================================================================

availability_duration = Histogram(
    "booking_availability_duration_seconds",
    "Time spent computing occupied dates for a room",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
