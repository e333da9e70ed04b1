"""
Unit tests for the cancellation orchestrator (gateway mocked).
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import Mock

import pytest

from hotel_booking.domain.records import CancellationOutcome
from hotel_booking.errors import StorageFault
from hotel_booking.services.cancellation import CancellationOrchestrator
from hotel_booking.services.events import RESERVATION_CANCELLED, RecordingEventSink


@pytest.fixture
def gateway() -> Mock:
    return Mock()


@pytest.fixture
def sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def orchestrator(gateway: Mock, sink: RecordingEventSink) -> CancellationOrchestrator:
    return CancellationOrchestrator(gateway, events=sink)


@pytest.mark.unit
@pytest.mark.parametrize("reservation_id", [None, 0])
def test_cancel_without_id(
    orchestrator: CancellationOrchestrator, gateway: Mock, reservation_id
) -> None:
    """Test that a missing reservation id is a structured failure."""
    result = orchestrator.cancel(reservation_id)

    assert not result.success
    assert result.refund_amount == Decimal("0")
    assert result.message == "reservation id is required"
    gateway.cancel_reservation_with_refund.assert_not_called()


@pytest.mark.unit
def test_cancel_success_reports_refund(
    orchestrator: CancellationOrchestrator, gateway: Mock, sink: RecordingEventSink
) -> None:
    """Test that a processed cancellation returns the refund and publishes an event."""
    gateway.cancel_reservation_with_refund.return_value = CancellationOutcome(
        ok=True, refund_amount=Decimal("300.00"), message="Reservation cancelled successfully"
    )

    result = orchestrator.cancel(7)

    assert result.success
    assert result.refund_amount == Decimal("300.00")
    assert sink.events == [
        (RESERVATION_CANCELLED, {"reservation_id": 7, "refund_amount": "300.00"})
    ]


@pytest.mark.unit
def test_cancel_not_processed_is_not_an_error(
    orchestrator: CancellationOrchestrator, gateway: Mock, sink: RecordingEventSink
) -> None:
    """Test that an unknown reservation yields success=False with the gateway's reason."""
    gateway.cancel_reservation_with_refund.return_value = CancellationOutcome(
        ok=False, message="Reservation 42 not found"
    )

    result = orchestrator.cancel(42)

    assert not result.success
    assert result.refund_amount == Decimal("0")
    assert result.message == "Reservation 42 not found"
    assert sink.events == []


@pytest.mark.unit
def test_cancel_storage_fault_reported(
    orchestrator: CancellationOrchestrator, gateway: Mock
) -> None:
    """Test that a database failure is reported as a structured failure."""
    gateway.cancel_reservation_with_refund.side_effect = StorageFault("deadlock detected")

    result = orchestrator.cancel(7)

    assert not result.success
    assert result.message.startswith("Database error")


@pytest.mark.unit
def test_cancel_unexpected_error_propagates(
    orchestrator: CancellationOrchestrator, gateway: Mock
) -> None:
    """Test that anything other than a storage fault is not swallowed."""
    gateway.cancel_reservation_with_refund.side_effect = RuntimeError("bug")

    with pytest.raises(RuntimeError):
        orchestrator.cancel(7)
