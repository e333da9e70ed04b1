"""
Integration tests for the reservation state machine.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hotel_booking.domain.records import ReservationDraft
from hotel_booking.domain.status import ReservationStatus
from hotel_booking.errors import NotFound, ValidationError
from hotel_booking.services.events import RESERVATION_CREATED
from hotel_booking.services.reservations import ReservationStateMachine


@pytest.fixture
def machine(gateway, events) -> ReservationStateMachine:
    return ReservationStateMachine(gateway, events=events)


def draft(start=date(2024, 6, 1), end=date(2024, 6, 3)) -> ReservationDraft:
    return ReservationDraft(start_date=start, end_date=end, total_cost=Decimal("200.00"))


@pytest.mark.integration
def test_create_defaults_to_active(machine: ReservationStateMachine, events) -> None:
    """Test Draft -> Active: id assigned, status ACTIVA, active flag set."""
    reservation = machine.create(draft())

    assert reservation.id > 0
    assert reservation.status is ReservationStatus.ACTIVE
    assert reservation.is_active
    assert events.types() == [RESERVATION_CREATED]


@pytest.mark.integration
def test_create_allows_single_night(machine: ReservationStateMachine) -> None:
    """Test that start == end is a valid range."""
    reservation = machine.create(draft(date(2024, 6, 1), date(2024, 6, 1)))

    assert reservation.start_date == reservation.end_date


@pytest.mark.integration
def test_create_rejects_inverted_range(machine: ReservationStateMachine) -> None:
    """Test that start after end is a validation error and nothing is stored."""
    with pytest.raises(ValidationError):
        machine.create(draft(date(2024, 6, 5), date(2024, 6, 1)))

    assert machine.list_all() == []


@pytest.mark.integration
def test_create_requires_dates(machine: ReservationStateMachine) -> None:
    """Test that both dates are required."""
    with pytest.raises(ValidationError):
        machine.create(ReservationDraft(start_date=None, end_date=date(2024, 6, 1)))


@pytest.mark.integration
def test_update_status_fields(machine: ReservationStateMachine) -> None:
    """Test Active -> Active through an administrative update."""
    reservation = machine.create(draft())

    updated = machine.update(reservation.id, is_active=False)

    assert not updated.is_active
    assert updated.overall_status == "ACTIVA"


@pytest.mark.integration
def test_update_to_expired_then_frozen(machine: ReservationStateMachine) -> None:
    """Test that once expired a reservation cannot change any more."""
    reservation = machine.create(draft())
    machine.update(reservation.id, overall_status="EXPIRADO")

    with pytest.raises(ValidationError):
        machine.update(reservation.id, overall_status="ACTIVA")


@pytest.mark.integration
def test_update_errors(machine: ReservationStateMachine) -> None:
    """Test NotFound on unknown ids and ValidationError on empty updates."""
    reservation = machine.create(draft())

    with pytest.raises(NotFound):
        machine.update(999, overall_status="ACTIVA")
    with pytest.raises(ValidationError):
        machine.update(reservation.id)


@pytest.mark.integration
def test_cancel_is_logical_and_idempotent(machine: ReservationStateMachine) -> None:
    """Test Active -> Cancelled keeps the row, and cancelling again changes nothing."""
    reservation = machine.create(draft())
    machine.add_room(reservation.id, "R1")

    cancelled = machine.cancel(reservation.id)
    again = machine.cancel(reservation.id)

    assert cancelled.status is ReservationStatus.CANCELLED
    assert not cancelled.is_active
    assert again.updated_at == cancelled.updated_at
    assert [r.id for r in machine.list_all()] == [reservation.id]
    assert all(not a.is_active for a in machine.rooms(reservation.id))


@pytest.mark.integration
def test_cancel_unknown(machine: ReservationStateMachine) -> None:
    """Test that cancelling an unknown reservation raises NotFound."""
    with pytest.raises(NotFound):
        machine.cancel(404)


@pytest.mark.integration
def test_room_and_discount_management(machine: ReservationStateMachine) -> None:
    """Test assigning rooms and applying/removing discounts."""
    reservation = machine.create(draft())
    assignment = machine.add_room(
        reservation.id, "R1", capacity=2, computed_cost=Decimal("200.00"), tax=Decimal("24.00")
    )

    with pytest.raises(ValidationError):
        machine.add_room(reservation.id, "R1")
    with pytest.raises(NotFound):
        machine.add_room(404, "R1")

    applied = machine.add_discount(assignment.id, 3, Decimal("15.00"))
    assert applied.amount == Decimal("15.00")
    assert [d.discount_id for d in machine.discounts(assignment.id)] == [3]

    assert machine.remove_discount(assignment.id, 3)
    assert not machine.remove_discount(assignment.id, 3)
    assert machine.remove_room(assignment.id)
    assert machine.rooms(reservation.id) == []

    with pytest.raises(NotFound):
        machine.add_discount(assignment.id, 4)
