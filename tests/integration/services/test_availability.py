"""
Integration tests for the availability aggregator.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import pytest

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import ReservationDraft
from hotel_booking.services.availability import AvailabilityAggregator


def book_room(
    gateway: SqlGateway,
    room_id: str,
    start: date,
    end: date,
    status: str = "ACTIVA",
) -> int:
    reservation = gateway.create_reservation(
        ReservationDraft(start_date=start, end_date=end, overall_status=status)
    )
    gateway.create_room_assignment({"room_id": room_id, "reservation_id": reservation.id})
    return reservation.id


@pytest.fixture
def aggregator(gateway: SqlGateway) -> AvailabilityAggregator:
    return AvailabilityAggregator(gateway)


@pytest.mark.integration
def test_single_active_reservation(gateway: SqlGateway, aggregator: AvailabilityAggregator) -> None:
    """Test room R1 with one active reservation 2024-06-01..2024-06-03."""
    book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 3))

    assert aggregator.occupied_dates("R1") == [
        date(2024, 6, 1),
        date(2024, 6, 2),
        date(2024, 6, 3),
    ]


@pytest.mark.integration
@pytest.mark.parametrize("status", ["Cancelada", "CANCELADA", "  cancelada ", "EXPIRADO", "expirado"])
def test_cancelled_or_expired_reservation_frees_room(
    gateway: SqlGateway, aggregator: AvailabilityAggregator, status: str
) -> None:
    """Test that cancelled and expired reservations never block the calendar."""
    book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 3), status=status)

    assert aggregator.occupied_dates("R1") == []


@pytest.mark.integration
def test_unknown_status_still_blocks(gateway: SqlGateway, aggregator: AvailabilityAggregator) -> None:
    """Test that a status that is neither cancelled nor expired occupies the room."""
    book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 1), status="PENDIENTE")

    assert aggregator.occupied_dates("R1") == [date(2024, 6, 1)]


@pytest.mark.integration
def test_overlapping_reservations_are_deduplicated_and_sorted(
    gateway: SqlGateway, aggregator: AvailabilityAggregator
) -> None:
    """Test that overlapping ranges produce each day once, ascending."""
    book_room(gateway, "R1", date(2024, 6, 10), date(2024, 6, 12))
    book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 2))
    book_room(gateway, "R1", date(2024, 6, 11), date(2024, 6, 13))

    first = aggregator.occupied_dates("R1")
    second = aggregator.occupied_dates("R1")

    assert first == second
    assert first == sorted(set(first))
    assert first == [
        date(2024, 6, 1),
        date(2024, 6, 2),
        date(2024, 6, 10),
        date(2024, 6, 11),
        date(2024, 6, 12),
        date(2024, 6, 13),
    ]


@pytest.mark.integration
def test_other_rooms_are_ignored(gateway: SqlGateway, aggregator: AvailabilityAggregator) -> None:
    """Test that only reservations assigned to the requested room count."""
    book_room(gateway, "R2", date(2024, 6, 1), date(2024, 6, 3))
    reservation_id = book_room(gateway, "R3", date(2024, 7, 1), date(2024, 7, 1))
    gateway.create_room_assignment({"room_id": "R1", "reservation_id": reservation_id})

    assert aggregator.occupied_dates("R1") == [date(2024, 7, 1)]
    assert aggregator.occupied_dates("R9") == []


@pytest.mark.integration
def test_reservation_without_dates_is_skipped(
    gateway: SqlGateway, aggregator: AvailabilityAggregator, db_engine
) -> None:
    """Test that a legacy row with a missing date does not break the calendar."""
    reservation_id = book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 1))
    with db_engine.begin() as conn:
        conn.exec_driver_sql(f"UPDATE reservations SET end_date = NULL WHERE id = {reservation_id}")

    assert aggregator.occupied_dates("R1") == []


@pytest.mark.integration
def test_sequential_mode_matches_parallel(gateway: SqlGateway) -> None:
    """Test that the parallel and sequential read paths agree."""
    book_room(gateway, "R1", date(2024, 6, 1), date(2024, 6, 3))

    parallel = AvailabilityAggregator(gateway, parallel=True).occupied_dates("R1")
    sequential = AvailabilityAggregator(gateway, parallel=False).occupied_dates("R1")

    assert parallel == sequential


@pytest.mark.integration
def test_both_collections_read_once_per_call(
    gateway: SqlGateway, aggregator: AvailabilityAggregator
) -> None:
    """Test that each call takes one full snapshot of each collection."""
    reservations = patch.object(gateway, "list_reservations", wraps=gateway.list_reservations)
    assignments = patch.object(
        gateway, "list_room_assignments", wraps=gateway.list_room_assignments
    )
    with reservations as reservation_reads, assignments as assignment_reads:
        aggregator.occupied_dates("R1")

    assert reservation_reads.call_count == 1
    assert assignment_reads.call_count == 1
