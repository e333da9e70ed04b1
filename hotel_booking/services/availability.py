"""Availability Aggregator: occupied calendar dates per room."""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import structlog

from hotel_booking.db.gateway import SqlGateway
from hotel_booking.domain.records import RoomAssignment
from hotel_booking.metrics import availability_duration
from hotel_booking.utils.datetime import days_between

logger = structlog.get_logger(__name__)


class AvailabilityAggregator:
    """
    Derives occupied dates from a full read of reservations and room assignments.

    No index is maintained: both collections are read on every call, in
    parallel, and joined once both reads have completed. The two reads are not
    taken at the same instant, so a reservation written in between may be
    missing from one call's answer.
    """

    def __init__(self, gateway: SqlGateway, parallel: bool = True) -> None:
        self.gateway = gateway
        self.parallel = parallel

    def occupied_dates(self, room_id: str) -> list[date]:
        """
        Return every day on which room_id is taken by a live reservation.

        A reservation counts when it has an assignment for the room and its
        overall status is neither cancelled nor expired (matched leniently, see
        ReservationStatus.from_text). Ranges are inclusive of both ends.

        Args:
            room_id: Room to compute the calendar for

        Returns:
            list[date]: Ascending, duplicate-free dates
        """
        with availability_duration.time():
            if self.parallel:
                with ThreadPoolExecutor(max_workers=2) as pool:
                    reservations_future = pool.submit(self.gateway.list_reservations)
                    assignments_future = pool.submit(self.gateway.list_room_assignments)
                    reservations = reservations_future.result()
                    assignments = assignments_future.result()
            else:
                reservations = self.gateway.list_reservations()
                assignments = self.gateway.list_room_assignments()

            by_reservation: dict[int, list[RoomAssignment]] = defaultdict(list)
            for assignment in assignments:
                by_reservation[assignment.reservation_id].append(assignment)

            occupied: set[date] = set()
            for reservation in reservations:
                if not any(a.room_id == room_id for a in by_reservation.get(reservation.id, [])):
                    continue
                if not reservation.status.occupies_room:
                    continue
                if reservation.start_date is None or reservation.end_date is None:
                    continue
                occupied.update(days_between(reservation.start_date, reservation.end_date))

            result = sorted(occupied)

        logger.info(
            "occupied_dates_computed",
            room_id=room_id,
            reservations=len(reservations),
            assignments=len(assignments),
            dates=len(result),
        )
        return result
