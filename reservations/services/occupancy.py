"""Seat occupancy ledger.

The only writer of reserved-seat rows. The storage-level uniqueness
constraint on active seats is authoritative; the lookups here are a fast
path for rejecting requests before any write.
"""

from typing import Iterable

from reservations.domain import Reservation, SeatPosition
from reservations.stores.interfaces import ReservationStore


class SeatOccupancyLedger:
    """Records which seats are held by active reservations."""

    def __init__(self, store: ReservationStore) -> None:
        self._store = store

    def is_occupied(self, screening_id: int, row_number: int, seat_number: int) -> bool:
        return self._store.seat_taken(screening_id, SeatPosition(row_number, seat_number))

    def first_occupied(
        self, screening_id: int, seats: Iterable[SeatPosition]
    ) -> SeatPosition | None:
        """Return the first seat, in request order, that is already taken."""
        for seat in seats:
            if self._store.seat_taken(screening_id, seat):
                return seat
        return None

    def record_seats(self, reservation: Reservation, seats: Iterable[SeatPosition]) -> None:
        """Hold ``seats`` for the reservation's screening.

        Raises:
            SeatNotAvailableError: If another active reservation holds one of them.
        """
        self._store.add_seats(reservation.id, reservation.screening_id, seats)

    def release_seats(self, reservation: Reservation) -> int:
        return self._store.deactivate_seats(reservation.id)

    def occupied_seats(self, screening_id: int) -> list[SeatPosition]:
        return self._store.occupied_seats(screening_id)
