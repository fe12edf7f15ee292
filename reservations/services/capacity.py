"""Screening capacity tracker.

The only writer of ``Screening.available_seats``. Every adjustment locks the
screening row, so concurrent callers serialize their read-modify-write.
Callers that need their own writes to share the adjustment's fate must call
it inside their own ``atomic()`` block.
"""

import logging

from reservations.domain.errors import (
    CapacityOverflowError,
    InvalidScreeningDataError,
    ScreeningNotFoundError,
)
from reservations.stores.interfaces import ScreeningStore

logger = logging.getLogger(__name__)


class ScreeningCapacityTracker:
    """Keeps the per-screening available-seat counter consistent."""

    def __init__(self, store: ScreeningStore) -> None:
        self._store = store

    def has_available_seats(self, screening_id: int, requested: int) -> bool:
        """Return True iff the screening exists and has ``requested`` free seats."""
        screening = self._store.get_screening(screening_id)
        if screening is None:
            return False
        return screening.has_available_seats(requested)

    def reserve_seats(self, screening_id: int, delta: int) -> bool:
        """Take ``delta`` seats, or give them back when ``delta`` is negative.

        Returns False without writing when there are not enough free seats.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
            CapacityOverflowError: If a release would exceed the hall capacity.
        """
        with self._store.atomic():
            screening = self._store.lock_screening(screening_id)
            if screening is None:
                raise ScreeningNotFoundError(screening_id)

            remaining = screening.available_seats.value - delta
            if delta > 0 and remaining < 0:
                logger.info(
                    "Not enough seats for screening %s: requested %s, available %s",
                    screening_id,
                    delta,
                    screening.available_seats.value,
                )
                return False
            if remaining > screening.hall_capacity.value:
                raise CapacityOverflowError(screening_id)

            self._store.set_available_seats(screening_id, remaining)

        if delta >= 0:
            logger.info("Reserved %s seats for screening ID: %s", delta, screening_id)
        else:
            logger.info("Released %s seats for screening ID: %s", -delta, screening_id)
        return True

    def release_seats(self, screening_id: int, count: int) -> None:
        """Give back ``count`` seats."""
        self.reserve_seats(screening_id, -count)

    def rebase(self, screening_id: int, reserved: int) -> None:
        """Recompute free seats against the screening's current hall.

        Used after a screening moves to another hall; ``reserved`` seats stay held.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
            InvalidScreeningDataError: If the hall cannot hold the reserved seats.
        """
        with self._store.atomic():
            screening = self._store.lock_screening(screening_id)
            if screening is None:
                raise ScreeningNotFoundError(screening_id)
            remaining = screening.hall_capacity.value - reserved
            if remaining < 0:
                raise InvalidScreeningDataError(
                    "Hall is too small for the seats already reserved"
                )
            self._store.set_available_seats(screening_id, remaining)
