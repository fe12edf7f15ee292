"""Screening scheduler - validates time windows and hall conflicts.

Conflict detection treats boundaries as inclusive: a screening that ends
exactly when another starts in the same hall is a conflict.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from django.utils import timezone

from reservations.domain import Screening, ScreeningChanges, ScreeningDraft
from reservations.domain.errors import (
    InvalidScreeningDataError,
    ScreeningConflictError,
    ScreeningNotFoundError,
)
from reservations.services.capacity import ScreeningCapacityTracker
from reservations.stores.interfaces import ScreeningStore

logger = logging.getLogger(__name__)


class ScreeningScheduler:
    """Service for creating, moving and removing screenings."""

    def __init__(
        self,
        store: ScreeningStore,
        capacity: ScreeningCapacityTracker | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._capacity = capacity or ScreeningCapacityTracker(store)
        self._clock = clock

    def validate(self, draft: ScreeningDraft | ScreeningChanges) -> None:
        """Check the time window and price.

        Raises:
            InvalidScreeningDataError: On a missing or inverted window, a start
                in the past, or a missing or non-positive price.
        """
        self._validate_window(draft.start_time, draft.end_time, draft.price)
        if draft.start_time < self._clock():
            raise InvalidScreeningDataError("Cannot create screening in the past")

    def _validate_window(
        self,
        start_time: datetime | None,
        end_time: datetime | None,
        price: Decimal | None,
    ) -> None:
        if start_time is None:
            raise InvalidScreeningDataError("Start time cannot be null")
        if end_time is None:
            raise InvalidScreeningDataError("End time cannot be null")
        if start_time > end_time:
            raise InvalidScreeningDataError("Start time cannot be after end time")
        if price is None or price <= 0:
            raise InvalidScreeningDataError("Price must be positive")

    def check_conflicts(
        self,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_screening_id: int | None = None,
    ) -> list[Screening]:
        """Return screenings in the hall whose window overlaps ``[start_time, end_time]``."""
        return self._store.find_conflicting(
            hall_id, start_time, end_time, exclude_screening_id
        )

    def _ensure_no_conflicts(
        self,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_screening_id: int | None = None,
    ) -> None:
        conflicts = self.check_conflicts(
            hall_id, start_time, end_time, exclude_screening_id
        )
        if conflicts:
            raise ScreeningConflictError(tuple(s.id for s in conflicts))

    def create_screening(self, draft: ScreeningDraft) -> Screening:
        """Schedule a screening with every hall seat available.

        Raises:
            InvalidScreeningDataError: If the movie or hall is unknown or the
                draft fails validation.
            ScreeningConflictError: If the hall is busy during the window.
        """
        with self._store.atomic():
            if draft.movie_id is None or not self._store.movie_exists(draft.movie_id):
                raise InvalidScreeningDataError(
                    f"Movie not found with ID: {draft.movie_id}"
                )
            capacity = (
                self._store.lock_hall(draft.hall_id) if draft.hall_id is not None else None
            )
            if capacity is None:
                raise InvalidScreeningDataError(
                    f"Cinema hall not found with ID: {draft.hall_id}"
                )

            self.validate(draft)
            self._ensure_no_conflicts(draft.hall_id, draft.start_time, draft.end_time)

            screening = self._store.create_screening(
                movie_id=draft.movie_id,
                hall_id=draft.hall_id,
                start_time=draft.start_time,
                end_time=draft.end_time,
                price=draft.price,
                available_seats=capacity,
            )

        logger.info("Screening created with ID: %s", screening.id)
        return screening

    def update_screening(self, screening_id: int, changes: ScreeningChanges) -> Screening:
        """Reschedule, reprice or move a screening.

        Conflicts are only rechecked when the start time or the hall changes.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
            InvalidScreeningDataError: If the new window, price or hall is invalid.
            ScreeningConflictError: If the new slot is busy.
        """
        with self._store.atomic():
            current = self._store.lock_screening(screening_id)
            if current is None:
                raise ScreeningNotFoundError(screening_id)

            hall_id = changes.hall_id if changes.hall_id is not None else current.hall_id
            hall_changed = hall_id != current.hall_id
            start_changed = changes.start_time != current.start_time

            if start_changed:
                self.validate(changes)
            else:
                self._validate_window(changes.start_time, changes.end_time, changes.price)

            if hall_changed and self._store.lock_hall(hall_id) is None:
                raise InvalidScreeningDataError(f"Cinema hall not found with ID: {hall_id}")
            if start_changed or hall_changed:
                self._ensure_no_conflicts(
                    hall_id, changes.start_time, changes.end_time, screening_id
                )

            screening = self._store.update_screening(
                screening_id,
                hall_id=hall_id,
                start_time=changes.start_time,
                end_time=changes.end_time,
                price=changes.price,
            )
            if hall_changed:
                self._capacity.rebase(screening_id, reserved=current.reserved_seats)
                screening = self._store.get_screening(screening_id)

        logger.info("Screening updated with ID: %s", screening_id)
        return screening

    def delete_screening(self, screening_id: int) -> None:
        """Remove a screening.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
        """
        if not self._store.delete_screening(screening_id):
            raise ScreeningNotFoundError(screening_id)
        logger.info("Screening deleted with ID: %s", screening_id)

    def get_screening(self, screening_id: int) -> Screening:
        """Return a screening by ID.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
        """
        screening = self._store.get_screening(screening_id)
        if screening is None:
            raise ScreeningNotFoundError(screening_id)
        return screening

    def list_upcoming(self) -> list[Screening]:
        return self._store.list_upcoming(self._clock())

    def list_with_available_seats(self, min_seats: int = 1) -> list[Screening]:
        return self._store.list_with_available_seats(min_seats, self._clock())
