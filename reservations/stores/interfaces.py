"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Methods that lock rows
are only meaningful inside ``atomic()``.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from reservations.domain import (
    ConfirmationCode,
    Money,
    Reservation,
    ReservationStatus,
    Screening,
    SeatPosition,
)


class TransactionalStore(ABC):
    """Store whose writes can be grouped into one all-or-nothing unit."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager that commits on success and rolls back on error."""
        ...


class ScreeningStore(TransactionalStore):
    """Interface for screening persistence operations."""

    @abstractmethod
    def get_screening(self, screening_id: int) -> Screening | None:
        """Return a screening by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_screening(self, screening_id: int) -> Screening | None:
        """Return a screening by ID with its row locked until the transaction ends."""
        ...

    @abstractmethod
    def set_available_seats(self, screening_id: int, available_seats: int) -> Screening:
        """Persist a new available-seat count."""
        ...

    @abstractmethod
    def find_conflicting(
        self,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_screening_id: int | None = None,
    ) -> list[Screening]:
        """Return screenings in the hall overlapping the window, boundaries inclusive."""
        ...

    @abstractmethod
    def movie_exists(self, movie_id: int) -> bool:
        """Check if a movie exists."""
        ...

    @abstractmethod
    def lock_hall(self, hall_id: int) -> int | None:
        """Return a hall's total seats, or None if missing, locking the hall row."""
        ...

    @abstractmethod
    def create_screening(
        self,
        movie_id: int,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        price: Decimal,
        available_seats: int,
    ) -> Screening:
        """Insert a screening and return it."""
        ...

    @abstractmethod
    def update_screening(
        self,
        screening_id: int,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        price: Decimal,
    ) -> Screening:
        """Overwrite a screening's hall, schedule and price."""
        ...

    @abstractmethod
    def delete_screening(self, screening_id: int) -> bool:
        """Delete a screening. Return False if it did not exist."""
        ...

    @abstractmethod
    def list_upcoming(self, now: datetime) -> list[Screening]:
        """Return screenings starting at or after ``now``, ordered by start time."""
        ...

    @abstractmethod
    def list_with_available_seats(self, min_seats: int, now: datetime) -> list[Screening]:
        """Return upcoming screenings with at least ``min_seats`` free seats."""
        ...


class ReservationStore(TransactionalStore):
    """Interface for reservation and reserved-seat persistence operations."""

    @abstractmethod
    def create_reservation(
        self,
        user_id: int,
        screening_id: int,
        total_price: Money,
        confirmation_code: ConfirmationCode,
    ) -> Reservation:
        """Insert a PENDING reservation without seats."""
        ...

    @abstractmethod
    def add_seats(
        self, reservation_id: int, screening_id: int, seats: Iterable[SeatPosition]
    ) -> None:
        """Insert active seat rows.

        Raises:
            SeatNotAvailableError: If a seat is held by another active reservation.
        """
        ...

    @abstractmethod
    def deactivate_seats(self, reservation_id: int) -> int:
        """Release a reservation's seats, keeping the rows. Return how many changed."""
        ...

    @abstractmethod
    def seat_taken(self, screening_id: int, seat: SeatPosition) -> bool:
        """Check if an active reservation holds the seat."""
        ...

    @abstractmethod
    def occupied_seats(self, screening_id: int) -> list[SeatPosition]:
        """Return active seats for a screening ordered by row then seat."""
        ...

    @abstractmethod
    def get_reservation(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_reservation(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by ID with its row locked until the transaction ends."""
        ...

    @abstractmethod
    def get_by_confirmation_code(self, code: str) -> Reservation | None:
        """Return a reservation by confirmation code, or None if not found."""
        ...

    @abstractmethod
    def set_status(self, reservation_id: int, status: ReservationStatus) -> Reservation:
        """Persist a new status."""
        ...

    @abstractmethod
    def list_for_user(self, user_id: int) -> list[Reservation]:
        """Return a user's reservations, newest first."""
        ...

    @abstractmethod
    def list_for_screening(self, screening_id: int) -> list[Reservation]:
        """Return a screening's reservations, newest first."""
        ...

    @abstractmethod
    def list_by_status(self, status: ReservationStatus) -> list[Reservation]:
        """Return reservations in a status, newest first."""
        ...

    @abstractmethod
    def count_confirmed_on(self, day: datetime) -> int:
        """Count confirmed reservations created on the same calendar day as ``day``."""
        ...

    @abstractmethod
    def confirmed_revenue_since(self, since: datetime) -> Money:
        """Sum total prices of confirmed reservations created since ``since``."""
        ...

    @abstractmethod
    def count_created_since(self, since: datetime) -> int:
        """Count reservations created since ``since``."""
        ...


class UserDirectory(ABC):
    """Lookup of users owned by the accounts collaborator."""

    @abstractmethod
    def user_exists(self, user_id: int) -> bool:
        """Check if a user exists."""
        ...
