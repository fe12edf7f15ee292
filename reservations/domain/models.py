"""Domain models representing persisted state.

These are pure domain objects with no API input rules. Related entities
are referenced by id only. Django ORM models are in reservations/models.py
(persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from reservations.domain.value_objects import (
    Capacity,
    ConfirmationCode,
    Money,
    ReservationStatus,
    SeatPosition,
)


@dataclass(frozen=True)
class Screening:
    """Domain representation of a Screening."""

    id: int
    movie_id: int
    hall_id: int
    start_time: datetime
    end_time: datetime
    price: Money
    available_seats: Capacity
    hall_capacity: Capacity
    created_at: datetime

    def has_available_seats(self, requested: int) -> bool:
        return requested >= 1 and self.available_seats.value >= requested

    @property
    def reserved_seats(self) -> int:
        return self.hall_capacity.value - self.available_seats.value


@dataclass(frozen=True)
class Reservation:
    """Domain representation of a Reservation and the seats it owns."""

    id: int
    user_id: int
    screening_id: int
    seats: tuple[SeatPosition, ...]
    total_price: Money
    status: ReservationStatus
    confirmation_code: ConfirmationCode
    created_at: datetime
    updated_at: datetime

    @property
    def seat_count(self) -> int:
        return len(self.seats)

    @property
    def is_active(self) -> bool:
        return self.status.holds_seats


@dataclass(frozen=True)
class ScreeningDraft:
    """Input for scheduling a new screening."""

    movie_id: int | None
    hall_id: int | None
    start_time: datetime | None
    end_time: datetime | None
    price: Decimal | None


@dataclass(frozen=True)
class ScreeningChanges:
    """Input for rescheduling or repricing an existing screening."""

    start_time: datetime
    end_time: datetime
    price: Decimal
    hall_id: int | None = None


@dataclass(frozen=True)
class ReservationStatistics:
    """Aggregated reservation figures for the admin dashboard."""

    confirmed_today: int
    monthly_revenue: Money
    weekly_reservations: int
