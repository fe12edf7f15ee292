"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self
from uuid import uuid4


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def times(self, count: int) -> "Money":
        return Money(amount=self.amount * count)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True, order=True)
class SeatPosition:
    """A physical seat in a hall, addressed by 1-based row and seat numbers."""

    row_number: int
    seat_number: int

    def __post_init__(self) -> None:
        if self.row_number < 1 or self.seat_number < 1:
            raise ValueError("Row and seat numbers must be positive")

    @property
    def label(self) -> str:
        """Customer-facing label, e.g. row 1 seat 5 is ``A5``."""
        return f"{chr(ord('A') + self.row_number - 1)}{self.seat_number}"

    def __str__(self) -> str:
        return f"{self.row_number}-{self.seat_number}"


@dataclass(frozen=True)
class ConfirmationCode:
    """Unique customer-facing reservation reference."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Confirmation code cannot be empty")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=f"RES{uuid4().hex[:16].upper()}")

    def __str__(self) -> str:
        return self.value


class ReservationStatus(Enum):
    """Reservation lifecycle states."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    def can_transition_to(self, target: "ReservationStatus") -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    @property
    def holds_seats(self) -> bool:
        return self in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


# PENDING -> EXPIRED belongs to the expiry sweep, which runs outside this app.
_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED}),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.EXPIRED: frozenset(),
}
