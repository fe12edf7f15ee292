"""Domain error codes for the reservations module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_RESERVATION_DATA = "INVALID_RESERVATION_DATA"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    SCREENING_NOT_FOUND = "SCREENING_NOT_FOUND"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    SEAT_NOT_AVAILABLE = "SEAT_NOT_AVAILABLE"
    INVALID_RESERVATION_STATE = "INVALID_RESERVATION_STATE"
    CANCELLATION_WINDOW_CLOSED = "CANCELLATION_WINDOW_CLOSED"
    INVALID_SCREENING_DATA = "INVALID_SCREENING_DATA"
    SCREENING_CONFLICT = "SCREENING_CONFLICT"
    CAPACITY_OVERFLOW = "CAPACITY_OVERFLOW"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidReservationDataError(DomainError):
    """Raised when a reservation request is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RESERVATION_DATA, message=message)


class UserNotFoundError(DomainError):
    """Raised when the reserving user does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found with ID: {user_id}",
        )
        self.user_id = user_id


class ScreeningNotFoundError(DomainError):
    """Raised when a screening is not found."""

    def __init__(self, screening_id: int) -> None:
        super().__init__(
            code=ErrorCode.SCREENING_NOT_FOUND,
            message=f"Screening not found with ID: {screening_id}",
        )
        self.screening_id = screening_id


class ReservationNotFoundError(DomainError):
    """Raised when a reservation is not found."""

    def __init__(self, reservation_id: int | str) -> None:
        super().__init__(
            code=ErrorCode.RESERVATION_NOT_FOUND,
            message=f"Reservation not found with ID: {reservation_id}",
        )
        self.reservation_id = reservation_id


class SeatNotAvailableError(DomainError):
    """Raised when a requested seat is already taken for the screening."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.SEAT_NOT_AVAILABLE, message=message)

    @classmethod
    def for_seat(cls, row_number: int, seat_number: int) -> "SeatNotAvailableError":
        return cls(f"Seat {row_number}-{seat_number} is already reserved")


class InvalidReservationStateError(DomainError):
    """Raised when a status transition is not allowed from the current state."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RESERVATION_STATE, message=message)


class ReservationCancellationError(DomainError):
    """Raised when cancelling inside the cutoff before the screening starts."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CANCELLATION_WINDOW_CLOSED,
            message="Cannot cancel reservation - screening too soon",
        )


class InvalidScreeningDataError(DomainError):
    """Raised when screening data fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_SCREENING_DATA, message=message)


class ScreeningConflictError(DomainError):
    """Raised when a screening overlaps another one in the same hall."""

    def __init__(self, conflicting_ids: tuple[int, ...] = ()) -> None:
        super().__init__(
            code=ErrorCode.SCREENING_CONFLICT,
            message="Screening conflicts with existing screening in the same hall",
        )
        self.conflicting_ids = conflicting_ids


class CapacityOverflowError(DomainError):
    """Raised when releasing seats would exceed the hall capacity."""

    def __init__(self, screening_id: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_OVERFLOW,
            message="Seat release exceeds hall capacity",
        )
        self.screening_id = screening_id
