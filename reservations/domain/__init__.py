from reservations.domain.models import (
    Reservation,
    ReservationStatistics,
    Screening,
    ScreeningChanges,
    ScreeningDraft,
)
from reservations.domain.value_objects import (
    Capacity,
    ConfirmationCode,
    Money,
    ReservationStatus,
    SeatPosition,
)

__all__ = [
    "Reservation",
    "ReservationStatistics",
    "Screening",
    "ScreeningChanges",
    "ScreeningDraft",
    "Capacity",
    "ConfirmationCode",
    "Money",
    "ReservationStatus",
    "SeatPosition",
]
