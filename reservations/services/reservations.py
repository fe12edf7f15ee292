"""Reservation service - the reservation lifecycle lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every state change runs in one store transaction: the reservation row, its
seats and the screening's free-seat counter commit or roll back together.
"""

import logging
from datetime import datetime
from typing import Callable, Sequence

from django.utils import timezone

from reservations.domain import (
    ConfirmationCode,
    Reservation,
    ReservationStatistics,
    ReservationStatus,
    Screening,
    SeatPosition,
)
from reservations.domain.errors import (
    InvalidReservationDataError,
    InvalidReservationStateError,
    ReservationCancellationError,
    ReservationNotFoundError,
    ScreeningNotFoundError,
    SeatNotAvailableError,
    UserNotFoundError,
)
from reservations.domain.policy import (
    CANCELLATION_CUTOFF,
    MAX_SEATS_PER_RESERVATION,
    RECENT_RESERVATIONS_WINDOW,
    REVENUE_WINDOW,
)
from reservations.services.capacity import ScreeningCapacityTracker
from reservations.services.occupancy import SeatOccupancyLedger
from reservations.stores.interfaces import ReservationStore, ScreeningStore, UserDirectory

logger = logging.getLogger(__name__)


class ReservationService:
    """Service for creating, confirming and cancelling reservations."""

    def __init__(
        self,
        reservations: ReservationStore,
        screenings: ScreeningStore,
        users: UserDirectory,
        capacity: ScreeningCapacityTracker | None = None,
        ledger: SeatOccupancyLedger | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._reservations = reservations
        self._screenings = screenings
        self._users = users
        self._capacity = capacity or ScreeningCapacityTracker(screenings)
        self._ledger = ledger or SeatOccupancyLedger(reservations)
        self._clock = clock

    def create_reservation(
        self,
        user_id: int | None,
        screening_id: int | None,
        seats: Sequence[SeatPosition] | None,
    ) -> Reservation:
        """Hold seats for a user at a screening.

        Raises:
            InvalidReservationDataError: If ids are missing or the seat list is
                empty, too long or repeats a seat.
            UserNotFoundError: If the user does not exist.
            ScreeningNotFoundError: If the screening does not exist.
            SeatNotAvailableError: If any seat is taken, including when a
                concurrent request wins the seat first.
        """
        logger.info(
            "Creating reservation for user %s and screening %s", user_id, screening_id
        )
        self._validate_request(user_id, screening_id, seats)

        if not self._users.user_exists(user_id):
            raise UserNotFoundError(user_id)
        screening = self._screenings.get_screening(screening_id)
        if screening is None:
            raise ScreeningNotFoundError(screening_id)

        with self._reservations.atomic():
            taken = self._ledger.first_occupied(screening_id, seats)
            if taken is not None:
                raise SeatNotAvailableError.for_seat(taken.row_number, taken.seat_number)

            reservation = self._reservations.create_reservation(
                user_id=user_id,
                screening_id=screening_id,
                total_price=screening.price.times(len(seats)),
                confirmation_code=ConfirmationCode.generate(),
            )
            self._ledger.record_seats(reservation, seats)
            if not self._capacity.reserve_seats(screening_id, len(seats)):
                raise SeatNotAvailableError("Not enough seats available for this screening")

            reservation = self._reservations.get_reservation(reservation.id)

        logger.info(
            "Reservation created with ID: %s and confirmation code: %s",
            reservation.id,
            reservation.confirmation_code,
        )
        return reservation

    def _validate_request(
        self,
        user_id: int | None,
        screening_id: int | None,
        seats: Sequence[SeatPosition] | None,
    ) -> None:
        if user_id is None:
            raise InvalidReservationDataError("User ID cannot be null")
        if screening_id is None:
            raise InvalidReservationDataError("Screening ID cannot be null")
        if not seats:
            raise InvalidReservationDataError("At least one seat must be selected")
        if len(seats) > MAX_SEATS_PER_RESERVATION:
            raise InvalidReservationDataError(
                f"Cannot reserve more than {MAX_SEATS_PER_RESERVATION} seats at once"
            )
        if len(set(seats)) != len(seats):
            raise InvalidReservationDataError("The same seat was requested more than once")

    def confirm_reservation(self, reservation_id: int) -> Reservation:
        """Move a PENDING reservation to CONFIRMED.

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            InvalidReservationStateError: If the reservation is not PENDING.
        """
        with self._reservations.atomic():
            reservation = self._lock_or_raise(reservation_id)
            if reservation.status is not ReservationStatus.PENDING:
                raise InvalidReservationStateError("Only pending reservations can be confirmed")
            reservation = self._reservations.set_status(
                reservation_id, ReservationStatus.CONFIRMED
            )

        logger.info("Reservation %s confirmed", reservation_id)
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        """Cancel a reservation and give its seats back.

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
            InvalidReservationStateError: If it is already cancelled or expired.
            ReservationCancellationError: If the screening starts within the
                cancellation cutoff.
        """
        with self._reservations.atomic():
            reservation = self._lock_or_raise(reservation_id)
            if reservation.status is ReservationStatus.CANCELLED:
                raise InvalidReservationStateError("Reservation is already cancelled")
            if not reservation.status.can_transition_to(ReservationStatus.CANCELLED):
                raise InvalidReservationStateError(
                    f"Cannot cancel a reservation that is {reservation.status.value}"
                )

            screening = self._screenings.get_screening(reservation.screening_id)
            if screening is None:
                raise ScreeningNotFoundError(reservation.screening_id)
            if not self.can_cancel(screening):
                raise ReservationCancellationError()

            self._ledger.release_seats(reservation)
            self._capacity.release_seats(screening.id, reservation.seat_count)
            reservation = self._reservations.set_status(
                reservation_id, ReservationStatus.CANCELLED
            )

        logger.info("Reservation %s cancelled", reservation_id)
        return reservation

    def can_cancel(self, screening: Screening) -> bool:
        """Cancellation is open while the screening is more than the cutoff away."""
        return self._clock() < screening.start_time - CANCELLATION_CUTOFF

    def _lock_or_raise(self, reservation_id: int) -> Reservation:
        reservation = self._reservations.lock_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def get_reservation(self, reservation_id: int) -> Reservation:
        """Return a reservation by ID.

        Raises:
            ReservationNotFoundError: If the reservation does not exist.
        """
        reservation = self._reservations.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def find_by_confirmation_code(self, code: str) -> Reservation:
        """Return a reservation by its confirmation code.

        Raises:
            ReservationNotFoundError: If no reservation carries the code.
        """
        reservation = self._reservations.get_by_confirmation_code(code)
        if reservation is None:
            raise ReservationNotFoundError(code)
        return reservation

    def list_for_user(self, user_id: int) -> list[Reservation]:
        return self._reservations.list_for_user(user_id)

    def list_for_screening(self, screening_id: int) -> list[Reservation]:
        return self._reservations.list_for_screening(screening_id)

    def list_by_status(self, status: ReservationStatus) -> list[Reservation]:
        return self._reservations.list_by_status(status)

    def occupied_seats(self, screening_id: int) -> list[SeatPosition]:
        """Return the seats held for a screening.

        Raises:
            ScreeningNotFoundError: If the screening does not exist.
        """
        if self._screenings.get_screening(screening_id) is None:
            raise ScreeningNotFoundError(screening_id)
        return self._ledger.occupied_seats(screening_id)

    def get_statistics(self) -> ReservationStatistics:
        now = self._clock()
        return ReservationStatistics(
            confirmed_today=self._reservations.count_confirmed_on(now),
            monthly_revenue=self._reservations.confirmed_revenue_since(now - REVENUE_WINDOW),
            weekly_reservations=self._reservations.count_created_since(
                now - RECENT_RESERVATIONS_WINDOW
            ),
        )
