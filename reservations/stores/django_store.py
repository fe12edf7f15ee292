"""Django ORM implementation of the stores.

Each method queries the ORM and converts rows to domain models.
"""

import logging
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Prefetch, Q, Sum
from django.utils import timezone

from reservations import models as orm
from reservations.domain import (
    Capacity,
    ConfirmationCode,
    Money,
    Reservation,
    ReservationStatus,
    Screening,
    SeatPosition,
)
from reservations.domain.errors import (
    ReservationNotFoundError,
    ScreeningNotFoundError,
    SeatNotAvailableError,
)
from reservations.stores.interfaces import ReservationStore, ScreeningStore, UserDirectory

logger = logging.getLogger(__name__)


def _to_screening(row: orm.Screening) -> Screening:
    return Screening(
        id=row.pk,
        movie_id=row.movie_id,
        hall_id=row.hall_id,
        start_time=row.start_time,
        end_time=row.end_time,
        price=Money(Decimal(row.price)),
        available_seats=Capacity(row.available_seats),
        hall_capacity=Capacity(row.hall.total_seats),
        created_at=row.created_at,
    )


def _to_reservation(row: orm.Reservation) -> Reservation:
    return Reservation(
        id=row.pk,
        user_id=row.user_id,
        screening_id=row.screening_id,
        seats=tuple(
            SeatPosition(seat.row_number, seat.seat_number)
            for seat in row.reserved_seats.all()
        ),
        total_price=Money(Decimal(row.total_price)),
        status=ReservationStatus(row.status),
        confirmation_code=ConfirmationCode(row.confirmation_code),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoScreeningStore(ScreeningStore):
    """Screening store backed by the Django ORM."""

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()

    def _queryset(self):
        return orm.Screening.objects.select_related("hall")

    def get_screening(self, screening_id: int) -> Screening | None:
        row = self._queryset().filter(pk=screening_id).first()
        return _to_screening(row) if row else None

    def lock_screening(self, screening_id: int) -> Screening | None:
        row = orm.Screening.objects.select_for_update().filter(pk=screening_id).first()
        return _to_screening(row) if row else None

    def set_available_seats(self, screening_id: int, available_seats: int) -> Screening:
        row = self._queryset().filter(pk=screening_id).first()
        if row is None:
            raise ScreeningNotFoundError(screening_id)
        row.available_seats = available_seats
        row.save(update_fields=["available_seats"])
        return _to_screening(row)

    def find_conflicting(
        self,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        exclude_screening_id: int | None = None,
    ) -> list[Screening]:
        overlaps = (
            Q(start_time__range=(start_time, end_time))
            | Q(end_time__range=(start_time, end_time))
            | Q(start_time__lte=start_time, end_time__gte=start_time)
        )
        rows = self._queryset().filter(overlaps, hall_id=hall_id)
        if exclude_screening_id is not None:
            rows = rows.exclude(pk=exclude_screening_id)
        return [_to_screening(row) for row in rows]

    def movie_exists(self, movie_id: int) -> bool:
        return orm.Movie.objects.filter(pk=movie_id).exists()

    def lock_hall(self, hall_id: int) -> int | None:
        return (
            orm.CinemaHall.objects.select_for_update()
            .filter(pk=hall_id)
            .values_list("total_seats", flat=True)
            .first()
        )

    def create_screening(
        self,
        movie_id: int,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        price: Decimal,
        available_seats: int,
    ) -> Screening:
        row = orm.Screening.objects.create(
            movie_id=movie_id,
            hall_id=hall_id,
            start_time=start_time,
            end_time=end_time,
            price=price,
            available_seats=available_seats,
        )
        return self.get_screening(row.pk)

    def update_screening(
        self,
        screening_id: int,
        hall_id: int,
        start_time: datetime,
        end_time: datetime,
        price: Decimal,
    ) -> Screening:
        row = orm.Screening.objects.filter(pk=screening_id).first()
        if row is None:
            raise ScreeningNotFoundError(screening_id)
        row.hall_id = hall_id
        row.start_time = start_time
        row.end_time = end_time
        row.price = price
        row.save(update_fields=["hall", "start_time", "end_time", "price"])
        return self.get_screening(row.pk)

    def delete_screening(self, screening_id: int) -> bool:
        row = orm.Screening.objects.filter(pk=screening_id).first()
        if row is None:
            return False
        row.delete()
        return True

    def list_upcoming(self, now: datetime) -> list[Screening]:
        rows = self._queryset().filter(start_time__gte=now).order_by("start_time")
        return [_to_screening(row) for row in rows]

    def list_with_available_seats(self, min_seats: int, now: datetime) -> list[Screening]:
        rows = (
            self._queryset()
            .filter(start_time__gte=now, available_seats__gte=min_seats)
            .order_by("start_time")
        )
        return [_to_screening(row) for row in rows]


class DjangoReservationStore(ReservationStore):
    """Reservation store backed by the Django ORM."""

    def atomic(self) -> AbstractContextManager:
        return transaction.atomic()

    def _queryset(self):
        return orm.Reservation.objects.prefetch_related(
            Prefetch(
                "reserved_seats",
                queryset=orm.ReservedSeat.objects.order_by("row_number", "seat_number"),
            )
        )

    def _get(self, reservation_id: int) -> Reservation:
        row = self._queryset().filter(pk=reservation_id).first()
        if row is None:
            raise ReservationNotFoundError(reservation_id)
        return _to_reservation(row)

    def create_reservation(
        self,
        user_id: int,
        screening_id: int,
        total_price: Money,
        confirmation_code: ConfirmationCode,
    ) -> Reservation:
        row = orm.Reservation.objects.create(
            user_id=user_id,
            screening_id=screening_id,
            total_price=total_price.amount,
            status=orm.Reservation.Status.PENDING,
            confirmation_code=confirmation_code.value,
        )
        return self._get(row.pk)

    def add_seats(
        self, reservation_id: int, screening_id: int, seats: Iterable[SeatPosition]
    ) -> None:
        seats = list(seats)
        # Insert in seat order so concurrent requests take index locks in the
        # same order and fail on the constraint instead of deadlocking.
        rows = [
            orm.ReservedSeat(
                reservation_id=reservation_id,
                screening_id=screening_id,
                row_number=seat.row_number,
                seat_number=seat.seat_number,
            )
            for seat in sorted(seats)
        ]
        try:
            with transaction.atomic():
                orm.ReservedSeat.objects.bulk_create(rows)
        except IntegrityError as exc:
            taken = next(
                (seat for seat in seats if self.seat_taken(screening_id, seat)), None
            )
            logger.warning(
                "Seat race lost for screening %s (reservation %s)",
                screening_id,
                reservation_id,
            )
            if taken is None:
                raise SeatNotAvailableError("Requested seats are already reserved") from exc
            raise SeatNotAvailableError.for_seat(taken.row_number, taken.seat_number) from exc

    def deactivate_seats(self, reservation_id: int) -> int:
        return orm.ReservedSeat.objects.filter(
            reservation_id=reservation_id, is_active=True
        ).update(is_active=False)

    def seat_taken(self, screening_id: int, seat: SeatPosition) -> bool:
        return orm.ReservedSeat.objects.filter(
            screening_id=screening_id,
            row_number=seat.row_number,
            seat_number=seat.seat_number,
            is_active=True,
        ).exists()

    def occupied_seats(self, screening_id: int) -> list[SeatPosition]:
        rows = (
            orm.ReservedSeat.objects.filter(screening_id=screening_id, is_active=True)
            .order_by("row_number", "seat_number")
            .values_list("row_number", "seat_number")
        )
        return [SeatPosition(row_number, seat_number) for row_number, seat_number in rows]

    def get_reservation(self, reservation_id: int) -> Reservation | None:
        row = self._queryset().filter(pk=reservation_id).first()
        return _to_reservation(row) if row else None

    def lock_reservation(self, reservation_id: int) -> Reservation | None:
        row = orm.Reservation.objects.select_for_update().filter(pk=reservation_id).first()
        return self._get(row.pk) if row else None

    def get_by_confirmation_code(self, code: str) -> Reservation | None:
        row = self._queryset().filter(confirmation_code=code).first()
        return _to_reservation(row) if row else None

    def set_status(self, reservation_id: int, status: ReservationStatus) -> Reservation:
        row = orm.Reservation.objects.filter(pk=reservation_id).first()
        if row is None:
            raise ReservationNotFoundError(reservation_id)
        row.status = status.value
        row.save(update_fields=["status", "updated_at"])
        return self._get(reservation_id)

    def list_for_user(self, user_id: int) -> list[Reservation]:
        rows = self._queryset().filter(user_id=user_id).order_by("-created_at")
        return [_to_reservation(row) for row in rows]

    def list_for_screening(self, screening_id: int) -> list[Reservation]:
        rows = self._queryset().filter(screening_id=screening_id).order_by("-created_at")
        return [_to_reservation(row) for row in rows]

    def list_by_status(self, status: ReservationStatus) -> list[Reservation]:
        rows = self._queryset().filter(status=status.value).order_by("-created_at")
        return [_to_reservation(row) for row in rows]

    def count_confirmed_on(self, day: datetime) -> int:
        return orm.Reservation.objects.filter(
            status=orm.Reservation.Status.CONFIRMED,
            created_at__date=timezone.localdate(day),
        ).count()

    def confirmed_revenue_since(self, since: datetime) -> Money:
        total = orm.Reservation.objects.filter(
            status=orm.Reservation.Status.CONFIRMED, created_at__gte=since
        ).aggregate(total=Sum("total_price"))["total"]
        return Money(Decimal(total) if total is not None else Decimal("0.00"))

    def count_created_since(self, since: datetime) -> int:
        return orm.Reservation.objects.filter(created_at__gte=since).count()


class DjangoUserDirectory(UserDirectory):
    """User lookups against ``settings.AUTH_USER_MODEL``."""

    def user_exists(self, user_id: int) -> bool:
        return get_user_model().objects.filter(pk=user_id).exists()
