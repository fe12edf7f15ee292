"""Integration tests for the reservation lifecycle against the database.

Run with: pytest tests/test_reservations.py -v

The threaded races need PostgreSQL:
    CINEMA_DB_ENGINE=django.db.backends.postgresql CINEMA_DB_NAME=cinema \
    CINEMA_DB_USER=postgres CINEMA_DB_HOST=localhost pytest -m postgres
"""

import threading
from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import connection, connections

from reservations import models as orm
from reservations.domain import Money, ReservationStatus, SeatPosition
from reservations.domain.errors import (
    InvalidReservationDataError,
    InvalidReservationStateError,
    ReservationCancellationError,
    ReservationNotFoundError,
    SeatNotAvailableError,
)
from reservations.services import ReservationService, SeatOccupancyLedger
from reservations.stores.django_store import (
    DjangoReservationStore,
    DjangoScreeningStore,
    DjangoUserDirectory,
)


class BlindLedger(SeatOccupancyLedger):
    """Skips the pre-check, as if a concurrent request committed in between."""

    def first_occupied(self, screening_id, seats):
        return None


@pytest.fixture
def racing_service() -> ReservationService:
    store = DjangoReservationStore()
    return ReservationService(
        reservations=store,
        screenings=DjangoScreeningStore(),
        users=DjangoUserDirectory(),
        ledger=BlindLedger(store),
    )


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="bob", password="secret")


def seats(*pairs):
    return [SeatPosition(row, seat) for row, seat in pairs]


@pytest.mark.django_db
class TestCreateReservation:
    """Tests for creating reservations."""

    def test_reserve_two_seats(
        self, reservation_service, user, screening, assert_capacity_consistent
    ):
        reservation = reservation_service.create_reservation(
            user.pk, screening.pk, seats((5, 10), (5, 11))
        )

        assert reservation.status is ReservationStatus.PENDING
        assert reservation.total_price == Money(Decimal("31.00"))
        assert reservation.seats == tuple(seats((5, 10), (5, 11)))
        assert reservation.confirmation_code.value.startswith("RES")
        screening.refresh_from_db()
        assert screening.available_seats == 98
        assert_capacity_consistent(screening.pk)

    def test_overlapping_request_is_rejected_whole(
        self, reservation_service, user, other_user, screening, assert_capacity_consistent
    ):
        reservation_service.create_reservation(user.pk, screening.pk, seats((5, 10)))

        with pytest.raises(SeatNotAvailableError) as exc_info:
            reservation_service.create_reservation(
                other_user.pk, screening.pk, seats((5, 11), (5, 10))
            )

        assert exc_info.value.message == "Seat 5-10 is already reserved"
        assert not orm.ReservedSeat.objects.filter(row_number=5, seat_number=11).exists()
        assert orm.Reservation.objects.filter(user=other_user).count() == 0
        assert_capacity_consistent(screening.pk)

    def test_ten_seats_allowed_eleven_rejected(self, reservation_service, user, screening):
        reservation_service.create_reservation(
            user.pk, screening.pk, seats(*((1, n) for n in range(1, 11)))
        )

        with pytest.raises(InvalidReservationDataError):
            reservation_service.create_reservation(
                user.pk, screening.pk, seats(*((2, n) for n in range(1, 12)))
            )
        screening.refresh_from_db()
        assert screening.available_seats == 90

    def test_cancelled_seat_can_be_reserved_again(
        self, reservation_service, user, other_user, make_screening, assert_capacity_consistent
    ):
        screening = make_screening(starts_in=timedelta(days=2))
        first = reservation_service.create_reservation(user.pk, screening.pk, seats((3, 3)))
        reservation_service.cancel_reservation(first.id)

        second = reservation_service.create_reservation(
            other_user.pk, screening.pk, seats((3, 3))
        )

        assert second.seats == (SeatPosition(3, 3),)
        assert orm.ReservedSeat.objects.filter(row_number=3, seat_number=3).count() == 2
        assert_capacity_consistent(screening.pk)

    def test_seat_rows_are_inserted_in_seat_order(self, reservation_service, user, screening):
        reservation_service.create_reservation(
            user.pk, screening.pk, seats((5, 11), (2, 7), (5, 10), (2, 3))
        )

        inserted = list(
            orm.ReservedSeat.objects.order_by("pk").values_list("row_number", "seat_number")
        )
        assert inserted == [(2, 3), (2, 7), (5, 10), (5, 11)]


@pytest.mark.django_db
class TestSeatRaces:
    """The uniqueness constraint decides races the pre-check cannot see."""

    def test_constraint_rejects_seat_and_rolls_back(
        self, reservation_service, racing_service, user, other_user, screening,
        assert_capacity_consistent,
    ):
        reservation_service.create_reservation(user.pk, screening.pk, seats((5, 10)))

        with pytest.raises(SeatNotAvailableError) as exc_info:
            racing_service.create_reservation(
                other_user.pk, screening.pk, seats((5, 11), (5, 10))
            )

        assert exc_info.value.message == "Seat 5-10 is already reserved"
        assert orm.Reservation.objects.count() == 1
        assert not orm.ReservedSeat.objects.filter(row_number=5, seat_number=11).exists()
        screening.refresh_from_db()
        assert screening.available_seats == 99
        assert_capacity_consistent(screening.pk)

    def test_single_seat_hall_has_one_winner(
        self, reservation_service, racing_service, user, other_user, make_screening,
        assert_capacity_consistent,
    ):
        tiny = orm.CinemaHall.objects.create(
            name="Booth", total_seats=1, rows=1, seats_per_row=1
        )
        screening = make_screening(hall=tiny)

        reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        with pytest.raises(SeatNotAvailableError):
            racing_service.create_reservation(other_user.pk, screening.pk, seats((1, 1)))

        screening.refresh_from_db()
        assert screening.available_seats == 0
        assert_capacity_consistent(screening.pk)

    def test_refused_capacity_rolls_back_reservation_and_seats(
        self, reservation_service, user, screening
    ):
        orm.Screening.objects.filter(pk=screening.pk).update(available_seats=1)

        with pytest.raises(SeatNotAvailableError):
            reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1), (1, 2)))

        assert orm.Reservation.objects.count() == 0
        assert orm.ReservedSeat.objects.count() == 0
        screening.refresh_from_db()
        assert screening.available_seats == 1


def race(screening, requests):
    """Run one create_reservation per (user_id, seats) request in its own thread."""
    barrier = threading.Barrier(len(requests))
    outcomes = []

    def attempt(user_id, wanted):
        service = ReservationService(
            reservations=DjangoReservationStore(),
            screenings=DjangoScreeningStore(),
            users=DjangoUserDirectory(),
        )
        barrier.wait()
        try:
            service.create_reservation(user_id, screening.pk, wanted)
            outcomes.append("won")
        except SeatNotAvailableError:
            outcomes.append("lost")
        except Exception as exc:
            outcomes.append(repr(exc))
        finally:
            connections.close_all()

    threads = [threading.Thread(target=attempt, args=request) for request in requests]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return sorted(outcomes)


@pytest.mark.postgres
@pytest.mark.django_db(transaction=True)
@pytest.mark.skipif(
    connection.vendor != "postgresql", reason="needs row locks across connections"
)
class TestConcurrentReservations:
    """Real concurrent requests; run against PostgreSQL with ``pytest -m postgres``."""

    def test_one_seat_has_one_winner(self, user, other_user, screening):
        outcomes = race(
            screening, [(user.pk, seats((7, 7))), (other_user.pk, seats((7, 7)))]
        )

        assert outcomes == ["lost", "won"]
        screening.refresh_from_db()
        assert screening.available_seats == 99

    def test_crossed_seat_order_does_not_deadlock(self, user, other_user, screening):
        outcomes = race(
            screening,
            [
                (user.pk, seats((7, 7), (7, 8))),
                (other_user.pk, seats((7, 8), (7, 7))),
            ],
        )

        assert outcomes == ["lost", "won"]
        screening.refresh_from_db()
        assert screening.available_seats == 98


@pytest.mark.django_db
class TestConfirmReservation:
    """Tests for confirming reservations."""

    def test_confirm_pending(self, reservation_service, user, screening):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))

        confirmed = reservation_service.confirm_reservation(created.id)

        assert confirmed.status is ReservationStatus.CONFIRMED
        assert confirmed.confirmation_code == created.confirmation_code

    def test_second_confirm_is_rejected(self, reservation_service, user, screening):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        reservation_service.confirm_reservation(created.id)

        with pytest.raises(InvalidReservationStateError):
            reservation_service.confirm_reservation(created.id)
        assert reservation_service.get_reservation(created.id).status is ReservationStatus.CONFIRMED

    def test_confirm_missing(self, reservation_service):
        with pytest.raises(ReservationNotFoundError):
            reservation_service.confirm_reservation(9999)


@pytest.mark.django_db
class TestCancelReservation:
    """Tests for cancelling reservations."""

    def test_cancel_outside_cutoff_frees_seats(
        self, reservation_service, user, make_screening, assert_capacity_consistent
    ):
        screening = make_screening(starts_in=timedelta(hours=3))
        created = reservation_service.create_reservation(
            user.pk, screening.pk, seats((5, 10), (5, 11))
        )

        cancelled = reservation_service.cancel_reservation(created.id)

        assert cancelled.status is ReservationStatus.CANCELLED
        assert reservation_service.occupied_seats(screening.pk) == []
        screening.refresh_from_db()
        assert screening.available_seats == 100
        assert_capacity_consistent(screening.pk)

    def test_cancel_inside_cutoff_changes_nothing(
        self, reservation_service, user, make_screening, assert_capacity_consistent
    ):
        screening = make_screening(starts_in=timedelta(hours=1))
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))

        with pytest.raises(ReservationCancellationError):
            reservation_service.cancel_reservation(created.id)

        assert reservation_service.get_reservation(created.id).status is ReservationStatus.PENDING
        assert reservation_service.occupied_seats(screening.pk) == [SeatPosition(1, 1)]
        assert_capacity_consistent(screening.pk)

    def test_cancel_confirmed(self, reservation_service, user, screening):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        reservation_service.confirm_reservation(created.id)

        cancelled = reservation_service.cancel_reservation(created.id)

        assert cancelled.status is ReservationStatus.CANCELLED

    def test_cancel_twice_is_rejected(
        self, reservation_service, user, screening, assert_capacity_consistent
    ):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        reservation_service.cancel_reservation(created.id)

        with pytest.raises(InvalidReservationStateError):
            reservation_service.cancel_reservation(created.id)
        screening.refresh_from_db()
        assert screening.available_seats == 100
        assert_capacity_consistent(screening.pk)

    def test_cancel_expired_is_rejected(self, reservation_service, user, screening):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        orm.Reservation.objects.filter(pk=created.id).update(
            status=orm.Reservation.Status.EXPIRED
        )

        with pytest.raises(InvalidReservationStateError):
            reservation_service.cancel_reservation(created.id)


@pytest.mark.django_db
class TestReservationQueries:
    """Tests for lookups, listings and statistics."""

    def test_find_by_confirmation_code(self, reservation_service, user, screening):
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))

        found = reservation_service.find_by_confirmation_code(created.confirmation_code.value)

        assert found.id == created.id

    def test_find_by_unknown_code(self, reservation_service):
        with pytest.raises(ReservationNotFoundError):
            reservation_service.find_by_confirmation_code("RESDOESNOTEXIST")

    def test_listings(self, reservation_service, user, other_user, screening):
        mine = reservation_service.create_reservation(user.pk, screening.pk, seats((1, 1)))
        theirs = reservation_service.create_reservation(other_user.pk, screening.pk, seats((1, 2)))
        reservation_service.confirm_reservation(theirs.id)

        assert [r.id for r in reservation_service.list_for_user(user.pk)] == [mine.id]
        assert {r.id for r in reservation_service.list_for_screening(screening.pk)} == {
            mine.id,
            theirs.id,
        }
        assert [r.id for r in reservation_service.list_by_status(ReservationStatus.CONFIRMED)] == [
            theirs.id
        ]

    def test_occupied_seats_are_ordered(self, reservation_service, user, screening):
        reservation_service.create_reservation(user.pk, screening.pk, seats((2, 1), (1, 5)))

        assert reservation_service.occupied_seats(screening.pk) == seats((1, 5), (2, 1))

    def test_ledger_sees_only_active_seats(self, reservation_service, user, screening):
        ledger = SeatOccupancyLedger(DjangoReservationStore())
        created = reservation_service.create_reservation(user.pk, screening.pk, seats((4, 4)))

        assert ledger.is_occupied(screening.pk, 4, 4)
        assert not ledger.is_occupied(screening.pk, 4, 5)

        reservation_service.cancel_reservation(created.id)
        assert not ledger.is_occupied(screening.pk, 4, 4)

    def test_statistics(self, reservation_service, user, screening):
        confirmed = reservation_service.create_reservation(
            user.pk, screening.pk, seats((1, 1), (1, 2))
        )
        reservation_service.confirm_reservation(confirmed.id)
        reservation_service.create_reservation(user.pk, screening.pk, seats((2, 1)))

        stats = reservation_service.get_statistics()

        assert stats.confirmed_today == 1
        assert stats.monthly_revenue == Money(Decimal("31.00"))
        assert stats.weekly_reservations == 2
