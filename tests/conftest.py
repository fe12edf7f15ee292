"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from reservations import models as orm
from reservations.services import ReservationService, ScreeningScheduler
from reservations.stores.django_store import (
    DjangoReservationStore,
    DjangoScreeningStore,
    DjangoUserDirectory,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="alice", password="secret")


@pytest.fixture
def movie(db) -> orm.Movie:
    return orm.Movie.objects.create(
        title="Dune: Part Two", duration_minutes=166, director="Denis Villeneuve"
    )


@pytest.fixture
def hall(db) -> orm.CinemaHall:
    return orm.CinemaHall.objects.create(
        name="Hall 1", total_seats=100, rows=10, seats_per_row=10
    )


@pytest.fixture
def make_screening(movie, hall):
    """Insert a screening directly, bypassing scheduler validation."""

    def _make(
        starts_in: timedelta = timedelta(days=1),
        duration: timedelta = timedelta(hours=2),
        price: Decimal = Decimal("15.50"),
        hall: orm.CinemaHall = hall,
    ) -> orm.Screening:
        start = timezone.now() + starts_in
        return orm.Screening.objects.create(
            movie=movie,
            hall=hall,
            start_time=start,
            end_time=start + duration,
            price=price,
            available_seats=hall.total_seats,
        )

    return _make


@pytest.fixture
def screening(make_screening) -> orm.Screening:
    return make_screening()


@pytest.fixture
def reservation_service() -> ReservationService:
    return ReservationService(
        reservations=DjangoReservationStore(),
        screenings=DjangoScreeningStore(),
        users=DjangoUserDirectory(),
    )


@pytest.fixture
def scheduler() -> ScreeningScheduler:
    return ScreeningScheduler(DjangoScreeningStore())


@pytest.fixture
def assert_capacity_consistent():
    """available_seats must equal hall capacity minus active seats."""

    def _check(screening_id: int) -> None:
        row = orm.Screening.objects.select_related("hall").get(pk=screening_id)
        active = orm.ReservedSeat.objects.filter(screening_id=screening_id, is_active=True).count()
        assert row.available_seats == row.hall.total_seats - active

    return _check
