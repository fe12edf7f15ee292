"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q

from reservations.domain.value_objects import ReservationStatus


class Movie(models.Model):
    """Persistence model for movies."""

    class Genre(models.TextChoices):
        ACTION = "ACTION"
        COMEDY = "COMEDY"
        DRAMA = "DRAMA"
        HORROR = "HORROR"
        ROMANCE = "ROMANCE"
        SCI_FI = "SCI_FI"
        THRILLER = "THRILLER"
        DOCUMENTARY = "DOCUMENTARY"
        ANIMATION = "ANIMATION"
        FANTASY = "FANTASY"

    title = models.CharField(max_length=255)
    description = models.TextField(max_length=1000, blank=True)
    duration_minutes = models.PositiveIntegerField()
    genre = models.CharField(max_length=20, choices=Genre.choices, blank=True)
    director = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "movies"
        ordering = ["title"]

    def __str__(self) -> str:
        return self.title


class Cinema(models.Model):
    """Persistence model for cinemas."""

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100, blank=True)

    class Meta:
        db_table = "cinemas"

    def __str__(self) -> str:
        return self.name


class CinemaHall(models.Model):
    """Persistence model for halls; ``total_seats`` is the screening capacity."""

    class HallType(models.TextChoices):
        STANDARD = "STANDARD"
        IMAX = "IMAX"
        VIP = "VIP"
        DOLBY_ATMOS = "DOLBY_ATMOS"

    cinema = models.ForeignKey(
        Cinema, on_delete=models.CASCADE, related_name="halls", null=True, blank=True
    )
    name = models.CharField(max_length=100)
    total_seats = models.PositiveIntegerField()
    rows = models.PositiveIntegerField()
    seats_per_row = models.PositiveIntegerField()
    hall_type = models.CharField(
        max_length=20, choices=HallType.choices, default=HallType.STANDARD
    )

    class Meta:
        db_table = "cinema_halls"

    def __str__(self) -> str:
        return self.name


class Screening(models.Model):
    """Persistence model for screenings."""

    movie = models.ForeignKey(Movie, on_delete=models.CASCADE, related_name="screenings")
    hall = models.ForeignKey(
        CinemaHall, on_delete=models.CASCADE, related_name="screenings"
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    available_seats = models.IntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "screenings"
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["hall", "start_time"], name="screening_hall_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(available_seats__gte=0),
                name="screening_available_seats_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.movie.title} - {self.start_time}"


class Reservation(models.Model):
    """Persistence model for reservations."""

    class Status(models.TextChoices):
        PENDING = ReservationStatus.PENDING.value
        CONFIRMED = ReservationStatus.CONFIRMED.value
        CANCELLED = ReservationStatus.CANCELLED.value
        EXPIRED = ReservationStatus.EXPIRED.value

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reservations"
    )
    screening = models.ForeignKey(
        Screening, on_delete=models.CASCADE, related_name="reservations"
    )
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PENDING
    )
    confirmation_code = models.CharField(max_length=32, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reservations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="reservation_user_created_idx"),
            models.Index(fields=["status", "created_at"], name="reservation_status_created_idx"),
        ]

    def __str__(self) -> str:
        return self.confirmation_code


class ReservedSeat(models.Model):
    """One seat held by a reservation for its screening.

    Rows are kept after cancellation with ``is_active`` cleared, so the
    uniqueness constraint only covers seats of live reservations.
    """

    reservation = models.ForeignKey(
        Reservation, on_delete=models.CASCADE, related_name="reserved_seats"
    )
    screening = models.ForeignKey(
        Screening, on_delete=models.CASCADE, related_name="reserved_seats"
    )
    row_number = models.PositiveIntegerField()
    seat_number = models.PositiveIntegerField()
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "reserved_seats"
        ordering = ["row_number", "seat_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["screening", "row_number", "seat_number"],
                condition=Q(is_active=True),
                name="unique_active_seat_per_screening",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.row_number}-{self.seat_number}"
