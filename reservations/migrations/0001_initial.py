import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Cinema",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("address", models.CharField(max_length=255)),
                ("city", models.CharField(blank=True, max_length=100)),
            ],
            options={"db_table": "cinemas"},
        ),
        migrations.CreateModel(
            name="Movie",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, max_length=1000)),
                ("duration_minutes", models.PositiveIntegerField()),
                (
                    "genre",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("ACTION", "Action"),
                            ("COMEDY", "Comedy"),
                            ("DRAMA", "Drama"),
                            ("HORROR", "Horror"),
                            ("ROMANCE", "Romance"),
                            ("SCI_FI", "Sci Fi"),
                            ("THRILLER", "Thriller"),
                            ("DOCUMENTARY", "Documentary"),
                            ("ANIMATION", "Animation"),
                            ("FANTASY", "Fantasy"),
                        ],
                        max_length=20,
                    ),
                ),
                ("director", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"db_table": "movies", "ordering": ["title"]},
        ),
        migrations.CreateModel(
            name="CinemaHall",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("total_seats", models.PositiveIntegerField()),
                ("rows", models.PositiveIntegerField()),
                ("seats_per_row", models.PositiveIntegerField()),
                (
                    "hall_type",
                    models.CharField(
                        choices=[
                            ("STANDARD", "Standard"),
                            ("IMAX", "Imax"),
                            ("VIP", "Vip"),
                            ("DOLBY_ATMOS", "Dolby Atmos"),
                        ],
                        default="STANDARD",
                        max_length=20,
                    ),
                ),
                (
                    "cinema",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="halls",
                        to="reservations.cinema",
                    ),
                ),
            ],
            options={"db_table": "cinema_halls"},
        ),
        migrations.CreateModel(
            name="Screening",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("available_seats", models.IntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "hall",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="screenings",
                        to="reservations.cinemahall",
                    ),
                ),
                (
                    "movie",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="screenings",
                        to="reservations.movie",
                    ),
                ),
            ],
            options={
                "db_table": "screenings",
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["hall", "start_time"], name="screening_hall_start_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("available_seats__gte", 0)),
                        name="screening_available_seats_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CONFIRMED", "Confirmed"),
                            ("CANCELLED", "Cancelled"),
                            ("EXPIRED", "Expired"),
                        ],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("confirmation_code", models.CharField(editable=False, max_length=32, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "screening",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservations",
                        to="reservations.screening",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "reservations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="reservation_user_created_idx"),
                    models.Index(fields=["status", "created_at"], name="reservation_status_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReservedSeat",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("row_number", models.PositiveIntegerField()),
                ("seat_number", models.PositiveIntegerField()),
                ("is_active", models.BooleanField(default=True)),
                (
                    "reservation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reserved_seats",
                        to="reservations.reservation",
                    ),
                ),
                (
                    "screening",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reserved_seats",
                        to="reservations.screening",
                    ),
                ),
            ],
            options={
                "db_table": "reserved_seats",
                "ordering": ["row_number", "seat_number"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("screening", "row_number", "seat_number"),
                        name="unique_active_seat_per_screening",
                    ),
                ],
            },
        ),
    ]
