from django.contrib import admin

from reservations.models import (
    Cinema,
    CinemaHall,
    Movie,
    Reservation,
    ReservedSeat,
    Screening,
)


class CinemaHallInline(admin.TabularInline):
    """New halls can be added here; existing ones are edited on their own page."""

    model = CinemaHall
    extra = 1
    can_delete = False

    def has_change_permission(self, request, obj=None):
        return False


class ReservedSeatInline(admin.TabularInline):
    model = ReservedSeat
    extra = 0
    fields = ["row_number", "seat_number", "is_active"]
    readonly_fields = fields
    can_delete = False


@admin.register(Movie)
class MovieAdmin(admin.ModelAdmin):
    list_display = ["title", "director", "genre", "duration_minutes"]
    search_fields = ["title", "director"]
    list_filter = ["genre"]


@admin.register(Cinema)
class CinemaAdmin(admin.ModelAdmin):
    list_display = ["name", "city", "address"]
    search_fields = ["name", "city"]
    inlines = [CinemaHallInline]


@admin.register(CinemaHall)
class CinemaHallAdmin(admin.ModelAdmin):
    list_display = ["name", "cinema", "hall_type", "total_seats"]
    list_filter = ["hall_type", "cinema"]

    def get_readonly_fields(self, request, obj=None):
        # Screenings in the hall were sized from total_seats when scheduled.
        if obj is not None:
            return ["total_seats"]
        return []


@admin.register(Screening)
class ScreeningAdmin(admin.ModelAdmin):
    """Screenings are scheduled and moved through the API.

    Schedule and seat fields are read-only here so the conflict check and the
    capacity tracker cannot be bypassed.
    """

    list_display = ["movie", "hall", "start_time", "end_time", "price", "available_seats"]
    list_filter = ["hall"]
    readonly_fields = ["hall", "start_time", "end_time", "price", "available_seats"]

    def has_add_permission(self, request):
        return False


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    """Read-only view of reservations; cancel through the API to free seats."""

    list_display = ["confirmation_code", "user", "screening", "status", "total_price", "created_at"]
    list_filter = ["status"]
    search_fields = ["confirmation_code"]
    readonly_fields = ["confirmation_code", "user", "screening", "status", "total_price"]
    inlines = [ReservedSeatInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
