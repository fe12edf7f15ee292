from django.urls import path

from reservations.handlers import (
    AvailableScreeningListView,
    ReservationByCodeView,
    ReservationCancelView,
    ReservationConfirmView,
    ReservationCreateView,
    ReservationDetailView,
    ReservationStatisticsView,
    ReservationStatusListView,
    ScreeningDetailView,
    ScreeningListView,
    ScreeningReservationListView,
    ScreeningSeatListView,
    UserReservationListView,
)

urlpatterns = [
    path("reservations", ReservationCreateView.as_view(), name="reservation-create"),
    path(
        "reservations/statistics",
        ReservationStatisticsView.as_view(),
        name="reservation-statistics",
    ),
    path(
        "reservations/status/<str:reservation_status>",
        ReservationStatusListView.as_view(),
        name="reservations-by-status",
    ),
    path(
        "reservations/confirmation/<str:code>",
        ReservationByCodeView.as_view(),
        name="reservation-by-code",
    ),
    path(
        "reservations/user/<int:user_id>",
        UserReservationListView.as_view(),
        name="user-reservations",
    ),
    path(
        "reservations/<int:reservation_id>",
        ReservationDetailView.as_view(),
        name="reservation-detail",
    ),
    path(
        "reservations/<int:reservation_id>/confirm",
        ReservationConfirmView.as_view(),
        name="reservation-confirm",
    ),
    path(
        "reservations/<int:reservation_id>/cancel",
        ReservationCancelView.as_view(),
        name="reservation-cancel",
    ),
    path("screenings", ScreeningListView.as_view(), name="screening-list"),
    path(
        "screenings/available",
        AvailableScreeningListView.as_view(),
        name="screening-available",
    ),
    path(
        "screenings/<int:screening_id>",
        ScreeningDetailView.as_view(),
        name="screening-detail",
    ),
    path(
        "screenings/<int:screening_id>/reservations",
        ScreeningReservationListView.as_view(),
        name="screening-reservations",
    ),
    path(
        "screenings/<int:screening_id>/seats",
        ScreeningSeatListView.as_view(),
        name="screening-seats",
    ),
]
