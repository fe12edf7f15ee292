from reservations.handlers.views import (
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

__all__ = [
    "AvailableScreeningListView",
    "ReservationByCodeView",
    "ReservationCancelView",
    "ReservationConfirmView",
    "ReservationCreateView",
    "ReservationDetailView",
    "ReservationStatisticsView",
    "ReservationStatusListView",
    "ScreeningDetailView",
    "ScreeningListView",
    "ScreeningReservationListView",
    "ScreeningSeatListView",
    "UserReservationListView",
]
