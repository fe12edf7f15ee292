"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import SAFE_METHODS, IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.serializers import Serializer
from rest_framework.views import APIView

from reservations.cache import screening_key, seats_key
from reservations.domain import ReservationStatus
from reservations.domain.errors import DomainError, ErrorCode
from reservations.handlers.serializers import (
    ReservationCreateSerializer,
    ReservationSerializer,
    ReservationStatisticsSerializer,
    ScreeningCreateSerializer,
    ScreeningSerializer,
    ScreeningUpdateSerializer,
    SeatSerializer,
)
from reservations.services import ReservationService, ScreeningScheduler
from reservations.stores.django_store import (
    DjangoReservationStore,
    DjangoScreeningStore,
    DjangoUserDirectory,
)

STATUS_BY_CODE = {
    ErrorCode.INVALID_RESERVATION_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SCREENING_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SCREENING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.RESERVATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SEAT_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_RESERVATION_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.CANCELLATION_WINDOW_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.SCREENING_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_OVERFLOW: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def invalid_request_response(serializer: Serializer) -> Response:
    return Response(
        {
            "error": {
                "code": "INVALID_REQUEST",
                "message": "Invalid request body",
                "details": serializer.errors,
            }
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def reservation_service() -> ReservationService:
    return ReservationService(
        reservations=DjangoReservationStore(),
        screenings=DjangoScreeningStore(),
        users=DjangoUserDirectory(),
    )


def screening_scheduler() -> ScreeningScheduler:
    return ScreeningScheduler(DjangoScreeningStore())


class StaffWritesMixin:
    """Authenticated users may read; only staff may write."""

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [IsAuthenticated()]
        return [IsAdminUser()]


class ReservationCreateView(APIView):
    """Handler for POST /api/reservations"""

    def post(self, request: Request) -> Response:
        serializer = ReservationCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer)
        try:
            reservation = reservation_service().create_reservation(
                user_id=serializer.validated_data["user_id"],
                screening_id=serializer.validated_data["screening_id"],
                seats=serializer.seat_positions(),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(ReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)


class ReservationDetailView(APIView):
    """Handler for GET /api/reservations/{reservation_id}"""

    def get(self, request: Request, reservation_id: int) -> Response:
        try:
            reservation = reservation_service().get_reservation(reservation_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(ReservationSerializer(reservation).data)


class ReservationByCodeView(APIView):
    """Handler for GET /api/reservations/confirmation/{code}"""

    def get(self, request: Request, code: str) -> Response:
        try:
            reservation = reservation_service().find_by_confirmation_code(code)
        except DomainError as exc:
            return error_response(exc)
        return Response(ReservationSerializer(reservation).data)


class UserReservationListView(APIView):
    """Handler for GET /api/reservations/user/{user_id}"""

    def get(self, request: Request, user_id: int) -> Response:
        if not request.user.is_staff and request.user.pk != user_id:
            return Response(status=status.HTTP_403_FORBIDDEN)
        reservations = reservation_service().list_for_user(user_id)
        return Response(ReservationSerializer(reservations, many=True).data)


class ReservationConfirmView(APIView):
    """Handler for PUT /api/reservations/{reservation_id}/confirm"""

    permission_classes = [IsAdminUser]

    def put(self, request: Request, reservation_id: int) -> Response:
        try:
            reservation = reservation_service().confirm_reservation(reservation_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(ReservationSerializer(reservation).data)


class ReservationCancelView(APIView):
    """Handler for PUT /api/reservations/{reservation_id}/cancel"""

    def put(self, request: Request, reservation_id: int) -> Response:
        service = reservation_service()
        try:
            owner_id = service.get_reservation(reservation_id).user_id
            if not request.user.is_staff and request.user.pk != owner_id:
                return Response(status=status.HTTP_403_FORBIDDEN)
            reservation = service.cancel_reservation(reservation_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(ReservationSerializer(reservation).data)


class ReservationStatusListView(APIView):
    """Handler for GET /api/reservations/status/{status}"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, reservation_status: str) -> Response:
        try:
            wanted = ReservationStatus(reservation_status.upper())
        except ValueError:
            return Response(
                {
                    "error": {
                        "code": "INVALID_REQUEST",
                        "message": f"Unknown reservation status: {reservation_status}",
                    }
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        reservations = reservation_service().list_by_status(wanted)
        return Response(ReservationSerializer(reservations, many=True).data)


class ReservationStatisticsView(APIView):
    """Handler for GET /api/reservations/statistics"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        statistics = reservation_service().get_statistics()
        return Response(ReservationStatisticsSerializer(statistics).data)


class ScreeningListView(StaffWritesMixin, APIView):
    """Handler for GET/POST /api/screenings"""

    def get(self, request: Request) -> Response:
        screenings = screening_scheduler().list_upcoming()
        return Response(ScreeningSerializer(screenings, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = ScreeningCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer)
        try:
            screening = screening_scheduler().create_screening(serializer.to_draft())
        except DomainError as exc:
            return error_response(exc)
        return Response(ScreeningSerializer(screening).data, status=status.HTTP_201_CREATED)


class AvailableScreeningListView(APIView):
    """Handler for GET /api/screenings/available?min_seats=N"""

    def get(self, request: Request) -> Response:
        try:
            min_seats = max(int(request.query_params.get("min_seats", 1)), 1)
        except ValueError:
            return Response(
                {"error": {"code": "INVALID_REQUEST", "message": "min_seats must be an integer"}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        screenings = screening_scheduler().list_with_available_seats(min_seats)
        return Response(ScreeningSerializer(screenings, many=True).data)


class ScreeningDetailView(StaffWritesMixin, APIView):
    """Handler for GET/PUT/DELETE /api/screenings/{screening_id}"""

    def get(self, request: Request, screening_id: int) -> Response:
        key = screening_key(screening_id)
        data = cache.get(key)
        if data is None:
            try:
                screening = screening_scheduler().get_screening(screening_id)
            except DomainError as exc:
                return error_response(exc)
            data = ScreeningSerializer(screening).data
            cache.set(key, data, settings.SCREENING_CACHE_TIMEOUT)
        return Response(data)

    def put(self, request: Request, screening_id: int) -> Response:
        serializer = ScreeningUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer)
        try:
            screening = screening_scheduler().update_screening(
                screening_id, serializer.to_changes()
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(ScreeningSerializer(screening).data)

    def delete(self, request: Request, screening_id: int) -> Response:
        try:
            screening_scheduler().delete_screening(screening_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ScreeningReservationListView(APIView):
    """Handler for GET /api/screenings/{screening_id}/reservations"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, screening_id: int) -> Response:
        try:
            screening_scheduler().get_screening(screening_id)
        except DomainError as exc:
            return error_response(exc)
        reservations = reservation_service().list_for_screening(screening_id)
        return Response(ReservationSerializer(reservations, many=True).data)


class ScreeningSeatListView(APIView):
    """Handler for GET /api/screenings/{screening_id}/seats"""

    def get(self, request: Request, screening_id: int) -> Response:
        key = seats_key(screening_id)
        data = cache.get(key)
        if data is None:
            try:
                seats = reservation_service().occupied_seats(screening_id)
            except DomainError as exc:
                return error_response(exc)
            data = {
                "screening_id": screening_id,
                "occupied": SeatSerializer(seats, many=True).data,
            }
            cache.set(key, data, settings.SCREENING_CACHE_TIMEOUT)
        return Response(data)
