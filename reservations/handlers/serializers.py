"""Serializers for parsing requests and transforming domain models to API responses."""

from rest_framework import serializers

from reservations.domain import ScreeningChanges, ScreeningDraft, SeatPosition


class SeatSerializer(serializers.Serializer):
    """Serializer for a SeatPosition, in both directions."""

    row_number = serializers.IntegerField(min_value=1)
    seat_number = serializers.IntegerField(min_value=1)
    label = serializers.CharField(read_only=True)


class ReservationCreateSerializer(serializers.Serializer):
    """Input for POST /api/reservations.

    Missing ids and seats are let through so the service reports them as
    invalid reservation data.
    """

    user_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    screening_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    seats = SeatSerializer(many=True, required=False, default=list)

    def seat_positions(self) -> list[SeatPosition]:
        return [
            SeatPosition(seat["row_number"], seat["seat_number"])
            for seat in self.validated_data["seats"]
        ]


class ReservationSerializer(serializers.Serializer):
    """Serializer for Reservation domain model."""

    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    screening_id = serializers.IntegerField()
    seats = SeatSerializer(many=True)
    total_price = serializers.DecimalField(
        source="total_price.amount", max_digits=10, decimal_places=2
    )
    status = serializers.CharField(source="status.value")
    confirmation_code = serializers.CharField(source="confirmation_code.value")
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class ReservationStatisticsSerializer(serializers.Serializer):
    """Serializer for ReservationStatistics domain model."""

    confirmed_today = serializers.IntegerField()
    monthly_revenue = serializers.DecimalField(
        source="monthly_revenue.amount", max_digits=12, decimal_places=2
    )
    weekly_reservations = serializers.IntegerField()


class ScreeningSerializer(serializers.Serializer):
    """Serializer for Screening domain model."""

    id = serializers.IntegerField()
    movie_id = serializers.IntegerField()
    hall_id = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    available_seats = serializers.IntegerField(source="available_seats.value")
    hall_capacity = serializers.IntegerField(source="hall_capacity.value")
    created_at = serializers.DateTimeField()


class ScreeningCreateSerializer(serializers.Serializer):
    """Input for POST /api/screenings; the scheduler validates values."""

    movie_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    hall_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    start_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    end_time = serializers.DateTimeField(required=False, allow_null=True, default=None)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, default=None
    )

    def to_draft(self) -> ScreeningDraft:
        return ScreeningDraft(**self.validated_data)


class ScreeningUpdateSerializer(serializers.Serializer):
    """Input for PUT /api/screenings/{id}."""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    hall_id = serializers.IntegerField(required=False, allow_null=True, default=None)

    def to_changes(self) -> ScreeningChanges:
        return ScreeningChanges(**self.validated_data)
