from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field, OpenApiTypes
from django.utils import timezone

from carcruise.listings.domain import status as booking_status
from carcruise.listings.domain.income import listing_of
from carcruise.listings.domain.pricing import PricingError, quote_booking
from carcruise.listings.domain.windows import window_end
from carcruise.listings.models import Booking
from carcruise.listings.serializers.common import (
    PriceBreakdownSerializer, PublicUserTinySerializer, tiny_user,
)
from carcruise.listings.validators import validate_time_of_day


class BookingRequestSerializer(serializers.Serializer):
    """
    Booking form payload. Fields may be omitted here: presence is checked by the
    booking rules so the renter gets a single "All fields are required." answer.
    """
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    mobile_number = serializers.CharField(required=False, allow_blank=True, max_length=30)
    pickup_date = serializers.DateField(
        required=False, allow_null=True,
        error_messages={"invalid": "Invalid date or format. Expected YYYY-MM-DD and a real calendar date."},
    )
    return_date = serializers.DateField(
        required=False, allow_null=True,
        error_messages={"invalid": "Invalid date or format. Expected YYYY-MM-DD and a real calendar date."},
    )
    pickup_time = serializers.CharField(
        required=False, allow_blank=True, max_length=5, validators=[validate_time_of_day],
    )
    return_time = serializers.CharField(
        required=False, allow_blank=True, max_length=5, validators=[validate_time_of_day],
    )


class BookingStatusSerializer(serializers.Serializer):
    # Any string is accepted here; unknown values are refused by the transition rules
    status = serializers.CharField(max_length=20)


class BookingSerializer(serializers.ModelSerializer):
    """Read projection of a booking with derived, never-stored state."""
    listing_id = serializers.IntegerField(read_only=True)
    listing_title = serializers.SerializerMethodField()

    renter = serializers.SerializerMethodField()
    owner = serializers.SerializerMethodField()

    display_status = serializers.SerializerMethodField()
    is_approved_locked = serializers.SerializerMethodField()
    end_at = serializers.SerializerMethodField()
    pricing = serializers.SerializerMethodField()

    can_cancel = serializers.SerializerMethodField()
    can_approve = serializers.SerializerMethodField()
    can_reject = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = (
            "id",
            "listing_id", "listing_title",
            "renter", "owner",
            "full_name", "mobile_number",
            "pickup_date", "pickup_time",
            "return_date", "return_time",
            "status", "display_status", "is_approved_locked", "end_at",
            "pricing", "created_at",
            "can_cancel", "can_approve", "can_reject",
        )
        read_only_fields = fields

    def _now(self):
        return self.context.get("now") or timezone.now()

    def _user_id(self):
        request = self.context.get("request")
        return getattr(getattr(request, "user", None), "id", None)

    @extend_schema_field(OpenApiTypes.STR)
    def get_listing_title(self, obj):
        listing = listing_of(obj)
        return listing.title if listing else None

    @extend_schema_field(PublicUserTinySerializer)
    def get_renter(self, obj):
        return tiny_user(obj.user)

    @extend_schema_field(PublicUserTinySerializer)
    def get_owner(self, obj):
        return tiny_user(obj.owner)

    @extend_schema_field(OpenApiTypes.STR)
    def get_display_status(self, obj):
        return booking_status.display_status(obj, self._now())

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_is_approved_locked(self, obj):
        return booking_status.is_approved_locked(obj, self._now())

    @extend_schema_field(OpenApiTypes.DATETIME)
    def get_end_at(self, obj):
        end = window_end(obj)
        return end.isoformat() if end else None

    @extend_schema_field(PriceBreakdownSerializer(allow_null=True))
    def get_pricing(self, obj):
        listing = listing_of(obj)
        if listing is None or listing.price is None:
            return None
        try:
            breakdown = quote_booking(obj, listing.price)
        except PricingError:
            return None
        return PriceBreakdownSerializer(breakdown.as_dict()).data

    # Action flags based on the requester's role and status
    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_cancel(self, obj):
        return obj.user_id == self._user_id() and obj.status == Booking.Status.PENDING

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_approve(self, obj):
        return obj.owner_id == self._user_id() and obj.status == Booking.Status.PENDING

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_reject(self, obj):
        return obj.owner_id == self._user_id() and obj.status == Booking.Status.PENDING
