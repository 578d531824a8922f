import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from carcruise.listings import geocoding, services
from carcruise.listings.models import Listing, Review
from carcruise.listings.models.listing import max_tags
from carcruise.listings.validators import validate_image_file
from .booking import BookingSerializer
from .common import ReviewShortSerializer

logger = logging.getLogger(__name__)

MSG_NEED_PLACE = "Please provide location or country."
MSG_PLACE_NOT_FOUND = "Location not found."
MSG_GEOCODER_DOWN = "Location lookup failed, please set the map pin."


def _review_rows(queryset):
    return [
        {
            "id": r.id,
            "rating": r.rating,
            "comment": r.comment,
            "author": {"id": r.author_id, "email": getattr(r.author, "email", None)},
            "created_at": r.created_at,
        }
        for r in queryset
    ]


class ListingSerializer(serializers.ModelSerializer):
    owner = serializers.StringRelatedField(read_only=True)
    owner_id = serializers.IntegerField(read_only=True)
    image = serializers.ImageField(required=False, allow_null=True)
    tags = serializers.ListField(
        child=serializers.ChoiceField(choices=Listing.Tag.choices),
        required=False,
    )
    geometry = serializers.JSONField(read_only=True)
    average_rating = serializers.FloatField(read_only=True)
    reviews_count = serializers.IntegerField(read_only=True)
    recent_reviews = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Listing
        fields = [
            "id", "title", "description", "image",
            "price", "location", "country", "tags",
            "latitude", "longitude", "geometry",
            "owner", "owner_id",
            "created_at", "updated_at",
            "average_rating", "reviews_count",
            "recent_reviews",
        ]
        read_only_fields = [
            "id", "owner", "owner_id", "geometry",
            "created_at", "updated_at",
            "average_rating", "reviews_count",
            "recent_reviews",
        ]

    @extend_schema_field(ReviewShortSerializer(many=True))
    def get_recent_reviews(self, obj):
        """
        Return last 3 reviews with rating/comment and author email.
        """
        qs = (Review.objects
              .filter(listing=obj)
              .select_related("author")
              .order_by("-created_at")[:3])
        return _review_rows(qs)

    def validate_image(self, value):
        if value is None:
            return value
        try:
            validate_image_file(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return value

    def validate_tags(self, value):
        # Extra tags are dropped, not rejected
        return list(value)[:max_tags()]

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Price must be >= 0.")
        return value

    def validate_latitude(self, value):
        if value is not None and not (-90 <= value <= 90):
            raise serializers.ValidationError("Latitude must be between -90 and 90.")
        return value

    def validate_longitude(self, value):
        if value is not None and not (-180 <= value <= 180):
            raise serializers.ValidationError("Longitude must be between -180 and 180.")
        return value

    def validate(self, attrs):
        """
        On create: image is mandatory; coordinates come from the map pin or,
        when the pin is missing, from geocoding "location, country".
        On update: a new place without a pin is re-geocoded on a best-effort basis.
        """
        creating = self.instance is None
        if creating and not attrs.get("image"):
            raise serializers.ValidationError({"image": "Please upload an image of the car."})

        lat = attrs.get("latitude")
        lon = attrs.get("longitude")
        if lat is not None and lon is not None:
            return attrs

        if creating:
            query = geocoding.build_query(attrs.get("location"), attrs.get("country"))
            if not query:
                raise serializers.ValidationError({"detail": MSG_NEED_PLACE})
            try:
                point = geocoding.geocode(query)
            except geocoding.GeocodingError:
                raise serializers.ValidationError({"detail": MSG_GEOCODER_DOWN})
            if point is None:
                raise serializers.ValidationError({"detail": MSG_PLACE_NOT_FOUND})
            attrs["latitude"], attrs["longitude"] = point
            return attrs

        if "location" in attrs or "country" in attrs:
            query = geocoding.build_query(
                attrs.get("location", self.instance.location),
                attrs.get("country", self.instance.country),
            )
            point = None
            if query:
                try:
                    point = geocoding.geocode(query)
                except geocoding.GeocodingError:
                    logger.warning("Keeping coordinates of listing %s, geocoder unavailable", self.instance.pk)
            if point is not None:
                attrs["latitude"], attrs["longitude"] = point
        return attrs


class ListingDetailSerializer(ListingSerializer):
    """Listing page: every review plus the requester's booking state."""
    reviews = serializers.SerializerMethodField(read_only=True)
    booking_state = serializers.SerializerMethodField(read_only=True)

    class Meta(ListingSerializer.Meta):
        fields = ListingSerializer.Meta.fields + ["reviews", "booking_state"]
        read_only_fields = ListingSerializer.Meta.read_only_fields + ["reviews", "booking_state"]

    @extend_schema_field(ReviewShortSerializer(many=True))
    def get_reviews(self, obj):
        qs = Review.objects.filter(listing=obj).select_related("author").order_by("-created_at")
        return _review_rows(qs)

    @extend_schema_field(serializers.DictField())
    def get_booking_state(self, obj):
        request = self.context.get("request")
        history = services.listing_booking_state(obj, getattr(request, "user", None))
        if history is None:
            return {"user_booking": None, "can_rebook": False}
        booking = history.user_booking
        return {
            "user_booking": BookingSerializer(booking, context=self.context).data if booking else None,
            "can_rebook": history.can_rebook,
        }
