from rest_framework import serializers

from .booking import BookingSerializer
from .listing import ListingSerializer


class DashboardSerializer(serializers.Serializer):
    """Owner overview: own listings, incoming requests and approved income."""
    listings = ListingSerializer(many=True, read_only=True)
    booking_requests = BookingSerializer(many=True, read_only=True)
    total_income = serializers.DecimalField(max_digits=None, decimal_places=2, coerce_to_string=True)
    total_bookings = serializers.IntegerField()
    approved_bookings = serializers.IntegerField()
    skipped_bookings = serializers.ListField(child=serializers.IntegerField())


class MyBookingsSerializer(serializers.Serializer):
    """A renter's bookings filtered by display status."""
    bookings = BookingSerializer(many=True, read_only=True)
    selected_status = serializers.CharField()
    status_counts = serializers.DictField(child=serializers.IntegerField())
