import logging

from django.db.models import Q
from django.utils import timezone
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)
from rest_framework import mixins, viewsets, permissions
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from .. import services
from ..domain import status as booking_status
from ..models import Booking
from ..serializers import BookingSerializer, BookingStatusSerializer, MyBookingsSerializer
from ..permissions import IsBookingRenterOrOwner
from ..throttling import ScopedRateThrottleIsolated
from .errors import domain_errors

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "Booking not found or unauthorized"

STATUS_RESPONSES = {
    200: OpenApiResponse(
        description="Status processed",
        examples=[
            OpenApiExample(
                "Example response",
                value={"detail": "Booking approved.", "status": "approved", "changed": True},
            )
        ]
    ),
    400: OpenApiResponse(description="Transition not allowed"),
    404: OpenApiResponse(description=MSG_NOT_FOUND),
}


@extend_schema_view(
    list=extend_schema(
        summary="My bookings",
        description="The requester's bookings as renter, newest first, with display status and pricing",
        parameters=[
            OpenApiParameter(
                "status", OpenApiTypes.STR,
                description="all | pending | approved | rejected | completed (unknown values mean all)",
            ),
        ],
        responses={200: MyBookingsSerializer},
    ),
    retrieve=extend_schema(
        summary="Get booking details",
        description="Booking visible to its renter or the listing owner",
        responses={
            200: BookingSerializer,
            404: OpenApiResponse(description="Booking not found"),
        }
    ),
)
class BookingViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Bookings seen from both sides.

    Renters list and cancel their own requests; listing owners approve or reject
    the requests they received.
    """
    serializer_class = BookingSerializer
    permission_classes = (permissions.IsAuthenticated, IsBookingRenterOrOwner)
    throttle_classes = [ScopedRateThrottleIsolated]
    throttle_scope = 'bookings'
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        user = self.request.user
        return Booking.objects.filter(
            Q(user=user) | Q(owner=user)
        ).select_related('listing', 'user', 'owner')

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["now"] = timezone.now()
        return context

    def list(self, request, *args, **kwargs):
        context = self.get_serializer_context()
        result = services.renter_bookings(
            request.user,
            request.query_params.get("status", "all"),
            now=context["now"],
        )
        return Response(MyBookingsSerializer(result, context=context).data)

    def _owned_booking(self, pk):
        """Booking received by the requester as listing owner; 404 for anything else."""
        booking = Booking.objects.filter(pk=pk, owner=self.request.user).first()
        if booking is None:
            raise NotFound(MSG_NOT_FOUND)
        self.check_object_permissions(self.request, booking)
        return booking

    def _set_status(self, pk, target):
        booking = self._owned_booking(pk)
        with domain_errors():
            changed = services.update_booking_status(booking, target)
        detail = f"Booking {target}." if changed else f"Booking is already {target}."
        return Response({"detail": detail, "status": booking.status, "changed": changed})

    @extend_schema(
        summary="Update booking status",
        description="Approve or reject a pending booking (listing owner only). Decisions are final.",
        request=BookingStatusSerializer,
        responses=STATUS_RESPONSES,
    )
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        payload = BookingStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        return self._set_status(pk, payload.validated_data["status"])

    @extend_schema(
        summary="Approve booking",
        description="Shortcut for status=approved",
        request=None,
        responses=STATUS_RESPONSES,
    )
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return self._set_status(pk, booking_status.APPROVED)

    @extend_schema(
        summary="Reject booking",
        description="Shortcut for status=rejected",
        request=None,
        responses=STATUS_RESPONSES,
    )
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        return self._set_status(pk, booking_status.REJECTED)

    @extend_schema(
        summary="Cancel booking",
        description="Withdraw a pending request (renter only). The booking is removed.",
        request=None,
        responses={
            200: OpenApiResponse(description="Booking cancelled"),
            400: OpenApiResponse(description="Only pending bookings can be cancelled"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Booking not found"),
        }
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        booking = self.get_object()
        with domain_errors():
            services.cancel_booking(booking, request.user)
        return Response({"detail": "Booking cancelled."})
