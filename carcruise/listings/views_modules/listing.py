import logging

from django.db import transaction
from django.utils import timezone
from django_filters import rest_framework as df
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)
from rest_framework import viewsets, permissions, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response

from .. import services
from ..serializers import (
    ListingSerializer, ListingDetailSerializer, BookingSerializer, BookingRequestSerializer,
)
from ..permissions import IsListingOwnerOrReadOnly
from ..pagination import ListingPagination
from ..throttling import ScopedRateThrottleIsolated
from .errors import domain_errors
from .filters import ListingFilter

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List listings",
        description="Get paginated list of car listings with filtering and search",
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, description="Matches title, location or country"),
            OpenApiParameter("tags", OpenApiTypes.STR, many=True, description="Tag; repeat to require several"),
            OpenApiParameter("price_min", OpenApiTypes.NUMBER, description="Minimum price per day"),
            OpenApiParameter("price_max", OpenApiTypes.NUMBER, description="Maximum price per day"),
            OpenApiParameter("mine", OpenApiTypes.BOOL, description="Only my listings"),
        ],
        responses={
            200: ListingSerializer,
            400: OpenApiResponse(description="Invalid filter parameters"),
        }
    ),
    create=extend_schema(
        summary="Create listing",
        description="Create a new listing with an image (authenticated users only). "
                    "Coordinates come from the map pin or are geocoded from location/country.",
        responses={
            201: ListingSerializer,
            400: OpenApiResponse(description="Validation error"),
            401: OpenApiResponse(description="Authentication required"),
        }
    ),
    retrieve=extend_schema(
        summary="Get listing details",
        description="Listing with reviews and the requester's booking state",
        responses={
            200: ListingDetailSerializer,
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    update=extend_schema(
        summary="Update listing",
        description="Update an existing listing (owner only)",
        responses={
            200: ListingSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    partial_update=extend_schema(
        summary="Partial update listing",
        description="Partially update an existing listing (owner only)",
        responses={
            200: ListingSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    destroy=extend_schema(
        summary="Delete listing",
        description="Delete a listing together with its bookings and reviews (owner only)",
        responses={
            200: OpenApiResponse(
                description="Listing deleted",
                examples=[
                    OpenApiExample(
                        "Example response",
                        value={"detail": "Listing deleted.", "deleted_bookings": 3, "deleted_reviews": 1},
                    )
                ]
            ),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
)
class ListingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for car listings.

    CRUD with filtering and pagination, plus the booking request endpoint.
    """
    serializer_class = ListingSerializer
    permission_classes = (permissions.IsAuthenticatedOrReadOnly, IsListingOwnerOrReadOnly)
    pagination_class = ListingPagination
    filter_backends = (df.DjangoFilterBackend, filters.OrderingFilter)
    filterset_class = ListingFilter
    ordering_fields = ['price', 'created_at', 'average_rating']
    ordering = ['-created_at']
    throttle_classes = [ScopedRateThrottleIsolated]
    throttle_scope = 'listings'
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return services.listings_with_ratings()

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ListingDetailSerializer
        return ListingSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["now"] = timezone.now()
        return context

    def perform_create(self, serializer):
        """Set the owner to the current user."""
        listing = serializer.save(owner=self.request.user)
        logger.info("Listing %s created by user %s", listing.pk, self.request.user.pk)

    def destroy(self, request, *args, **kwargs):
        listing = self.get_object()
        deleted = services.delete_listing(listing)
        return Response(
            {
                "detail": "Listing deleted.",
                "deleted_bookings": deleted["bookings"],
                "deleted_reviews": deleted["reviews"],
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Request a booking",
        description="Send a booking request for this listing to its owner",
        request=BookingRequestSerializer,
        responses={
            201: OpenApiResponse(
                description="Booking request created",
                examples=[
                    OpenApiExample(
                        "Example response",
                        value={
                            "detail": "Booking request sent to the owner.",
                            "booking": {"id": 7, "listing_id": 3, "status": "pending"},
                        }
                    )
                ]
            ),
            400: OpenApiResponse(description="Booking refused"),
            401: OpenApiResponse(description="Authentication required"),
            404: OpenApiResponse(description="Listing not found"),
        }
    )
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated],
            throttle_classes=[ScopedRateThrottleIsolated], throttle_scope='bookings')
    def book(self, request, pk=None):
        """Create a pending booking request."""
        payload = BookingRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        # The row is only committed once the response payload has been built
        with transaction.atomic(), domain_errors():
            booking = services.create_booking(pk, request.user, payload.validated_data)
            data = BookingSerializer(booking, context=self.get_serializer_context()).data
        return Response(
            {"detail": "Booking request sent to the owner.", "booking": data},
            status=status.HTTP_201_CREATED,
        )
