import logging

from rest_framework import mixins, viewsets, permissions
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes, OpenApiResponse
)

from ..models import Review
from ..serializers import ReviewSerializer
from ..permissions import IsReviewAuthorOrAdmin
from ..throttling import ScopedRateThrottleIsolated

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List reviews",
        description="Get list of reviews, optionally for one listing",
        parameters=[
            OpenApiParameter("listing", OpenApiTypes.INT, description="Filter by listing ID"),
        ],
        responses={200: ReviewSerializer},
    ),
    create=extend_schema(
        summary="Create review",
        description="Review a listing (authenticated users only)",
        request=ReviewSerializer,
        responses={
            201: ReviewSerializer,
            400: OpenApiResponse(description="Validation error"),
            401: OpenApiResponse(description="Authentication required"),
        }
    ),
    retrieve=extend_schema(
        summary="Get review details",
        responses={
            200: ReviewSerializer,
            404: OpenApiResponse(description="Review not found"),
        }
    ),
    destroy=extend_schema(
        summary="Delete review",
        description="Delete a review (author or admin only)",
        responses={
            204: OpenApiResponse(description="Review deleted"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Review not found"),
        }
    ),
)
class ReviewViewSet(mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    mixins.CreateModelMixin,
                    mixins.DestroyModelMixin,
                    viewsets.GenericViewSet):
    """
    Reviews of listings. Anyone reads, authenticated users write,
    authors (or staff) delete.
    """
    serializer_class = ReviewSerializer
    permission_classes = (permissions.IsAuthenticatedOrReadOnly, IsReviewAuthorOrAdmin)
    throttle_classes = [ScopedRateThrottleIsolated]
    throttle_scope = 'reviews'
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        """Filter reviews based on query parameters."""
        queryset = Review.objects.select_related('author')

        listing_id = self.request.query_params.get('listing')
        if listing_id:
            try:
                queryset = queryset.filter(listing_id=int(listing_id))
            except (ValueError, TypeError):
                logger.warning("Invalid listing ID: %s", listing_id)
                return Review.objects.none()

        return queryset
