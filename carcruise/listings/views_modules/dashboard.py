from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .. import services
from ..serializers import DashboardSerializer
from ..throttling import ScopedRateThrottleIsolated


class DashboardView(APIView):
    """Owner dashboard: listings, incoming requests and approved income."""
    permission_classes = (permissions.IsAuthenticated,)
    throttle_classes = [ScopedRateThrottleIsolated]
    throttle_scope = 'dashboard'

    @extend_schema(
        summary="Owner dashboard",
        description="Own listings, booking requests received and total income from approved bookings "
                    "(GST included). Bookings pointing at deleted listings are purged first.",
        responses={
            200: DashboardSerializer,
            401: OpenApiResponse(description="Authentication required"),
        }
    )
    def get(self, request):
        data = services.owner_dashboard(request.user)
        context = {"request": request, "now": timezone.now()}
        return Response(DashboardSerializer(data, context=context).data)
