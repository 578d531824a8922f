from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views_modules import ListingViewSet, BookingViewSet, ReviewViewSet, DashboardView

app_name = "listings"

router = DefaultRouter()
router.register(r"listings", ListingViewSet, basename="listing")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"reviews", ReviewViewSet, basename="review")

urlpatterns = [
    path("", include(router.urls)),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
]
