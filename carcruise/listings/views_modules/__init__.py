from .listing import ListingViewSet
from .booking import BookingViewSet
from .dashboard import DashboardView
from .review import ReviewViewSet
from .filters import ListingFilter

__all__ = [
    "ListingViewSet",
    "BookingViewSet",
    "DashboardView",
    "ReviewViewSet",
    "ListingFilter",
]
