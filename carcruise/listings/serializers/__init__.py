from .listing import ListingSerializer, ListingDetailSerializer
from .booking import BookingSerializer, BookingRequestSerializer, BookingStatusSerializer
from .review import ReviewSerializer
from .dashboard import DashboardSerializer, MyBookingsSerializer
from .common import PublicUserTinySerializer, ReviewShortSerializer, PriceBreakdownSerializer

__all__ = [
    "PublicUserTinySerializer",
    "ListingSerializer",
    "ListingDetailSerializer",
    "BookingSerializer",
    "BookingRequestSerializer",
    "BookingStatusSerializer",
    "ReviewSerializer",
    "ReviewShortSerializer",
    "PriceBreakdownSerializer",
    "DashboardSerializer",
    "MyBookingsSerializer",
]
