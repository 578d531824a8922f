from .listing import Listing
from .booking import Booking
from .review import Review

__all__ = [
    "Listing",
    "Booking",
    "Review",
]
