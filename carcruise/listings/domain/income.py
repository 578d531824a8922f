"""Owner income: sum of GST-inclusive totals over approved bookings."""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ObjectDoesNotExist

from .pricing import PricingError, quote_booking
from .status import APPROVED

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass
class IncomeSummary:
    total: Decimal = Decimal("0.00")
    counted: list = field(default_factory=list)
    skipped: list = field(default_factory=list)


def listing_of(booking):
    """The booking's listing, or None when the reference dangles."""
    try:
        return booking.listing
    except ObjectDoesNotExist:
        return None


def aggregate_income(bookings):
    """
    Fold approved bookings into a total rounded to cents.
    Bookings whose price cannot be parsed are skipped and reported, never fatal.
    """
    total = Decimal(0)
    summary = IncomeSummary()

    for booking in bookings:
        if booking.status != APPROVED:
            continue
        listing = listing_of(booking)
        if listing is None or not listing.price:
            continue
        try:
            breakdown = quote_booking(booking, listing.price)
        except PricingError as exc:
            logger.warning("Skipping booking %s in income total: %s", booking.pk, exc)
            summary.skipped.append(booking.pk)
            continue
        total += breakdown.total_amount
        summary.counted.append(booking.pk)

    if not total.is_finite():
        total = Decimal(0)
    summary.total = total.quantize(CENT, rounding=ROUND_HALF_UP)
    return summary
