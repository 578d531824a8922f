"""
Rental pricing: half-day billing units, 18% GST rounded to whole currency units.

All money values are Decimals. GST is rounded half-up to an integer because
the renter's booking list and the owner's dashboard must show identical totals.
"""
import re
from dataclasses import dataclass
from datetime import date, timedelta, timezone as dt_timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .windows import window_end, window_start

GST_RATE = Decimal("0.18")
HALF_DAY = timedelta(hours=12)
HALF = Decimal("0.5")
MIN_DATE_ONLY_DAYS = 1

_NON_NUMERIC = re.compile(r"[^0-9.]")


class PricingError(ValueError):
    """Raised when a booking cannot be priced (unparsable or non-finite amounts)."""


@dataclass(frozen=True)
class PriceBreakdown:
    rental_days: Decimal
    price_per_day: Decimal
    subtotal: Decimal
    gst_amount: Decimal
    total_amount: Decimal

    def as_dict(self):
        return {
            "rental_days": self.rental_days,
            "price_per_day": self.price_per_day,
            "subtotal": self.subtotal,
            "gst_amount": self.gst_amount,
            "total_amount": self.total_amount,
        }


def parse_price(raw):
    """
    Per-day price as a finite Decimal, or None.
    Strings are stripped of everything except digits and dots first ("₹1,500" -> 1500).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    else:
        cleaned = _NON_NUMERIC.sub("", str(raw))
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            return None
    return value if value.is_finite() else None


def _date_only_days(pickup_date, return_date):
    if isinstance(pickup_date, date) and isinstance(return_date, date) and return_date > pickup_date:
        return Decimal(max(MIN_DATE_ONLY_DAYS, (return_date - pickup_date).days))
    return Decimal(MIN_DATE_ONLY_DAYS)


def rental_days(start, end, pickup_date=None, return_date=None):
    """
    Billable days between two instants, rounded UP to the next half day
    (never less than half a day). Non-positive or indeterminate durations fall
    back to a whole-day count from the calendar dates, minimum one day.
    """
    if start is not None and end is not None:
        # elapsed time, not wall-clock difference, across DST changes
        duration = end.astimezone(dt_timezone.utc) - start.astimezone(dt_timezone.utc)
        if duration > timedelta(0):
            half_day_units = -(-duration // HALF_DAY)  # ceiling division on timedeltas
            return max(HALF, half_day_units * HALF)
    return _date_only_days(pickup_date, return_date)


def gst_for(subtotal):
    return (subtotal * GST_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def quote(price_per_day, start, end, pickup_date=None, return_date=None):
    """Full price breakdown; raises PricingError when the price cannot be used."""
    price = parse_price(price_per_day)
    if price is None:
        raise PricingError(f"Price {price_per_day!r} is not a number.")

    days = rental_days(start, end, pickup_date, return_date)
    subtotal = price * days
    if not subtotal.is_finite():
        raise PricingError("Subtotal is not finite.")
    gst = gst_for(subtotal)
    total = subtotal + gst
    if not total.is_finite():
        raise PricingError("Total is not finite.")

    return PriceBreakdown(
        rental_days=days,
        price_per_day=price,
        subtotal=subtotal,
        gst_amount=gst,
        total_amount=total,
    )


def quote_booking(booking, price_per_day):
    """Price a booking over its own pickup/return window."""
    return quote(
        price_per_day,
        window_start(booking),
        window_end(booking),
        booking.pickup_date,
        booking.return_date,
    )
