"""
Who may book a listing, and what the listing page shows about a user's own history.

Both the booking-creation gate and the listing detail page read the same
`BookingHistory`, built once per (listing, user) pair from bookings ordered
newest first.
"""
from dataclasses import dataclass
from typing import Any, Optional

from django.core.exceptions import ValidationError

from .status import APPROVED, PENDING, REJECTED
from .windows import has_ended

MSG_MISSING_FIELDS = "All fields are required."
MSG_PICKUP_IN_PAST = "Pickup date cannot be in the past."
MSG_RETURN_BEFORE_PICKUP = "Return date must be after pickup date."
MSG_OWN_LISTING = "You cannot book your own listing."
MSG_PENDING_EXISTS = "You already have a pending request for this listing."
MSG_ACTIVE_EXISTS = "You already have an active approved booking for this listing."
MSG_PREVIOUSLY_REJECTED = (
    "Your previous booking request for this listing was rejected. You cannot book it again."
)

REQUIRED_FIELDS = (
    "full_name", "pickup_date", "return_date",
    "pickup_time", "return_time", "mobile_number",
)


@dataclass(frozen=True)
class BookingHistory:
    pending: Optional[Any] = None
    approved_ongoing: Optional[Any] = None
    latest_rejected: Optional[Any] = None
    has_approved_completed: bool = False

    @property
    def has_pending(self):
        return self.pending is not None

    @property
    def has_approved_ongoing(self):
        return self.approved_ongoing is not None

    @property
    def has_rejected(self):
        return self.latest_rejected is not None

    @property
    def user_booking(self):
        """The booking that currently blocks the user, as shown on the listing page."""
        if self.pending is not None:
            return self.pending
        if self.approved_ongoing is not None:
            return self.approved_ongoing
        if self.latest_rejected is not None and not self.has_approved_completed:
            return self.latest_rejected
        return None

    @property
    def can_rebook(self):
        return self.has_approved_completed and not self.has_pending and not self.has_approved_ongoing

    def refusal(self):
        """(code, message) explaining why a new booking is refused, or None when allowed."""
        if self.has_pending:
            return "pending_exists", MSG_PENDING_EXISTS
        if self.has_approved_ongoing:
            return "active_exists", MSG_ACTIVE_EXISTS
        if self.has_rejected and not self.has_approved_completed:
            return "previously_rejected", MSG_PREVIOUSLY_REJECTED
        return None

    @property
    def allows_booking(self):
        return self.refusal() is None


def classify(bookings, now):
    """Fold a user's bookings for one listing (newest first) into a BookingHistory."""
    pending = approved_ongoing = latest_rejected = None
    approved_completed = False

    for booking in bookings:
        if booking.status == PENDING:
            if pending is None:
                pending = booking
        elif booking.status == APPROVED:
            if has_ended(booking, now):
                approved_completed = True
            elif approved_ongoing is None:
                approved_ongoing = booking
        elif booking.status == REJECTED:
            if latest_rejected is None:
                latest_rejected = booking

    return BookingHistory(
        pending=pending,
        approved_ongoing=approved_ongoing,
        latest_rejected=latest_rejected,
        has_approved_completed=approved_completed,
    )


def ensure_history_allows_booking(history):
    refusal = history.refusal()
    if refusal is not None:
        code, message = refusal
        raise ValidationError(message, code=code)


def ensure_not_own_listing(listing_owner_id, user_id):
    if listing_owner_id is not None and listing_owner_id == user_id:
        raise ValidationError(MSG_OWN_LISTING, code="own_listing")


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def validate_request_fields(fields, today):
    """
    Presence of every required field, then the date rules:
    pickup not before today, return strictly after pickup (dates only, times ignored).
    """
    if any(_is_blank(fields.get(name)) for name in REQUIRED_FIELDS):
        raise ValidationError(MSG_MISSING_FIELDS, code="missing_fields")

    pickup_date = fields["pickup_date"]
    return_date = fields["return_date"]
    if pickup_date < today:
        raise ValidationError(MSG_PICKUP_IN_PAST, code="pickup_in_past")
    if return_date <= pickup_date:
        raise ValidationError(MSG_RETURN_BEFORE_PICKUP, code="return_before_pickup")
