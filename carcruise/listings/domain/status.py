"""
Booking status transitions requested by a listing owner.

pending -> approved and pending -> rejected are the only live transitions.
Once a booking leaves pending it keeps that value.
"""
from django.core.exceptions import ValidationError

from .windows import has_ended, window_end

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
# display-only: an approved booking whose return window has passed
COMPLETED = "completed"

STATUSES = (PENDING, APPROVED, REJECTED)
DISPLAY_STATUSES = (PENDING, APPROVED, REJECTED, COMPLETED)

MSG_INVALID = "Invalid status value. Must be one of: pending, approved, rejected"
MSG_LOCKED = "You can update status only one time."
MSG_NO_PENDING = "Setting status back to pending is not allowed. Choose Approved or Rejected."


def apply_transition(current, target):
    """
    Validate an owner's status change and return True when the stored status must change.
    Returns False for a no-op (target equals current). Raises ValidationError otherwise.
    """
    if target not in STATUSES:
        raise ValidationError(MSG_INVALID, code="invalid_status")
    if current == APPROVED and target != APPROVED:
        raise ValidationError(MSG_LOCKED, code="status_locked")
    if target == PENDING:
        raise ValidationError(MSG_NO_PENDING, code="pending_not_allowed")
    if current == target:
        return False
    if current != PENDING:
        raise ValidationError(MSG_LOCKED, code="status_locked")
    return True


def display_status(booking, now):
    """Approved bookings whose return window has passed read as "completed"."""
    if booking.status == APPROVED and has_ended(booking, now):
        return COMPLETED
    return booking.status


def is_approved_locked(booking, now):
    end = window_end(booking)
    return booking.status == APPROVED and end is not None and now < end
