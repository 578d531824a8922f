"""
Read-modify-write steps around the booking rules in `domain`.

Views call these; they own querying, saving and deleting. Rule violations are
raised as django.core.exceptions.ValidationError / PermissionDenied and turned
into HTTP responses by the API layer.
"""
import logging
from collections import Counter

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count
from django.shortcuts import get_object_or_404
from django.utils import timezone

from .domain import eligibility
from .domain import status as booking_status
from .domain.income import aggregate_income
from .models import Booking, Listing, Review

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all",) + booking_status.DISPLAY_STATUSES

MSG_ONLY_PENDING_CANCEL = "Only pending bookings can be cancelled."
MSG_NOT_YOUR_BOOKING = "You are not authorized to cancel this booking."


# -------------------------
# Eligibility
# -------------------------
def booking_history(listing_id, user_id, now=None):
    """Classified history of one user's bookings for one listing."""
    now = now or timezone.now()
    bookings = Booking.objects.for_listing_user(listing_id, user_id)
    return eligibility.classify(bookings, now)


def listing_booking_state(listing, user, now=None):
    """What the listing page shows the requester: blocking booking + rebook flag."""
    if user is None or not user.is_authenticated:
        return None
    return booking_history(listing.pk, user.pk, now)


# -------------------------
# Booking lifecycle
# -------------------------
def create_booking(listing_id, user, fields, now=None):
    """
    Validate a booking request and store it as pending.
    `fields` holds full_name, mobile_number, pickup/return dates and times.
    Field and date rules are checked before the listing is looked up.
    """
    now = now or timezone.now()
    eligibility.validate_request_fields(fields, timezone.localdate(now))
    listing = get_object_or_404(Listing, pk=listing_id)
    eligibility.ensure_not_own_listing(listing.owner_id, user.pk)
    eligibility.ensure_history_allows_booking(booking_history(listing.pk, user.pk, now))

    try:
        with transaction.atomic():
            booking = Booking.objects.create(
                listing=listing,
                user=user,
                owner_id=listing.owner_id,
                full_name=fields["full_name"].strip(),
                mobile_number=fields["mobile_number"].strip(),
                pickup_date=fields["pickup_date"],
                return_date=fields["return_date"],
                pickup_time=fields["pickup_time"],
                return_time=fields["return_time"],
                status=Booking.Status.PENDING,
            )
    except IntegrityError:
        # Lost the race against a parallel request for the single pending slot
        raise ValidationError(eligibility.MSG_PENDING_EXISTS, code="pending_exists")

    logger.info("Booking %s created for listing %s by user %s", booking.pk, listing.pk, user.pk)
    return booking


def update_booking_status(booking, target):
    """Apply an owner's status change. Returns True if the stored status changed."""
    changed = booking_status.apply_transition(booking.status, target)
    if changed:
        previous = booking.status
        booking.status = target
        booking.save(update_fields=["status"])
        logger.info("Booking %s status %s -> %s", booking.pk, previous, target)
    return changed


def cancel_booking(booking, user):
    """A renter withdraws a pending request; the row is deleted."""
    if booking.user_id != user.pk:
        raise PermissionDenied(MSG_NOT_YOUR_BOOKING)
    if booking.status != Booking.Status.PENDING:
        raise ValidationError(MSG_ONLY_PENDING_CANCEL, code="not_pending")
    booking_id = booking.pk
    booking.delete()
    logger.info("Booking %s cancelled by user %s", booking_id, user.pk)


# -------------------------
# Listing removal and data repair
# -------------------------
@transaction.atomic
def delete_listing(listing):
    """Delete a listing together with its reviews and bookings."""
    listing_id = listing.pk
    reviews_deleted, _ = Review.objects.filter(listing_id=listing_id).delete()
    bookings_deleted, _ = Booking.objects.filter(listing_id=listing_id).delete()
    listing.delete()
    logger.info(
        "Deleted listing %s with %d booking(s) and %d review(s)",
        listing_id, bookings_deleted, reviews_deleted,
    )
    return {"bookings": bookings_deleted, "reviews": reviews_deleted}


def purge_orphaned_bookings(queryset):
    """Delete bookings in `queryset` whose listing is gone. Returns how many were removed."""
    orphan_ids = list(queryset.orphaned().values_list("pk", flat=True))
    if not orphan_ids:
        return 0
    deleted, _ = Booking.objects.filter(pk__in=orphan_ids).delete()
    logger.warning("Found %d orphaned booking(s), cleaned up: %s", deleted, orphan_ids)
    return deleted


# -------------------------
# Read models
# -------------------------
def owner_dashboard(owner):
    """Listings, incoming booking requests and income for one owner."""
    requests_qs = Booking.objects.filter(owner=owner)
    purge_orphaned_bookings(requests_qs)

    bookings = list(requests_qs.select_related("listing", "user").order_by("-created_at"))
    income = aggregate_income(bookings)
    approved = [b for b in bookings if b.status == Booking.Status.APPROVED]

    return {
        "listings": listings_with_ratings(Listing.objects.filter(owner=owner)),
        "booking_requests": bookings,
        "total_income": income.total,
        "total_bookings": len(bookings),
        "approved_bookings": len(approved),
        "skipped_bookings": income.skipped,
    }


def renter_bookings(user, status_filter="all", now=None):
    """A renter's own bookings, filterable by display status (incl. "completed")."""
    now = now or timezone.now()
    own_qs = Booking.objects.filter(user=user)
    purge_orphaned_bookings(own_qs)

    bookings = list(own_qs.select_related("listing", "owner").order_by("-created_at"))
    display = {b.pk: booking_status.display_status(b, now) for b in bookings}

    counts = Counter(display.values())
    status_counts = dict(counts)
    status_counts["all"] = len(bookings)

    selected = (status_filter or "all").lower()
    if selected not in STATUS_FILTERS:
        selected = "all"
    if selected != "all":
        bookings = [b for b in bookings if display[b.pk] == selected]

    return {
        "bookings": bookings,
        "selected_status": selected,
        "status_counts": status_counts,
    }


def listings_with_ratings(queryset=None):
    """Listings annotated with average_rating and reviews_count."""
    queryset = Listing.objects.all() if queryset is None else queryset
    return queryset.select_related("owner").annotate(
        average_rating=Avg("reviews__rating"),
        reviews_count=Count("reviews"),
    )
