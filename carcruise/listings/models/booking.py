from django.db import models
from django.conf import settings

from carcruise.listings.domain import status as booking_status
from carcruise.listings.models.listing import Listing


class BookingQuerySet(models.QuerySet):
    def orphaned(self):
        """Bookings whose listing row no longer exists."""
        return self.exclude(listing_id__in=Listing.objects.values('pk'))

    def for_listing_user(self, listing_id, user_id):
        return self.filter(listing_id=listing_id, user_id=user_id).order_by('-created_at', '-pk')


class Booking(models.Model):
    """Booking request from a renter for a listing."""
    class Status(models.TextChoices):
        PENDING = booking_status.PENDING, 'Pending'
        APPROVED = booking_status.APPROVED, 'Approved'
        REJECTED = booking_status.REJECTED, 'Rejected'

    # No DB-level cascade: listing deletion removes bookings explicitly,
    # and a dangling reference is detected and purged on read.
    listing = models.ForeignKey(
        Listing,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='bookings',
    )
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    # Copy of listing.owner at booking time
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='booking_requests')

    full_name = models.CharField(max_length=150)
    mobile_number = models.CharField(max_length=30)
    pickup_date = models.DateField()
    return_date = models.DateField()
    pickup_time = models.CharField(max_length=5)  # "HH:MM"
    return_time = models.CharField(max_length=5)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['listing', 'user', 'status'], name='booking_listing_user_idx'),
            models.Index(fields=['owner', 'status'], name='booking_owner_status_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['listing', 'user'],
                condition=models.Q(status='pending'),
                name='booking_one_pending_per_user',
            ),
        ]

    def __str__(self):
        return f"{self.user} → listing {self.listing_id} [{self.status}]"
