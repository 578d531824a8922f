from django.db import models
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator


class Review(models.Model):
    # Removed together with the listing by services.delete_listing
    listing = models.ForeignKey(
        'Listing',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='reviews',
    )
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')

    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['listing', 'created_at'], name='review_listing_created_idx'),
        ]

    def __str__(self):
        return f"Review {self.id} on listing {self.listing_id} by {self.author_id}"
