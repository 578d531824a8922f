from django.db import models
from django.conf import settings

MAX_TAGS = 4


def max_tags():
    return int(getattr(settings, "LISTING_MAX_TAGS", MAX_TAGS))


def listing_image_upload_path(instance, filename):
    owner_id = instance.owner_id or "anon"
    return f"listings/{owner_id}/{filename}"


class Listing(models.Model):
    class Tag(models.TextChoices):
        PREMIUM = "Premium", "Premium"
        LUXURIOUS = "Luxurious", "Luxurious"
        BUDGET = "Budget", "Budget"
        FAMILY = "Family", "Family"
        SUV = "SUV", "SUV"
        SEDAN = "Sedan", "Sedan"
        HATCHBACK = "Hatchback", "Hatchback"
        ELECTRIC = "Electric", "Electric"
        MANUAL = "Manual", "Manual"
        AUTOMATIC = "Automatic", "Automatic"

    title = models.CharField(max_length=100)
    description = models.TextField()
    image = models.ImageField(upload_to=listing_image_upload_path, blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, db_index=True)  # per day
    location = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='listings',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='listing_owner_created_idx'),
            models.Index(fields=['latitude', 'longitude'], name='listing_lat_lon_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def geometry(self):
        """GeoJSON point, [lon, lat] order."""
        if self.latitude is None or self.longitude is None:
            return None
        return {"type": "Point", "coordinates": [float(self.longitude), float(self.latitude)]}

    def save(self, *args, **kwargs):
        # Extra tags are dropped, not rejected
        limit = max_tags()
        if isinstance(self.tags, list) and len(self.tags) > limit:
            self.tags = self.tags[:limit]
        super().save(*args, **kwargs)
