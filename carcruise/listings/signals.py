# Signal handlers for cleaning up listing image files on replace and delete.
# Bookings and reviews are NOT handled here; see services.delete_listing.
import logging

from django.db.models.signals import post_delete, pre_save
from django.dispatch import receiver

from .models import Listing

logger = logging.getLogger(__name__)


def _safe_delete_file(file_field):
    """Delete underlying file from storage if it exists."""
    if not file_field:
        return
    name = file_field.name
    try:
        storage = file_field.storage
        if name and storage.exists(name):
            storage.delete(name)
    except OSError:
        # A storage hiccup must not break the delete/update itself
        logger.warning("Could not remove listing image %s", name, exc_info=True)


@receiver(post_delete, sender=Listing)
def listing_post_delete(sender, instance: Listing, **kwargs):
    """Remove the image file when the Listing row is deleted."""
    _safe_delete_file(instance.image)


@receiver(pre_save, sender=Listing)
def listing_pre_save_replace(sender, instance: Listing, **kwargs):
    """
    If the image changes on update, delete the previous file from storage.
    """
    if not instance.pk:
        return  # new object, nothing to replace
    try:
        old = Listing.objects.get(pk=instance.pk)
    except Listing.DoesNotExist:
        return
    old_file = old.image
    new_file = instance.image
    if old_file and old_file.name != getattr(new_file, "name", None):
        _safe_delete_file(old_file)
