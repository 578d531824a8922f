import pytest
from django.core.management import call_command

from carcruise.listings.models import Booking, Listing, Review


@pytest.mark.django_db
def test_seed_demo_creates_consistent_data():
    call_command(
        "seed_demo", "--seed", "7", "--owners", "2", "--renters", "4",
        "--listings", "3", "--with-reviews",
    )
    assert Listing.objects.count() == 3
    assert Booking.objects.filter(status="pending").count() == 3
    assert Booking.objects.filter(status="approved").count() == 3
    assert Review.objects.count() == 1
    for booking in Booking.objects.select_related("listing"):
        assert booking.owner_id == booking.listing.owner_id
        assert booking.user_id != booking.owner_id
