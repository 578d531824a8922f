import random

from django.core.management.base import BaseCommand
from django.db import transaction

from carcruise.listings import services
from carcruise.listings.models import Listing, Booking, Review
from carcruise.listings.factories import (
    OwnerFactory,
    RenterFactory,
    ListingFactory,
    BookingFactory,
    ReviewFactory,
)


class Command(BaseCommand):
    """
    Seed the database with demo data:
    - Owners and renters (password: Passw0rd!)
    - Car listings across Indian metros with map pins and a placeholder photo
    - Per listing: one completed approved booking, one pending request
      and, now and then, a rejected one
    - Optional reviews for part of the completed bookings
    """

    help = "Seed the DB with demo data (cars, pins, bookings, reviews)."

    def add_arguments(self, parser):
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
        parser.add_argument("--wipe", action="store_true", help="Delete ALL listings/bookings/reviews before seeding.")
        parser.add_argument("--owners", type=int, default=3, help="How many owners to create.")
        parser.add_argument("--renters", type=int, default=6, help="How many renters to create.")
        parser.add_argument("--listings", type=int, default=24, help="How many listings to create.")
        parser.add_argument("--with-reviews", action="store_true", help="Create reviews for part of completed bookings.")

    @transaction.atomic
    def handle(self, *args, **opts):
        seed = opts.get("seed")
        if seed is not None:
            random.seed(seed)

        if opts["wipe"]:
            self.stdout.write(self.style.WARNING("Wiping ALL listings/bookings/reviews..."))
            for listing in Listing.objects.all():
                services.delete_listing(listing)
            # leftovers pointing at listings deleted outside the API
            Review.objects.all().delete()
            Booking.objects.all().delete()

        owners = [OwnerFactory(password="Passw0rd!") for _ in range(opts["owners"])]
        renters = [RenterFactory(password="Passw0rd!") for _ in range(opts["renters"])]
        self.stdout.write(
            self.style.SUCCESS(
                f"Users created: owners={len(owners)}, renters={len(renters)} (password: Passw0rd!)"
            )
        )

        listings = [ListingFactory(owner=owners[i % len(owners)]) for i in range(opts["listings"])]

        completed = []
        for listing in listings:
            past_renter, next_renter = random.sample(renters, 2)
            completed.append(
                BookingFactory(listing=listing, user=past_renter, approved_completed=True)
            )
            BookingFactory(listing=listing, user=next_renter)
            if random.random() < 0.25:
                others = [r for r in renters if r not in (past_renter, next_renter)]
                if others:
                    BookingFactory(listing=listing, user=random.choice(others), rejected=True)

        if opts["with_reviews"]:
            random.shuffle(completed)
            for booking in completed[: int(len(completed) * 0.6)]:
                ReviewFactory(listing=booking.listing, author=booking.user)

        self.stdout.write(self.style.SUCCESS(f"Seeding done: listings={len(listings)}"))
