from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APITestCase

from carcruise.listings.factories import BookingFactory, ListingFactory
from carcruise.listings.models import Booking, Listing


class DashboardApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.owner = User.objects.create_user(email="owner@example.com", password="x")
        cls.renter = User.objects.create_user(email="renter@example.com", password="x")
        cls.listing = ListingFactory(owner=cls.owner, price=Decimal("500"), image=None)

    def book(self, days, **kwargs):
        start = timezone.localdate() + timedelta(days=1)
        return BookingFactory(
            listing=kwargs.pop("listing", self.listing),
            user=kwargs.pop("user", None) or get_user_model().objects.create_user(
                email=f"r{Booking.objects.count()}@example.com", password="x"),
            pickup_date=start,
            return_date=start + timedelta(days=days),
            **kwargs,
        )

    def test_requires_authentication(self):
        self.assertIn(self.client.get("/api/dashboard/").status_code, (401, 403))

    def test_income_counts_approved_bookings_only(self):
        self.book(1, status=Booking.Status.APPROVED)
        self.book(2, status=Booking.Status.APPROVED)
        self.book(3)  # pending
        self.book(3, status=Booking.Status.REJECTED)

        self.client.force_authenticate(self.owner)
        r = self.client.get("/api/dashboard/")
        self.assertEqual(r.status_code, 200)
        # 590 + 1180
        self.assertEqual(r.data["total_income"], "1770.00")
        self.assertEqual(r.data["total_bookings"], 4)
        self.assertEqual(r.data["approved_bookings"], 2)
        self.assertEqual(r.data["skipped_bookings"], [])
        self.assertEqual(len(r.data["listings"]), 1)

    def test_listing_without_price_adds_nothing(self):
        unpriced = ListingFactory(owner=self.owner, price=None, image=None)
        self.book(2, listing=unpriced, status=Booking.Status.APPROVED)
        self.client.force_authenticate(self.owner)
        r = self.client.get("/api/dashboard/")
        self.assertEqual(r.data["total_income"], "0.00")
        self.assertIsNone(r.data["booking_requests"][0]["pricing"])

    def test_orphaned_requests_are_purged(self):
        gone = ListingFactory(owner=self.owner, image=None)
        orphan = self.book(1, listing=gone, status=Booking.Status.APPROVED)
        kept = self.book(1, status=Booking.Status.APPROVED)
        Listing.objects.filter(pk=gone.pk).delete()

        self.client.force_authenticate(self.owner)
        r = self.client.get("/api/dashboard/")
        self.assertEqual([b["id"] for b in r.data["booking_requests"]], [kept.id])
        self.assertEqual(r.data["total_income"], "590.00")
        self.assertFalse(Booking.objects.filter(pk=orphan.pk).exists())

    def test_only_own_requests_are_shown(self):
        someone = get_user_model().objects.create_user(email="someone@example.com", password="x")
        other_listing = ListingFactory(owner=someone, image=None)
        self.book(1, listing=other_listing, status=Booking.Status.APPROVED)
        self.client.force_authenticate(self.owner)
        r = self.client.get("/api/dashboard/")
        self.assertEqual(r.data["total_bookings"], 0)

    def test_income_beyond_fourteen_digits(self):
        pricey = ListingFactory(owner=self.owner, price=Decimal("99999999.99"), image=None)
        self.book(20000, listing=pricey, status=Booking.Status.APPROVED)
        self.book(20000, listing=pricey, status=Booking.Status.APPROVED)

        self.client.force_authenticate(self.owner)
        r = self.client.get("/api/dashboard/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total_income"], "4719999999528.00")
        self.assertEqual(r.data["skipped_bookings"], [])
        totals = {b["pricing"]["total_amount"] for b in r.data["booking_requests"]}
        self.assertEqual(totals, {"2359999999764.00"})
