# Renter side of bookings:
#   GET  /api/bookings/?status=...
#   GET  /api/bookings/{id}/
#   POST /api/bookings/{id}/cancel/

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APITestCase

from carcruise.listings.factories import BookingFactory, ListingFactory
from carcruise.listings.models import Booking, Listing


class MyBookingsApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.owner = User.objects.create_user(email="owner@example.com", password="x")
        cls.renter = User.objects.create_user(email="renter@example.com", password="x")
        cls.stranger = User.objects.create_user(email="stranger@example.com", password="x")

    def setUp(self):
        make = lambda **kw: BookingFactory(listing=ListingFactory(owner=self.owner, image=None), user=self.renter, **kw)
        self.pending = make()
        self.approved = make(approved_ongoing=True)
        self.completed = make(approved_completed=True)
        self.rejected = make(rejected=True)
        self.client.force_authenticate(self.renter)

    def test_lists_own_bookings_with_counts(self):
        BookingFactory(user=self.stranger)
        r = self.client.get("/api/bookings/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data["bookings"]), 4)
        self.assertEqual(r.data["selected_status"], "all")
        self.assertEqual(r.data["status_counts"], {
            "all": 4, "pending": 1, "approved": 1, "completed": 1, "rejected": 1,
        })

    def test_filter_by_display_status(self):
        r = self.client.get("/api/bookings/", {"status": "completed"})
        ids = [b["id"] for b in r.data["bookings"]]
        self.assertEqual(ids, [self.completed.id])
        self.assertEqual(r.data["bookings"][0]["display_status"], "completed")

        r = self.client.get("/api/bookings/", {"status": "approved"})
        self.assertEqual([b["id"] for b in r.data["bookings"]], [self.approved.id])
        self.assertTrue(r.data["bookings"][0]["is_approved_locked"])

    def test_unknown_filter_means_all(self):
        r = self.client.get("/api/bookings/", {"status": "whatever"})
        self.assertEqual(r.data["selected_status"], "all")
        self.assertEqual(len(r.data["bookings"]), 4)

    def test_orphaned_bookings_are_purged(self):
        Listing.objects.filter(pk=self.pending.listing_id).delete()
        r = self.client.get("/api/bookings/")
        self.assertEqual(r.data["status_counts"]["all"], 3)
        self.assertFalse(Booking.objects.filter(pk=self.pending.pk).exists())

    def test_owner_sees_booking_details_stranger_does_not(self):
        url = f"/api/bookings/{self.pending.id}/"
        self.client.force_authenticate(self.owner)
        r = self.client.get(url)
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["can_approve"])
        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_renter_cancels_pending(self):
        r = self.client.post(f"/api/bookings/{self.pending.id}/cancel/")
        self.assertEqual(r.status_code, 200)
        self.assertFalse(Booking.objects.filter(pk=self.pending.pk).exists())

    def test_only_pending_can_be_cancelled(self):
        r = self.client.post(f"/api/bookings/{self.approved.id}/cancel/")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["detail"], "Only pending bookings can be cancelled.")

    def test_owner_cannot_cancel_for_renter(self):
        self.client.force_authenticate(self.owner)
        r = self.client.post(f"/api/bookings/{self.pending.id}/cancel/")
        self.assertEqual(r.status_code, 403)
        self.assertTrue(Booking.objects.filter(pk=self.pending.pk).exists())

    def test_long_window_at_top_price_renders(self):
        pricey = ListingFactory(owner=self.owner, price=Decimal("99999999.99"), image=None)
        pickup = timezone.localdate() + timedelta(days=1)
        long_one = BookingFactory(
            listing=pricey,
            user=self.renter,
            pickup_date=pickup,
            return_date=pickup + timedelta(days=20000),
        )
        r = self.client.get("/api/bookings/", {"status": "pending"})
        self.assertEqual(r.status_code, 200)
        by_id = {b["id"]: b for b in r.data["bookings"]}
        self.assertEqual(by_id[long_one.id]["pricing"]["total_amount"], "2359999999764.00")
