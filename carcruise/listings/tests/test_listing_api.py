from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from rest_framework.test import APITestCase

from carcruise.listings.factories import BookingFactory, ListingFactory, ReviewFactory
from carcruise.listings.models import Booking, Listing, Review
from carcruise.listings.serializers.listing import MSG_NEED_PLACE, MSG_PLACE_NOT_FOUND
from .helpers import make_image_file

GEOCODE = "carcruise.listings.geocoding.geocode"


class ListingCreateApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.owner = get_user_model().objects.create_user(email="owner@example.com", password="x")

    def setUp(self):
        self.client.force_authenticate(self.owner)

    def payload(self, **overrides):
        data = {
            "title": "Mahindra Thar",
            "description": "4x4, soft top",
            "price": "2500",
            "location": "Jaipur",
            "country": "India",
            "tags": ["SUV", "Manual"],
            "latitude": "26.912400",
            "longitude": "75.787300",
            "image": make_image_file(),
        }
        data.update(overrides)
        return {k: v for k, v in data.items() if v is not None}

    def test_create_with_map_pin(self):
        with mock.patch(GEOCODE) as geocode:
            r = self.client.post("/api/listings/", self.payload(), format="multipart")
        self.assertEqual(r.status_code, 201, r.data)
        geocode.assert_not_called()
        listing = Listing.objects.get(pk=r.data["id"])
        self.assertEqual(listing.owner, self.owner)
        self.assertEqual(listing.tags, ["SUV", "Manual"])
        self.assertTrue(listing.image.name.startswith(f"listings/{self.owner.id}/"))
        self.assertEqual(r.data["geometry"]["coordinates"], [75.7873, 26.9124])

    def test_image_is_required(self):
        r = self.client.post("/api/listings/", self.payload(image=None), format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertIn("image", r.data)

    def test_extra_tags_are_dropped(self):
        tags = ["SUV", "Manual", "Family", "Budget", "Premium"]
        r = self.client.post("/api/listings/", self.payload(tags=tags), format="multipart")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(Listing.objects.get(pk=r.data["id"]).tags, tags[:4])

    def test_unknown_tag_is_rejected(self):
        r = self.client.post("/api/listings/", self.payload(tags=["Spaceship"]), format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertIn("tags", r.data)

    def test_missing_pin_is_geocoded(self):
        point = (Decimal("26.912434"), Decimal("75.787270"))
        with mock.patch(GEOCODE, return_value=point) as geocode:
            r = self.client.post(
                "/api/listings/",
                self.payload(latitude=None, longitude=None),
                format="multipart",
            )
        self.assertEqual(r.status_code, 201, r.data)
        geocode.assert_called_once_with("Jaipur, India")
        listing = Listing.objects.get(pk=r.data["id"])
        self.assertEqual(listing.latitude, point[0])

    def test_missing_pin_and_place(self):
        r = self.client.post(
            "/api/listings/",
            self.payload(latitude=None, longitude=None, location=None, country=None),
            format="multipart",
        )
        self.assertEqual(r.status_code, 400)
        self.assertIn(MSG_NEED_PLACE, str(r.data))

    def test_place_not_found(self):
        with mock.patch(GEOCODE, return_value=None):
            r = self.client.post(
                "/api/listings/",
                self.payload(latitude=None, longitude=None, location="Atlantis"),
                format="multipart",
            )
        self.assertEqual(r.status_code, 400)
        self.assertIn(MSG_PLACE_NOT_FOUND, str(r.data))
        self.assertFalse(Listing.objects.exists())


class ListingApiTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.owner = User.objects.create_user(email="owner@example.com", password="x")
        cls.renter = User.objects.create_user(email="renter@example.com", password="x")
        cls.suv = ListingFactory(
            owner=cls.owner, image=None, title="Tata Nexon EV",
            tags=["SUV", "Electric"], price=Decimal("3000"), location="Pune", country="India",
        )
        cls.hatch = ListingFactory(
            owner=cls.renter, image=None, title="Maruti Swift",
            tags=["Hatchback", "Budget"], price=Decimal("900"), location="Goa", country="India",
        )

    def ids(self, response):
        return {row["id"] for row in response.data["results"]}

    def test_list_is_public_and_paginated(self):
        r = self.client.get("/api/listings/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["count"], 2)

    def test_filters(self):
        self.assertEqual(self.ids(self.client.get("/api/listings/", {"tags": ["SUV", "Electric"]})), {self.suv.id})
        self.assertEqual(self.ids(self.client.get("/api/listings/", {"tags": ["SUV", "Budget"]})), set())
        self.assertEqual(self.ids(self.client.get("/api/listings/", {"q": "goa"})), {self.hatch.id})
        self.assertEqual(self.ids(self.client.get("/api/listings/", {"price_max": "1000"})), {self.hatch.id})

        self.client.force_authenticate(self.owner)
        self.assertEqual(self.ids(self.client.get("/api/listings/", {"mine": "true"})), {self.suv.id})

    def test_detail_for_anonymous_has_empty_booking_state(self):
        r = self.client.get(f"/api/listings/{self.suv.id}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["booking_state"], {"user_booking": None, "can_rebook": False})

    def test_detail_shows_blocking_booking(self):
        pending = BookingFactory(listing=self.suv, user=self.renter)
        self.client.force_authenticate(self.renter)
        state = self.client.get(f"/api/listings/{self.suv.id}/").data["booking_state"]
        self.assertEqual(state["user_booking"]["id"], pending.id)
        self.assertFalse(state["can_rebook"])

    def test_detail_offers_rebooking_after_completed_rental(self):
        BookingFactory(listing=self.suv, user=self.renter, approved_completed=True)
        self.client.force_authenticate(self.renter)
        state = self.client.get(f"/api/listings/{self.suv.id}/").data["booking_state"]
        self.assertIsNone(state["user_booking"])
        self.assertTrue(state["can_rebook"])

    def test_detail_includes_reviews_and_rating(self):
        ReviewFactory(listing=self.suv, rating=4)
        ReviewFactory(listing=self.suv, rating=5)
        r = self.client.get(f"/api/listings/{self.suv.id}/")
        self.assertEqual(r.data["reviews_count"], 2)
        self.assertEqual(r.data["average_rating"], 4.5)
        self.assertEqual(len(r.data["reviews"]), 2)

    def test_update_truncates_tags_and_regeocodes(self):
        self.client.force_authenticate(self.owner)
        with mock.patch(GEOCODE, return_value=(Decimal("18.520400"), Decimal("73.856700"))) as geocode:
            r = self.client.patch(
                f"/api/listings/{self.suv.id}/",
                {"location": "Pune", "tags": ["SUV", "Electric", "Family", "Premium", "Automatic"]},
                format="json",
            )
        self.assertEqual(r.status_code, 200, r.data)
        geocode.assert_called_once_with("Pune, India")
        self.suv.refresh_from_db()
        self.assertEqual(len(self.suv.tags), 4)
        self.assertEqual(self.suv.latitude, Decimal("18.520400"))

    def test_update_survives_geocoder_outage(self):
        from carcruise.listings.geocoding import GeocodingError

        before = (self.suv.latitude, self.suv.longitude)
        self.client.force_authenticate(self.owner)
        with mock.patch(GEOCODE, side_effect=GeocodingError("down")):
            r = self.client.patch(f"/api/listings/{self.suv.id}/", {"location": "Nashik"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.suv.refresh_from_db()
        self.assertEqual(self.suv.location, "Nashik")
        self.assertEqual((self.suv.latitude, self.suv.longitude), before)

    def test_non_owner_cannot_edit_or_delete(self):
        self.client.force_authenticate(self.renter)
        url = f"/api/listings/{self.suv.id}/"
        self.assertEqual(self.client.patch(url, {"title": "Mine now"}, format="json").status_code, 403)
        self.assertEqual(self.client.delete(url).status_code, 403)

    def test_delete_cascades_to_bookings_and_reviews(self):
        BookingFactory(listing=self.suv, user=self.renter, approved_completed=True)
        BookingFactory(listing=self.suv, user=self.renter)
        ReviewFactory(listing=self.suv)
        untouched = BookingFactory(listing=self.hatch)

        self.client.force_authenticate(self.owner)
        r = self.client.delete(f"/api/listings/{self.suv.id}/")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["deleted_bookings"], 2)
        self.assertEqual(r.data["deleted_reviews"], 1)
        self.assertFalse(Listing.objects.filter(pk=self.suv.id).exists())
        self.assertFalse(Booking.objects.filter(listing_id=self.suv.id).exists())
        self.assertFalse(Review.objects.filter(listing_id=self.suv.id).exists())
        self.assertTrue(Booking.objects.filter(pk=untouched.pk).exists())
