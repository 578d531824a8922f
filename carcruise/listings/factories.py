import random
from decimal import Decimal
from datetime import timedelta

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory import Faker, LazyFunction, post_generation
from factory.django import DjangoModelFactory, ImageField

from .models import Listing, Booking, Review

# Rough bounding boxes for Indian metros: (lat_min, lat_max, lon_min, lon_max)
CITY_BBOXES = {
    "delhi": (28.45, 28.80, 76.95, 77.35),
    "mumbai": (18.90, 19.25, 72.80, 72.98),
    "bengaluru": (12.85, 13.10, 77.45, 77.75),
    "chennai": (12.95, 13.20, 80.15, 80.30),
    "hyderabad": (17.30, 17.55, 78.35, 78.60),
    "pune": (18.45, 18.62, 73.75, 73.95),
    "kolkata": (22.45, 22.65, 88.25, 88.45),
    "jaipur": (26.80, 27.00, 75.70, 75.90),
}

def rand_city() -> str:
    return random.choice(list(CITY_BBOXES.keys()))

def rand_point_in_city(city_key: str):
    lat_min, lat_max, lon_min, lon_max = CITY_BBOXES[city_key]
    lat = round(random.uniform(lat_min, lat_max), 6)
    lon = round(random.uniform(lon_min, lon_max), 6)
    return lat, lon

TAGS = tuple(v for v, _ in Listing.Tag.choices)

CAR_MODELS = [
    "Maruti Swift", "Hyundai Creta", "Mahindra Thar", "Tata Nexon EV",
    "Toyota Innova", "Honda City", "Kia Seltos", "Mahindra XUV700",
]

# ---------------------------------------------------------------------------

class UserFactory(DjangoModelFactory):
    """
    Demo user. CustomUser has no 'username' field, so only email & names are set.
    Password is hashed in @post_generation.
    """
    class Meta:
        model = get_user_model()
        django_get_or_create = ("email",)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = Faker("first_name")
    last_name = Faker("last_name")

    @post_generation
    def password(self, create, extracted, **kwargs):
        pwd = extracted or "Passw0rd!"
        self.set_password(pwd)
        if create:
            self.save()

class OwnerFactory(UserFactory):
    """Listing owner user."""
    pass

class RenterFactory(UserFactory):
    """Renter user."""
    pass

# ---------------------------------------------------------------------------

class ListingFactory(DjangoModelFactory):
    """Car listing with a map pin inside one city."""
    class Meta:
        model = Listing

    # service param used across fields (NOT passed to the model)
    class Params:
        city = factory.LazyFunction(rand_city)

    owner = factory.SubFactory(OwnerFactory)

    title = factory.LazyFunction(lambda: random.choice(CAR_MODELS))
    description = Faker("paragraph", nb_sentences=4)
    location = factory.LazyAttribute(lambda o: o.city.capitalize())
    country = "India"
    image = ImageField(width=640, height=360, format="JPEG")

    price = factory.LazyFunction(lambda: Decimal(random.randrange(800, 6000, 50)))  # per day
    tags = factory.LazyFunction(lambda: random.sample(TAGS, k=random.randint(1, 3)))

    latitude = factory.LazyAttribute(lambda o: rand_point_in_city(o.city)[0])
    longitude = factory.LazyAttribute(lambda o: rand_point_in_city(o.city)[1])

class BookingFactory(DjangoModelFactory):
    """Pending request for a future window; traits cover the other lifecycle stages."""
    class Meta:
        model = Booking

    listing = factory.SubFactory(ListingFactory)
    user = factory.SubFactory(RenterFactory)
    owner = factory.LazyAttribute(lambda o: o.listing.owner)

    full_name = Faker("name")
    mobile_number = factory.Sequence(lambda n: f"98{n:08d}")

    pickup_date = LazyFunction(lambda: timezone.localdate() + timedelta(days=3))
    return_date = factory.LazyAttribute(lambda o: o.pickup_date + timedelta(days=2))
    pickup_time = "10:00"
    return_time = "10:00"

    status = Booking.Status.PENDING

    class Params:
        approved_ongoing = factory.Trait(status=Booking.Status.APPROVED)
        approved_completed = factory.Trait(
            status=Booking.Status.APPROVED,
            pickup_date=LazyFunction(lambda: timezone.localdate() - timedelta(days=10)),
            return_date=LazyFunction(lambda: timezone.localdate() - timedelta(days=7)),
        )
        rejected = factory.Trait(status=Booking.Status.REJECTED)

class ReviewFactory(DjangoModelFactory):
    class Meta:
        model = Review

    listing = factory.SubFactory(ListingFactory)
    author = factory.SubFactory(RenterFactory)

    rating = factory.LazyFunction(lambda: random.randint(3, 5))
    comment = Faker("sentence", nb_words=12)
