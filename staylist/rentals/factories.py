import random
from datetime import timedelta

import factory
from django.utils import timezone
from factory import Faker, LazyFunction
from factory.django import DjangoModelFactory

from staylist.users.models import UserProfile

from .models import Listing, ListingImage, Booking, Review, Favorite

# (city, country) pairs used for demo listings
CITIES = (
    ("Lisbon", "Portugal"),
    ("Porto", "Portugal"),
    ("Barcelona", "Spain"),
    ("Valencia", "Spain"),
    ("Berlin", "Germany"),
    ("Hamburg", "Germany"),
    ("Paris", "France"),
    ("Lyon", "France"),
    ("Rome", "Italy"),
    ("Amsterdam", "Netherlands"),
)

CATEGORIES = tuple(v for v, _ in Listing.Category.choices)

TITLE_ADJECTIVES = ("Cozy", "Sunny", "Modern", "Quiet", "Bright", "Charming")
TITLE_NOUNS = {
    "apartment": "Apartment",
    "house": "House",
    "hotel": "Hotel room",
    "guesthouse": "Guesthouse",
    "hostel": "Hostel bed",
    "bnb": "B&B room",
    "other": "Hideaway",
}

# ---------------------------------------------------------------------------

class UserProfileFactory(DjangoModelFactory):
    """Cached identity-provider user."""
    class Meta:
        model = UserProfile
        django_get_or_create = ("user_id",)

    user_id = factory.Sequence(lambda n: f"user_{n}")
    username = factory.Sequence(lambda n: f"guest{n}")
    first_name = Faker("first_name")
    last_name = Faker("last_name")
    avatar_url = factory.LazyAttribute(lambda o: f"https://avatars.example.com/{o.user_id}.png")

# ---------------------------------------------------------------------------

class ListingFactory(DjangoModelFactory):
    """Short-term rental with realistic attributes."""
    class Meta:
        model = Listing

    # service param used across fields (NOT passed to the model)
    class Params:
        place = factory.LazyFunction(lambda: random.choice(CITIES))

    owner_id = factory.Sequence(lambda n: f"host_{n}")
    category = factory.LazyFunction(lambda: random.choice(CATEGORIES))
    title = factory.LazyAttribute(
        lambda o: f"{random.choice(TITLE_ADJECTIVES)} {TITLE_NOUNS[o.category]} in {o.city}"
    )
    description = Faker("paragraph", nb_sentences=5)
    city = factory.LazyAttribute(lambda o: o.place[0])
    country = factory.LazyAttribute(lambda o: o.place[1])

    price_per_night = factory.LazyFunction(lambda: random.randrange(35, 260))  # per night
    beds = factory.LazyFunction(lambda: random.randint(1, 6))
    baths = factory.LazyFunction(lambda: random.randint(1, 3))


class ListingImageFactory(DjangoModelFactory):
    """Placeholder photo URL."""
    class Meta:
        model = ListingImage

    listing = factory.SubFactory(ListingFactory)
    url = factory.Sequence(lambda n: f"https://images.example.com/listing/{n}.jpg")
    position = factory.Sequence(lambda n: n)


class BookingFactory(DjangoModelFactory):
    """Booking (pending by default); trait `past_confirmed` for finished stays."""
    class Meta:
        model = Booking

    listing = factory.SubFactory(ListingFactory)
    guest_id = factory.Sequence(lambda n: f"guest_{n}")

    start_date = LazyFunction(lambda: timezone.localdate() + timedelta(days=random.randint(5, 20)))
    end_date = factory.LazyAttribute(lambda o: o.start_date + timedelta(days=random.randint(2, 7)))

    status = Booking.PENDING

    class Params:
        past_confirmed = factory.Trait(
            status=Booking.CONFIRMED,
            start_date=LazyFunction(lambda: timezone.localdate() - timedelta(days=random.randint(25, 40))),
        )


class ReviewFactory(DjangoModelFactory):
    class Meta:
        model = Review

    listing = factory.SubFactory(ListingFactory)
    author_id = factory.Sequence(lambda n: f"reviewer_{n}")
    stars = factory.LazyFunction(lambda: random.randint(4, 5))
    text = Faker("sentence", nb_words=12)


class FavoriteFactory(DjangoModelFactory):
    class Meta:
        model = Favorite

    listing = factory.SubFactory(ListingFactory)
    user_id = factory.Sequence(lambda n: f"fan_{n}")
