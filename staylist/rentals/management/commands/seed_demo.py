import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from staylist.rentals.factories import (
    BookingFactory,
    FavoriteFactory,
    ListingFactory,
    ListingImageFactory,
    ReviewFactory,
    UserProfileFactory,
)
from staylist.rentals.models import Booking, Favorite, Listing, Review
from staylist.users.models import UserProfile


class Command(BaseCommand):
    """
    Seed the database with demo data:
    - Host and guest profiles (cached identity-provider users)
    - Listings across European cities with 2-4 photo URLs each
    - One past confirmed stay per listing, plus overlapping pending requests
    - Reviews and favorites for a share of the listings
    """

    help = "Seed the DB with demo listings, bookings, reviews and favorites."

    def add_arguments(self, parser):
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
        parser.add_argument("--wipe", action="store_true", help="Delete ALL rentals data and profiles before seeding.")
        parser.add_argument("--hosts", type=int, default=4, help="How many hosts to create.")
        parser.add_argument("--guests", type=int, default=8, help="How many guests to create.")
        parser.add_argument("--listings", type=int, default=40, help="How many listings to create.")
        parser.add_argument("--overlaps", type=int, default=2, help="Overlapping pending requests per listing.")

    @transaction.atomic
    def handle(self, *args, **opts):
        seed = opts.get("seed")
        if seed is not None:
            random.seed(seed)

        if opts["wipe"]:
            self.stdout.write(self.style.WARNING("Wiping listings, bookings, reviews, favorites and profiles..."))
            Favorite.objects.all().delete()
            Review.objects.all().delete()
            Booking.objects.all().delete()
            Listing.objects.all().delete()
            UserProfile.objects.all().delete()

        hosts = [UserProfileFactory() for _ in range(max(1, opts["hosts"]))]
        guests = [UserProfileFactory() for _ in range(max(1, opts["guests"]))]
        self.stdout.write(self.style.SUCCESS(f"Profiles created: hosts={len(hosts)}, guests={len(guests)}"))

        listings = []
        for i in range(opts["listings"]):
            # Round-robin assign hosts
            listing = ListingFactory(owner_id=hosts[i % len(hosts)].user_id)
            for position in range(random.randint(2, 4)):
                ListingImageFactory(listing=listing, position=position)
            listings.append(listing)

        today = timezone.localdate()
        bookings = 0
        for listing in listings:
            guest = random.choice(guests)
            past_start = today - timedelta(days=random.randint(35, 50))
            BookingFactory(
                listing=listing,
                guest_id=guest.user_id,
                start_date=past_start,
                end_date=past_start + timedelta(days=random.randint(2, 7)),
                status=Booking.CONFIRMED,
            )
            bookings += 1

            # Future requests that overlap each other; none is confirmed yet
            base_start = today + timedelta(days=random.randint(10, 20))
            base_end = base_start + timedelta(days=random.randint(3, 7))
            for _ in range(opts["overlaps"]):
                shift = timedelta(days=random.randint(-1, 1))
                BookingFactory(
                    listing=listing,
                    guest_id=random.choice(guests).user_id,
                    start_date=base_start + shift,
                    end_date=base_end + shift,
                    status=Booking.PENDING,
                )
                bookings += 1

            if random.random() < 0.6:
                ReviewFactory(listing=listing, author_id=guest.user_id)

            for fan in random.sample(guests, k=random.randint(0, min(3, len(guests)))):
                FavoriteFactory(listing=listing, user_id=fan.user_id)

        self.stdout.write(self.style.SUCCESS(f"Seeding done: listings={len(listings)}, bookings={bookings}"))
