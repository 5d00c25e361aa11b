from datetime import date

from django.test import TestCase

from staylist.rentals.exceptions import NotFound
from staylist.rentals.factories import (
    BookingFactory, FavoriteFactory, ListingFactory, ReviewFactory, UserProfileFactory,
)
from staylist.rentals.models import Booking, Listing
from staylist.rentals.services import aggregation


class AggregationTests(TestCase):
    def setUp(self):
        self.listing = ListingFactory(owner_id="host")
        self.quiet = ListingFactory(owner_id="host")
        ReviewFactory(listing=self.listing, stars=5)
        ReviewFactory(listing=self.listing, stars=4)
        FavoriteFactory(listing=self.listing, user_id="viewer")
        FavoriteFactory(listing=self.listing, user_id="someone")

    def test_listing_with_activity(self):
        agg = aggregation.aggregate_for_listing(self.listing.id, viewer_id="viewer")
        self.assertEqual(agg.average_stars, 4.5)
        self.assertEqual(agg.review_count, 2)
        self.assertEqual(agg.favorite_count, 2)
        self.assertTrue(agg.is_favorited)
        self.assertIsNone(agg.viewer_booking_status)

    def test_listing_without_activity(self):
        agg = aggregation.aggregate_for_listing(self.quiet.id, viewer_id="viewer")
        self.assertIsNone(agg.average_stars)
        self.assertEqual(agg.review_count, 0)
        self.assertEqual(agg.favorite_count, 0)
        self.assertFalse(agg.is_favorited)

    def test_anonymous_viewer(self):
        agg = aggregation.aggregate_for_listing(self.listing.id)
        self.assertFalse(agg.is_favorited)
        self.assertIsNone(agg.viewer_booking_status)
        self.assertEqual(agg.favorite_count, 2)

    def test_viewer_booking_status_is_latest(self):
        BookingFactory(listing=self.listing, guest_id="viewer", start_date=date(2030, 6, 1),
                       end_date=date(2030, 6, 3), status=Booking.CANCELED)
        BookingFactory(listing=self.listing, guest_id="viewer", start_date=date(2030, 7, 1),
                       end_date=date(2030, 7, 3), status=Booking.PENDING)
        agg = aggregation.aggregate_for_listing(self.listing.id, viewer_id="viewer")
        self.assertEqual(agg.viewer_booking_status, Booking.PENDING)

    def test_missing_listing(self):
        with self.assertRaises(NotFound):
            aggregation.aggregate_for_listing(999999)

    def test_average_stars(self):
        self.assertEqual(aggregation.average_stars(self.listing.id), 4.5)
        self.assertIsNone(aggregation.average_stars(self.quiet.id))

    def test_annotations_follow_deletes(self):
        self.listing.favorites.filter(user_id="someone").delete()
        row = aggregation.annotate_listings(Listing.objects.filter(pk=self.listing.id)).get()
        self.assertEqual(row.favorite_count, 1)

    def test_attach_authors_tolerates_unknown_owner(self):
        UserProfileFactory(user_id="host", username="hosty")
        stranger = ListingFactory(owner_id="unknown")
        listings = aggregation.attach_authors([self.listing, stranger])
        self.assertEqual(listings[0].author.display_name, "hosty")
        self.assertIsNone(listings[1].author)
