from datetime import date

from django.test import TestCase

from staylist.rentals.exceptions import ValidationError
from staylist.rentals.factories import BookingFactory, ListingFactory
from staylist.rentals.intervals import Interval
from staylist.rentals.models import Booking
from staylist.rentals.services import availability


def d(day):
    return date(2030, 6, day)


class ExcludedListingIdsTests(TestCase):
    def setUp(self):
        self.booked = ListingFactory()
        self.pending_only = ListingFactory()
        self.free = ListingFactory()
        BookingFactory(listing=self.booked, start_date=d(10), end_date=d(15), status=Booking.CONFIRMED)
        BookingFactory(listing=self.pending_only, start_date=d(10), end_date=d(15), status=Booking.PENDING)
        BookingFactory(listing=self.free, start_date=d(10), end_date=d(15), status=Booking.CANCELED)

    def test_no_dates_no_exclusion(self):
        self.assertEqual(availability.excluded_listing_ids(), set())
        self.assertEqual(availability.excluded_listing_ids(d(10), None), set())
        self.assertEqual(availability.excluded_listing_ids(None, d(12)), set())

    def test_only_confirmed_bookings_exclude(self):
        self.assertEqual(availability.excluded_listing_ids(d(12), d(13)), {self.booked.id})

    def test_half_open_edges(self):
        # checkout day of the confirmed stay is free for check-in
        self.assertEqual(availability.excluded_listing_ids(d(15), d(17)), set())
        # leaving on the confirmed check-in day is fine too
        self.assertEqual(availability.excluded_listing_ids(d(8), d(10)), set())
        self.assertEqual(availability.excluded_listing_ids(d(14), d(16)), {self.booked.id})
        self.assertEqual(availability.excluded_listing_ids(d(9), d(11)), {self.booked.id})

    def test_reflects_latest_state(self):
        BookingFactory(listing=self.free, start_date=d(12), end_date=d(13), status=Booking.CONFIRMED)
        self.assertEqual(availability.excluded_listing_ids(d(12), d(13)), {self.booked.id, self.free.id})

    def test_inverted_window(self):
        with self.assertRaises(ValidationError):
            availability.excluded_listing_ids(d(13), d(12))

    def test_is_available(self):
        self.assertFalse(availability.is_available(self.booked.id, Interval(d(14), d(16))))
        self.assertTrue(availability.is_available(self.booked.id, Interval(d(15), d(16))))
        self.assertTrue(availability.is_available(self.pending_only.id, Interval(d(10), d(15))))


class BookedCalendarTests(TestCase):
    def setUp(self):
        self.listing = ListingFactory()
        BookingFactory(listing=self.listing, start_date=d(2), end_date=d(4), status=Booking.CONFIRMED)
        BookingFactory(listing=self.listing, start_date=d(4), end_date=d(5), status=Booking.PENDING)

    def test_day_map(self):
        days = availability.booked_calendar(self.listing.id, d(1), d(6))
        self.assertEqual(
            [(day["date"].day, day["status"]) for day in days],
            [(1, "available"), (2, "booked"), (3, "booked"), (4, "available"), (5, "available")],
        )

    def test_window_limit(self):
        with self.assertRaises(ValidationError):
            availability.booked_calendar(self.listing.id, date(2030, 1, 1), date(2031, 6, 1))
