from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from staylist.rentals.factories import BookingFactory, ListingFactory
from staylist.rentals.models import Booking


class RentalsAdminTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(username="admin", email="admin@example.com", password="x")
        self.client.force_login(self.admin)
        self.listing = ListingFactory(owner_id="host")

    def test_changelists_render(self):
        for name in ("listing", "booking", "review", "favorite"):
            r = self.client.get(reverse(f"admin:rentals_{name}_changelist"))
            self.assertEqual(r.status_code, 200, name)

    def test_listing_change_page_with_images_inline(self):
        r = self.client.get(reverse("admin:rentals_listing_change", args=[self.listing.id]))
        self.assertEqual(r.status_code, 200)

    def test_reject_action_only_touches_pending(self):
        pending = BookingFactory(listing=self.listing, start_date=date(2030, 6, 1), end_date=date(2030, 6, 3))
        confirmed = BookingFactory(
            listing=self.listing, start_date=date(2030, 6, 5), end_date=date(2030, 6, 7), status=Booking.CONFIRMED,
        )
        r = self.client.post(
            reverse("admin:rentals_booking_changelist"),
            {"action": "reject_pending_bookings", "_selected_action": [pending.id, confirmed.id]},
        )
        self.assertEqual(r.status_code, 302)
        pending.refresh_from_db()
        confirmed.refresh_from_db()
        self.assertEqual(pending.status, Booking.CANCELED)
        self.assertEqual(confirmed.status, Booking.CONFIRMED)
