from datetime import date

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.models import TokenUser

from staylist.rentals.factories import (
    BookingFactory, FavoriteFactory, ListingFactory, ListingImageFactory, ReviewFactory, UserProfileFactory,
)
from staylist.rentals.models import Booking, Favorite, Listing, ListingImage, Review


def d(day):
    return date(2030, 6, day)


LISTING_PAYLOAD = {
    "title": "Sunny loft",
    "description": "Top floor, two balconies.",
    "category": "apartment",
    "price_per_night": 120,
    "beds": 2,
    "baths": 1,
    "city": "Lisbon",
    "country": "Portugal",
    "image_urls": ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
}


@pytest.mark.django_db
class TestListingCrud:
    def setup_method(self):
        self.client = APIClient()

    def _auth(self, user_id):
        self.client.force_authenticate(user=TokenUser({"user_id": user_id}))

    def test_create_requires_auth(self):
        resp = self.client.post("/api/listings/", LISTING_PAYLOAD, format="json")
        assert resp.status_code == 401

    def test_create_sets_owner_and_images(self):
        UserProfileFactory(user_id="host", username="hosty")
        self._auth("host")
        resp = self.client.post("/api/listings/", LISTING_PAYLOAD, format="json")
        assert resp.status_code == 201, resp.data
        assert resp.data["owner_id"] == "host"
        assert resp.data["owner"]["display_name"] == "hosty"
        assert resp.data["image_urls"] == LISTING_PAYLOAD["image_urls"]
        assert resp.data["favorite_count"] == 0
        assert resp.data["average_stars"] is None
        listing = Listing.objects.get(pk=resp.data["id"])
        assert [img.position for img in listing.images.all()] == [0, 1]

    def test_create_validation(self):
        self._auth("host")
        bad = dict(LISTING_PAYLOAD, price_per_night=0, category="castle", image_urls=["not-a-url"])
        resp = self.client.post("/api/listings/", bad, format="json")
        assert resp.status_code == 400
        assert {"price_per_night", "category", "image_urls"} <= set(resp.data)

    def test_only_owner_updates(self):
        listing = ListingFactory(owner_id="host")
        self._auth("intruder")
        resp = self.client.patch(f"/api/listings/{listing.id}/", {"title": "Mine now"}, format="json")
        assert resp.status_code == 403

        self._auth("host")
        resp = self.client.patch(
            f"/api/listings/{listing.id}/",
            {"title": "Renamed", "image_urls": ["https://img.example.com/new.jpg"]},
            format="json",
        )
        assert resp.status_code == 200, resp.data
        assert resp.data["title"] == "Renamed"
        assert resp.data["image_urls"] == ["https://img.example.com/new.jpg"]

    def test_patch_without_images_keeps_gallery(self):
        listing = ListingFactory(owner_id="host")
        ListingImageFactory(listing=listing, url="https://img.example.com/keep.jpg")
        self._auth("host")
        resp = self.client.patch(f"/api/listings/{listing.id}/", {"beds": 4}, format="json")
        assert resp.status_code == 200
        assert resp.data["image_urls"] == ["https://img.example.com/keep.jpg"]

    def test_put_is_not_allowed(self):
        listing = ListingFactory(owner_id="host")
        self._auth("host")
        resp = self.client.put(f"/api/listings/{listing.id}/", LISTING_PAYLOAD, format="json")
        assert resp.status_code == 405

    def test_delete_cascades_images_but_detaches_history(self):
        listing = ListingFactory(owner_id="host")
        ListingImageFactory(listing=listing)
        booking = BookingFactory(listing=listing, start_date=d(1), end_date=d(3))
        review = ReviewFactory(listing=listing)
        fav = FavoriteFactory(listing=listing)

        self._auth("intruder")
        assert self.client.delete(f"/api/listings/{listing.id}/").status_code == 403

        self._auth("host")
        assert self.client.delete(f"/api/listings/{listing.id}/").status_code == 204
        assert not ListingImage.objects.exists()
        assert Booking.objects.get(pk=booking.pk).listing_id is None
        assert Review.objects.get(pk=review.pk).listing_id is None
        assert Favorite.objects.get(pk=fav.pk).listing_id is None

    def test_retrieve(self):
        listing = ListingFactory(owner_id="host")
        resp = self.client.get(f"/api/listings/{listing.id}/")
        assert resp.status_code == 200
        assert resp.data["id"] == listing.id
        assert self.client.get("/api/listings/999999/").status_code == 404

    def test_mine(self):
        a = ListingFactory(owner_id="host")
        b = ListingFactory(owner_id="host")
        ListingFactory(owner_id="other")
        FavoriteFactory(listing=b)
        self._auth("host")
        resp = self.client.get("/api/listings/mine/", {"limit": 1})
        assert resp.status_code == 200
        assert [i["id"] for i in resp.data["results"]] == [b.id]
        assert resp.data["next_cursor"] == a.id
        assert resp.data["total_count"] == 2

        resp = self.client.get("/api/listings/mine/", {"limit": 1, "cursor": a.id})
        assert [i["id"] for i in resp.data["results"]] == [a.id]
        assert resp.data["next_cursor"] is None


@pytest.mark.django_db
class TestListingDetailActions:
    def setup_method(self):
        self.client = APIClient()
        self.listing = ListingFactory(owner_id="host")

    def _auth(self, user_id):
        self.client.force_authenticate(user=TokenUser({"user_id": user_id}))

    def test_booked_dates(self):
        BookingFactory(listing=self.listing, start_date=d(10), end_date=d(12), status=Booking.CONFIRMED)
        BookingFactory(listing=self.listing, start_date=d(1), end_date=d(4), status=Booking.CONFIRMED)
        BookingFactory(listing=self.listing, start_date=d(5), end_date=d(6), status=Booking.PENDING)
        resp = self.client.get(f"/api/listings/{self.listing.id}/booked-dates/")
        assert resp.status_code == 200
        assert resp.data == [
            {"start_date": "2030-06-01", "end_date": "2030-06-04", "nights": 3},
            {"start_date": "2030-06-10", "end_date": "2030-06-12", "nights": 2},
        ]

    def test_booked_dates_unknown_listing(self):
        assert self.client.get("/api/listings/999999/booked-dates/").status_code == 404

    def test_calendar(self):
        BookingFactory(listing=self.listing, start_date=d(2), end_date=d(3), status=Booking.CONFIRMED)
        resp = self.client.get(
            f"/api/listings/{self.listing.id}/calendar/",
            {"start_date": "2030-06-01", "end_date": "2030-06-04"},
        )
        assert resp.status_code == 200
        assert [day["status"] for day in resp.data] == ["available", "booked", "available"]

        resp = self.client.get(f"/api/listings/{self.listing.id}/calendar/", {"start_date": "2030-06-01"})
        assert resp.status_code == 400

    def test_bookings_owner_only(self):
        BookingFactory(listing=self.listing, guest_id="g1", start_date=d(1), end_date=d(3))
        self._auth("g1")
        assert self.client.get(f"/api/listings/{self.listing.id}/bookings/").status_code == 403

        self._auth("host")
        resp = self.client.get(f"/api/listings/{self.listing.id}/bookings/")
        assert resp.status_code == 200
        assert [b["guest_id"] for b in resp.data] == ["g1"]
        assert resp.data[0]["can_confirm"] is True

    def test_reviews(self):
        older = ReviewFactory(listing=self.listing, stars=2)
        newer = ReviewFactory(listing=self.listing, stars=5)
        resp = self.client.get(f"/api/listings/{self.listing.id}/reviews/")
        assert resp.status_code == 200
        assert [r["id"] for r in resp.data] == [newer.id, older.id]

    def test_my_booking(self):
        url = f"/api/listings/{self.listing.id}/my-booking/"
        resp = self.client.get(url)
        assert resp.status_code == 200
        assert resp.data is None

        booking = BookingFactory(listing=self.listing, guest_id="g1", start_date=d(1), end_date=d(3))
        self._auth("g1")
        resp = self.client.get(url)
        assert resp.data["id"] == booking.id

    def test_withdraw(self):
        url = f"/api/listings/{self.listing.id}/my-booking/"
        BookingFactory(listing=self.listing, guest_id="g1", start_date=d(1), end_date=d(3))

        assert self.client.delete(url).status_code == 401

        self._auth("g2")
        assert self.client.delete(f"{url}?user_id=g1").status_code == 403

        self._auth("g1")
        resp = self.client.delete(url)
        assert resp.status_code == 200
        assert resp.data == {"deleted": 1}
        assert not Booking.objects.exists()

    def test_withdraw_refused_when_confirmed(self):
        BookingFactory(listing=self.listing, guest_id="g1", start_date=d(1), end_date=d(3), status=Booking.CONFIRMED)
        self._auth("g1")
        resp = self.client.delete(f"/api/listings/{self.listing.id}/my-booking/")
        assert resp.status_code == 400

    def test_stats(self):
        ReviewFactory(listing=self.listing, stars=4)
        FavoriteFactory(listing=self.listing, user_id="g1")
        BookingFactory(listing=self.listing, guest_id="g1", start_date=d(1), end_date=d(3))
        self._auth("g1")
        resp = self.client.get(f"/api/listings/{self.listing.id}/stats/")
        assert resp.status_code == 200
        assert resp.data == {
            "listing_id": self.listing.id,
            "average_stars": 4.0,
            "review_count": 1,
            "favorite_count": 1,
            "booking_count": 1,
            "is_favorited": True,
            "viewer_booking_status": "pending",
        }
        assert self.client.get("/api/listings/999999/stats/").status_code == 404
