from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.models import TokenUser

from staylist.rentals.exceptions import NotFound, Unauthorized, ValidationError
from staylist.rentals.factories import ListingFactory, ReviewFactory, UserProfileFactory
from staylist.rentals.models import Review
from staylist.rentals.services import reviews as review_service


@pytest.mark.django_db
class TestReviewService:
    def setup_method(self):
        self.listing = ListingFactory(owner_id="host")

    @pytest.mark.parametrize("stars", [0, 6, 4.5, "5", True, None])
    def test_stars_must_be_integer_1_to_5(self, stars):
        with pytest.raises(ValidationError):
            review_service.create(self.listing.id, "guest", stars)
        assert not Review.objects.exists()

    def test_create(self):
        review = review_service.create(self.listing.id, "guest", 5, "Great stay")
        assert review.stars == 5
        assert review.text == "Great stay"
        assert review.listing_id == self.listing.id

    def test_missing_listing(self):
        with pytest.raises(NotFound):
            review_service.create(999999, "guest", 4)

    def test_owner_cannot_review_own_listing(self):
        with pytest.raises(ValidationError):
            review_service.create(self.listing.id, "host", 5)

    def test_anonymous(self):
        with pytest.raises(Unauthorized):
            review_service.create(self.listing.id, None, 5)

    def test_summary_for_listing(self):
        for stars in (5, 5, 4, 1):
            ReviewFactory(listing=self.listing, stars=stars)
        ReviewFactory(stars=2)  # other listing

        summary = review_service.summary_for_listing(self.listing.id)
        assert summary.total_reviews == 4
        assert summary.average_stars == 3.75
        assert summary.count_for_stars == {1: 1, 2: 0, 3: 0, 4: 1, 5: 2}

    def test_empty_summary(self):
        summary = review_service.summary_for_listing(self.listing.id)
        assert summary.total_reviews == 0
        assert summary.average_stars is None
        assert summary.count_for_stars == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_summary_for_owner_highlights_latest_written(self):
        second = ListingFactory(owner_id="host")
        now = timezone.now()
        rows = [
            ReviewFactory(listing=self.listing, stars=5, text="First"),
            ReviewFactory(listing=second, stars=4, text="Second"),
            ReviewFactory(listing=self.listing, stars=3, text=""),
            ReviewFactory(listing=second, stars=5, text="Third"),
            ReviewFactory(listing=self.listing, stars=4, text="Fourth"),
        ]
        for age, review in enumerate(reversed(rows)):
            Review.objects.filter(pk=review.pk).update(created_at=now - timedelta(hours=age))
        ReviewFactory(stars=1, text="Elsewhere")

        summary = review_service.summary_for_owner("host")
        assert summary.total_reviews == 5
        assert summary.count_for_stars[5] == 2
        assert [r.text for r in summary.highlights] == ["Fourth", "Third", "Second"]

    def test_list_by_listing(self):
        older = ReviewFactory(listing=self.listing)
        newer = ReviewFactory(listing=self.listing)
        assert review_service.list_by_listing(self.listing.id) == [newer, older]


@pytest.mark.django_db
class TestReviewApi:
    def setup_method(self):
        self.client = APIClient()
        self.listing = ListingFactory(owner_id="host")

    def _auth(self, user_id):
        self.client.force_authenticate(user=TokenUser({"user_id": user_id}))

    def test_create_and_read(self):
        UserProfileFactory(user_id="guest", username="", first_name="Ana", last_name="Lima")
        self._auth("guest")
        resp = self.client.post(
            "/api/reviews/", {"listing_id": self.listing.id, "stars": 4, "text": "Nice"}, format="json",
        )
        assert resp.status_code == 201, resp.data
        assert resp.data["author"]["display_name"] == "Ana Lima"

        resp = self.client.get(f"/api/reviews/{resp.data['id']}/")
        assert resp.status_code == 200
        assert resp.data["stars"] == 4

    def test_create_requires_auth(self):
        resp = self.client.post("/api/reviews/", {"listing_id": self.listing.id, "stars": 4}, format="json")
        assert resp.status_code == 401

    def test_invalid_stars(self):
        self._auth("guest")
        resp = self.client.post("/api/reviews/", {"listing_id": self.listing.id, "stars": 9}, format="json")
        assert resp.status_code == 400
        assert "stars" in resp.data

    def test_reviews_are_immutable(self):
        review = ReviewFactory(listing=self.listing, author_id="guest")
        self._auth("guest")
        assert self.client.patch(f"/api/reviews/{review.id}/", {"stars": 1}, format="json").status_code == 405
        assert self.client.delete(f"/api/reviews/{review.id}/").status_code == 405

    def test_list_filter_by_listing(self):
        mine = ReviewFactory(listing=self.listing)
        ReviewFactory()
        resp = self.client.get("/api/reviews/", {"listing": self.listing.id})
        assert resp.status_code == 200
        assert [r["id"] for r in resp.data["results"]] == [mine.id]

    def test_summary_endpoint(self):
        ReviewFactory(listing=self.listing, stars=5, text="Lovely")
        ReviewFactory(listing=self.listing, stars=3, text="")

        resp = self.client.get("/api/reviews/summary/", {"listing": self.listing.id})
        assert resp.status_code == 200
        assert resp.data["total_reviews"] == 2
        assert resp.data["average_stars"] == 4.0
        assert resp.data["count_for_stars"][5] == 1

        resp = self.client.get("/api/reviews/summary/", {"owner": "host"})
        assert [h["text"] for h in resp.data["highlights"]] == ["Lovely"]

    def test_summary_needs_exactly_one_scope(self):
        assert self.client.get("/api/reviews/summary/").status_code == 400
        assert self.client.get("/api/reviews/summary/", {"listing": 1, "owner": "host"}).status_code == 400
        assert self.client.get("/api/reviews/summary/", {"listing": "x"}).status_code == 400
