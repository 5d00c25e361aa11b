"""Reviews: immutable star ratings with optional text."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings
from django.db.models import Avg, Count, Q

from ..exceptions import Unauthorized, ValidationError
from ..models import Review
from .listings import get_listing

logger = logging.getLogger(__name__)

STAR_VALUES = (1, 2, 3, 4, 5)
HIGHLIGHTS = 3


@dataclass
class ReviewSummary:
    total_reviews: int
    average_stars: Optional[float]
    count_for_stars: dict
    highlights: list = field(default_factory=list)


def create(listing_id, author_id, stars, text="") -> Review:
    if not author_id:
        raise Unauthorized("You must be logged in to leave a review.")
    if isinstance(stars, bool) or not isinstance(stars, int) or stars not in STAR_VALUES:
        raise ValidationError({"stars": ["Rating must be an integer from 1 to 5."]})

    listing = get_listing(listing_id)
    if listing.owner_id == author_id:
        raise ValidationError({"non_field_errors": ["You cannot review your own listing."]})

    review = Review.objects.create(listing=listing, author_id=author_id, stars=stars, text=text or "")
    logger.info("Review %s created: listing=%s stars=%s", review.pk, listing.pk, stars)
    return review


def list_by_listing(listing_id):
    limit = int(getattr(settings, "RENTALS_RECENT_LIMIT", 100))
    return list(Review.objects.filter(listing_id=listing_id).order_by("-created_at", "-id")[:limit])


def _summarize(queryset) -> ReviewSummary:
    counts = {f"s{n}": Count("pk", filter=Q(stars=n)) for n in STAR_VALUES}
    stats = queryset.aggregate(total=Count("pk"), avg=Avg("stars"), **counts)
    return ReviewSummary(
        total_reviews=stats["total"],
        average_stars=stats["avg"],
        count_for_stars={n: stats[f"s{n}"] for n in STAR_VALUES},
    )


def summary_for_listing(listing_id) -> ReviewSummary:
    return _summarize(Review.objects.filter(listing_id=listing_id))


def summary_for_owner(owner_id) -> ReviewSummary:
    """Reviews across every listing of a host, plus the latest written ones."""
    reviews = Review.objects.filter(listing__owner_id=owner_id)
    summary = _summarize(reviews)
    summary.highlights = list(
        reviews.exclude(text="").select_related("listing").order_by("-created_at", "-id")[:HIGHLIGHTS]
    )
    return summary
