"""
Aggregation Engine.

Derived per-listing metrics are computed at read time as correlated
subqueries, so they always reflect the current ledgers and can be used to
order and filter a queryset in a single round-trip.
"""

from dataclasses import dataclass
from typing import Optional

from django.db.models import (
    Avg, BooleanField, CharField, Count, Exists, FloatField, IntegerField,
    OuterRef, Subquery, Value,
)
from django.db.models.functions import Coalesce

from staylist.users.identity import lookup_identities

from ..exceptions import NotFound
from ..models import Booking, Favorite, Listing, Review


@dataclass(frozen=True)
class ListingAggregate:
    listing_id: int
    average_stars: Optional[float]
    review_count: int
    favorite_count: int
    is_favorited: bool
    viewer_booking_status: Optional[str]


def _count_subquery(queryset):
    counted = queryset.order_by().values("listing").annotate(n=Count("pk")).values("n")
    return Coalesce(Subquery(counted, output_field=IntegerField()), 0)


def annotate_listings(queryset, viewer_id=None):
    """
    Adds ``average_stars``, ``review_count``, ``favorite_count``,
    ``is_favorited`` and ``viewer_booking_status`` to every row.
    """
    reviews = Review.objects.filter(listing=OuterRef("pk"))
    favorites = Favorite.objects.filter(listing=OuterRef("pk"))
    average = reviews.order_by().values("listing").annotate(avg=Avg("stars")).values("avg")

    queryset = queryset.annotate(
        average_stars=Subquery(average, output_field=FloatField()),
        review_count=_count_subquery(reviews),
        favorite_count=_count_subquery(favorites),
    )

    if viewer_id:
        latest_booking = (
            Booking.objects
            .filter(listing=OuterRef("pk"), guest_id=viewer_id)
            .order_by("-created_at", "-id")
            .values("status")[:1]
        )
        return queryset.annotate(
            is_favorited=Exists(favorites.filter(user_id=viewer_id)),
            viewer_booking_status=Subquery(latest_booking, output_field=CharField()),
        )
    return queryset.annotate(
        is_favorited=Value(False, output_field=BooleanField()),
        viewer_booking_status=Value(None, output_field=CharField()),
    )


def aggregate_for_listing(listing_id, viewer_id=None) -> ListingAggregate:
    row = (
        annotate_listings(Listing.objects.filter(pk=listing_id), viewer_id)
        .values(
            "pk", "average_stars", "review_count", "favorite_count",
            "is_favorited", "viewer_booking_status",
        )
        .first()
    )
    if row is None:
        raise NotFound("Listing not found.")
    return ListingAggregate(
        listing_id=row["pk"],
        average_stars=row["average_stars"],
        review_count=row["review_count"],
        favorite_count=row["favorite_count"],
        is_favorited=bool(row["is_favorited"]),
        viewer_booking_status=row["viewer_booking_status"],
    )


def average_stars(listing_id):
    """Mean rating, or None when the listing has no reviews."""
    return Review.objects.filter(listing_id=listing_id).aggregate(avg=Avg("stars"))["avg"]


def attach_authors(listings):
    """Set ``author`` (an Identity or None) on each listing with one provider call."""
    identities = lookup_identities({listing.owner_id for listing in listings})
    for listing in listings:
        listing.author = identities.get(listing.owner_id)
    return listings
