"""Favorites Ledger: a set of (user, listing) pairs."""

import logging

from django.conf import settings
from django.db import IntegrityError, transaction

from ..exceptions import NotFound, Unauthorized, ValidationError
from ..models import Favorite, Listing
from .aggregation import annotate_listings, attach_authors
from .listings import get_listing

logger = logging.getLogger(__name__)


def add(user_id, listing_id) -> Favorite:
    if not user_id:
        raise Unauthorized("You must be logged in to save favorites.")
    listing = get_listing(listing_id)
    try:
        with transaction.atomic():
            favorite = Favorite.objects.create(user_id=user_id, listing=listing)
    except IntegrityError:
        raise ValidationError({"listing_id": ["This listing is already in your favorites."]})
    logger.debug("Favorite added: user=%s listing=%s", user_id, listing.pk)
    return favorite


def remove(user_id, listing_id) -> None:
    if not user_id:
        raise Unauthorized("You must be logged in to change favorites.")
    deleted, _ = Favorite.objects.filter(user_id=user_id, listing_id=listing_id).delete()
    if not deleted:
        raise NotFound("This listing is not in your favorites.")
    logger.debug("Favorite removed: user=%s listing=%s", user_id, listing_id)


def is_favorited(user_id, listing_id) -> bool:
    if not user_id:
        return False
    return Favorite.objects.filter(user_id=user_id, listing_id=listing_id).exists()


def count_for_listing(listing_id) -> int:
    return Favorite.objects.filter(listing_id=listing_id).count()


def list_for_user(user_id):
    """The user's saved listings, most recently saved first, with aggregates."""
    limit = int(getattr(settings, "RENTALS_RECENT_LIMIT", 100))
    ids = list(
        Favorite.objects
        .filter(user_id=user_id, listing__isnull=False)
        .order_by("-created_at", "-id")
        .values_list("listing_id", flat=True)[:limit]
    )
    rows = annotate_listings(Listing.objects.filter(pk__in=ids), viewer_id=user_id).prefetch_related("images")
    by_id = {listing.pk: listing for listing in rows}
    listings = [by_id[pk] for pk in ids if pk in by_id]
    return attach_authors(listings)
