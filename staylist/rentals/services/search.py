"""
Search/Pagination Engine.

Filters listings, ranks them by popularity (favorite count desc, id asc) and
returns one cursor page at a time. The cursor is the id of the first listing
of the requested page.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from django.conf import settings
from django.db.models import Q

from ..exceptions import ValidationError
from ..models import Listing
from ..pagination import keyset_window
from .aggregation import annotate_listings, attach_authors
from .availability import excluded_listing_ids

logger = logging.getLogger(__name__)

# min_beds value meaning "this many or more"
BEDS_OR_MORE = 5

RANK_FIELD = "favorite_count"


@dataclass(frozen=True)
class SearchCriteria:
    search_text: str = ""
    category: Optional[str] = None
    min_beds: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    viewer_id: Optional[str] = None


@dataclass
class SearchPage:
    items: list
    next_cursor: Optional[int]
    total_count: int


def default_limit() -> int:
    return int(getattr(settings, "RENTALS_SEARCH_PAGE_SIZE", 8))


def max_limit() -> int:
    return int(getattr(settings, "RENTALS_SEARCH_MAX_PAGE_SIZE", 50))


def resolve_limit(limit=None) -> int:
    if limit is None:
        return default_limit()
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= max_limit():
        raise ValidationError({"limit": [f"Limit must be an integer between 1 and {max_limit()}."]})
    return limit


def filter_listings(criteria: SearchCriteria, queryset=None):
    """Apply every search filter; no ordering, no annotations."""
    qs = Listing.objects.all() if queryset is None else queryset

    text = (criteria.search_text or "").strip()
    if text:
        qs = qs.filter(
            Q(city__icontains=text) | Q(country__icontains=text) | Q(title__icontains=text)
        )
    if criteria.category:
        qs = qs.filter(category=criteria.category)
    if criteria.min_beds is not None:
        if criteria.min_beds == BEDS_OR_MORE:
            qs = qs.filter(beds__gte=BEDS_OR_MORE)
        else:
            qs = qs.filter(beds=criteria.min_beds)
    if criteria.viewer_id:
        qs = qs.exclude(owner_id=criteria.viewer_id)

    excluded = excluded_listing_ids(criteria.start_date, criteria.end_date)
    if excluded:
        qs = qs.exclude(pk__in=excluded)
    return qs


def anchor_rank(cursor):
    """Current favorite count of the cursor listing, or None if it is gone."""
    return (
        annotate_listings(Listing.objects.filter(pk=cursor))
        .values_list(RANK_FIELD, flat=True)
        .first()
    )


def search_listings(criteria: SearchCriteria, cursor=None, limit=None) -> SearchPage:
    limit = resolve_limit(limit)
    base = filter_listings(criteria)
    total_count = base.count()

    anchor = None
    if cursor is not None:
        rank = anchor_rank(cursor)
        if rank is None:
            logger.info("Search cursor %s no longer exists; returning an empty page", cursor)
            return SearchPage(items=[], next_cursor=None, total_count=total_count)
        anchor = (rank, cursor)

    ranked = annotate_listings(base, criteria.viewer_id).prefetch_related("images")
    items, next_cursor = keyset_window(ranked, limit, RANK_FIELD, anchor=anchor)
    attach_authors(items)
    return SearchPage(items=items, next_cursor=next_cursor, total_count=total_count)
