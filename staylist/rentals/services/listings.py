from ..exceptions import NotFound
from ..models import Listing


def get_listing(listing_id, for_update=False) -> Listing:
    """Fetch a listing or raise NotFound; ``for_update`` locks the row (call inside atomic)."""
    queryset = Listing.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=listing_id)
    except (Listing.DoesNotExist, ValueError, TypeError):
        raise NotFound("Listing not found.")
