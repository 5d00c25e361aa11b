from .listing import Listing, ListingImage
from .booking import Booking
from .review import Review
from .favorite import Favorite

__all__ = [
    "Listing",
    "ListingImage",
    "Booking",
    "Review",
    "Favorite",
]
