from .listing import ListingViewSet
from .booking import BookingViewSet
from .favorite import FavoriteViewSet
from .review import ReviewViewSet
from .filters import BookingFilter, ReviewFilter

__all__ = [
    "ListingViewSet",
    "BookingViewSet",
    "FavoriteViewSet",
    "ReviewViewSet",
    "BookingFilter",
    "ReviewFilter",
]
