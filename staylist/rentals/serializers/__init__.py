from .listing import ListingSerializer, ListingSearchParamsSerializer, CalendarParamsSerializer
from .booking import (
    BookingSerializer, BookingCreateSerializer, BookingStatusSerializer, BookingStatsSerializer,
)
from .review import ReviewSerializer, ReviewCreateSerializer, ReviewSummarySerializer
from .favorite import FavoriteCreateSerializer, FavoriteStatusSerializer
from .common import DateRangeSerializer, CalendarDaySerializer, ReviewShortSerializer

__all__ = [
    "ListingSerializer",
    "ListingSearchParamsSerializer",
    "CalendarParamsSerializer",
    "BookingSerializer",
    "BookingCreateSerializer",
    "BookingStatusSerializer",
    "BookingStatsSerializer",
    "ReviewSerializer",
    "ReviewCreateSerializer",
    "ReviewSummarySerializer",
    "FavoriteCreateSerializer",
    "FavoriteStatusSerializer",
    "DateRangeSerializer",
    "CalendarDaySerializer",
    "ReviewShortSerializer",
]
