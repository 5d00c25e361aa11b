"""
Availability Index.

Not a stored index: every call reads the current CONFIRMED bookings, so the
answer can never be stale. PENDING requests do not block dates.
"""

import logging
from datetime import date

from ..exceptions import ValidationError
from ..intervals import Interval, as_date
from ..models import Booking

logger = logging.getLogger(__name__)

MAX_CALENDAR_DAYS = 366


def _interval_or_error(start, end) -> Interval:
    try:
        return Interval.from_values(start, end)
    except ValueError:
        raise ValidationError({"end_date": ["End date must be after start date."]})


def confirmed_overlaps(listing_id, interval: Interval, exclude_pk=None):
    """CONFIRMED bookings of a listing whose stay overlaps ``interval``."""
    qs = Booking.objects.filter(listing_id=listing_id, status=Booking.CONFIRMED).filter(interval.overlap_q())
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs


def excluded_listing_ids(start_date=None, end_date=None) -> set:
    """
    Ids of listings with at least one CONFIRMED booking overlapping
    [start_date, end_date). Without both bounds nothing is excluded.
    """
    if not start_date or not end_date:
        return set()
    interval = _interval_or_error(start_date, end_date)
    ids = (
        Booking.objects
        .filter(status=Booking.CONFIRMED, listing__isnull=False)
        .filter(interval.overlap_q())
        .values_list("listing_id", flat=True)
        .distinct()
    )
    return set(ids)


def is_available(listing_id, interval: Interval) -> bool:
    return not confirmed_overlaps(listing_id, interval).exists()


def booked_calendar(listing_id, start_date: date, end_date: date):
    """
    Day-by-day map of [start_date, end_date): ``booked`` when a CONFIRMED stay
    covers the night, ``available`` otherwise.
    """
    interval = _interval_or_error(start_date, end_date)
    if interval.nights > MAX_CALENDAR_DAYS:
        raise ValidationError({"end_date": [f"Calendar window is limited to {MAX_CALENDAR_DAYS} days."]})

    stays = [b.interval for b in confirmed_overlaps(listing_id, interval).only("start_date", "end_date")]
    return [
        {
            "date": as_date(day),
            "status": "booked" if any(stay.contains(day) for stay in stays) else "available",
        }
        for day in interval.days()
    ]
