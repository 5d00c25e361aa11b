"""
Booking Ledger.

Lifecycle of a booking:

    pending --confirm--> confirmed
    pending --reject---> canceled

Only CONFIRMED bookings block dates. Several PENDING requests may overlap
each other; the owner resolves the conflict when confirming.
"""

import logging

from django.conf import settings
from django.db import transaction

from ..exceptions import NotFound, Unauthorized, ValidationError
from ..intervals import Interval
from ..models import Booking
from .availability import confirmed_overlaps, is_available
from .listings import get_listing

logger = logging.getLogger(__name__)


def _recent_limit() -> int:
    return int(getattr(settings, "RENTALS_RECENT_LIMIT", 100))


def _require_caller(caller_id, message="Authentication required."):
    if not caller_id:
        raise Unauthorized(message)


def list_by_listing(listing_id):
    """Latest bookings of a listing, newest first."""
    qs = Booking.objects.filter(listing_id=listing_id).order_by("-created_at", "-id")
    return list(qs[:_recent_limit()])


def list_confirmed_date_ranges(listing_id):
    rows = (
        Booking.objects
        .filter(listing_id=listing_id, status=Booking.CONFIRMED)
        .order_by("start_date", "id")
        .values_list("start_date", "end_date")
    )
    return [Interval(start, end) for start, end in rows]


def get_for_user_and_listing(user_id, listing_id):
    """The caller's most recent booking on a listing, or None."""
    if not user_id:
        return None
    return (
        Booking.objects
        .filter(guest_id=user_id, listing_id=listing_id)
        .order_by("-created_at", "-id")
        .first()
    )


def create(listing_id, guest_id, start_date, end_date) -> Booking:
    _require_caller(guest_id, "You must be logged in to book a listing.")
    try:
        interval = Interval.from_values(start_date, end_date)
    except ValueError:
        raise ValidationError({"end_date": ["End date must be after start date."]})

    with transaction.atomic():
        listing = get_listing(listing_id, for_update=True)

        if listing.owner_id == guest_id:
            raise ValidationError({"non_field_errors": ["You cannot book your own listing."]})

        if not is_available(listing.pk, interval):
            raise ValidationError(
                {"non_field_errors": ["Requested dates overlap with a confirmed booking."]}
            )

        if getattr(settings, "RENTALS_ONE_BOOKING_PER_GUEST", False):
            active = (
                Booking.objects
                .filter(listing=listing, guest_id=guest_id)
                .exclude(status=Booking.CANCELED)
            )
            if active.exists():
                raise ValidationError(
                    {"non_field_errors": ["You already have an active booking for this listing."]}
                )

        pending_ids = list(
            Booking.objects
            .filter(listing=listing, status=Booking.PENDING)
            .filter(interval.overlap_q())
            .values_list("pk", flat=True)
        )
        booking = Booking.objects.create(
            listing=listing,
            guest_id=guest_id,
            start_date=interval.start,
            end_date=interval.end,
            status=Booking.PENDING,
        )

    if pending_ids:
        logger.info(
            "ConflictNotEnforced: booking %s on listing %s overlaps pending %s",
            booking.pk, listing.pk, pending_ids,
        )
    logger.info("Booking %s created: listing=%s guest=%s %s", booking.pk, listing.pk, guest_id, interval)
    return booking


def update_status(booking_id, owner_id, new_status) -> Booking:
    """Owner decision on a pending request (confirm or reject)."""
    if new_status not in (Booking.CONFIRMED, Booking.CANCELED):
        raise ValidationError({"status": [f"Status must be '{Booking.CONFIRMED}' or '{Booking.CANCELED}'."]})
    _require_caller(owner_id)

    with transaction.atomic():
        booking = Booking.objects.filter(pk=booking_id).first()
        if booking is None or booking.listing_id is None:
            raise NotFound("Booking not found.")

        listing = get_listing(booking.listing_id, for_update=True)
        # status may have moved while we waited for the lock
        booking.refresh_from_db(fields=["status"])

        if listing.owner_id != owner_id:
            raise Unauthorized("Only the listing owner can change the booking status.")

        if not Booking.can_transition(booking.status, new_status):
            raise ValidationError(
                {"status": [f"Only pending bookings can change status (current: {booking.status})."]}
            )

        if new_status == Booking.CONFIRMED:
            if confirmed_overlaps(listing.pk, booking.interval, exclude_pk=booking.pk).exists():
                raise ValidationError(
                    {"non_field_errors": ["Dates overlap with an already confirmed booking."]}
                )

        previous = booking.status
        booking.status = new_status
        booking.save(update_fields=["status"])

        auto_canceled = 0
        if new_status == Booking.CONFIRMED and getattr(settings, "RENTALS_AUTO_CANCEL_OVERLAPPING_PENDING", False):
            auto_canceled = (
                Booking.objects
                .filter(listing=listing, status=Booking.PENDING)
                .filter(booking.interval.overlap_q())
                .exclude(pk=booking.pk)
                .update(status=Booking.CANCELED)
            )

    logger.info("Booking %s: %s -> %s by owner %s", booking.pk, previous, new_status, owner_id)
    if auto_canceled:
        logger.info("Booking %s confirmed; auto-canceled %s overlapping pending request(s)", booking.pk, auto_canceled)
    return booking


def withdraw(user_id, listing_id, caller_id) -> int:
    """
    Remove the caller's own requests on a listing.

    Only pending and canceled rows are deleted; a confirmed stay must be
    handled by the owner, so its presence blocks the withdrawal.
    """
    if not caller_id or caller_id != user_id:
        raise Unauthorized("You can only withdraw your own bookings.")

    with transaction.atomic():
        own = Booking.objects.filter(guest_id=user_id, listing_id=listing_id)
        if own.filter(status=Booking.CONFIRMED).exists():
            raise ValidationError(
                {"non_field_errors": ["A confirmed booking cannot be withdrawn."]}
            )
        deleted, _ = own.delete()

    logger.info("Withdrew %s booking(s): listing=%s guest=%s", deleted, listing_id, user_id)
    return deleted


def count_for_user(user_id) -> int:
    if not user_id:
        return 0
    return Booking.objects.filter(guest_id=user_id).count()


def count_by_listing(listing_id) -> int:
    return Booking.objects.filter(listing_id=listing_id).count()


def list_by_user(user_id, status=None):
    """The guest's trips, earliest stay first."""
    qs = (
        Booking.objects
        .filter(guest_id=user_id)
        .select_related("listing")
        .order_by("start_date", "id")
    )
    if status:
        qs = qs.filter(status=status)
    return qs


def list_for_owner(owner_id, status=None):
    """Incoming requests on the owner's listings, newest first."""
    qs = (
        Booking.objects
        .filter(listing__owner_id=owner_id)
        .select_related("listing")
        .order_by("-created_at", "-id")
    )
    if status:
        qs = qs.filter(status=status)
    return qs


def nights(booking: Booking) -> int:
    return booking.nights
