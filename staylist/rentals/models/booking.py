from django.db import models

from staylist.rentals.intervals import Interval, nights_between


class Booking(models.Model):
    """Stay request made by a guest for a listing."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (CANCELED, "Canceled"),
    ]

    # pending -> confirmed | canceled; both targets are terminal
    TRANSITIONS = {
        PENDING: frozenset({CONFIRMED, CANCELED}),
        CONFIRMED: frozenset(),
        CANCELED: frozenset(),
    }

    # Deleting a listing detaches its booking history instead of erasing it
    listing = models.ForeignKey(
        "rentals.Listing",
        on_delete=models.SET_NULL,
        null=True,
        related_name="bookings",
    )
    guest_id = models.CharField(max_length=64, db_index=True)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["listing", "status", "start_date", "end_date"],
                name="booking_overlap_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.guest_id} → {self.listing_id} [{self.status}]"

    @classmethod
    def can_transition(cls, current, target):
        return target in cls.TRANSITIONS.get(current, ())

    @property
    def interval(self):
        return Interval(self.start_date, self.end_date)

    @property
    def nights(self):
        return nights_between(self.start_date, self.end_date)
