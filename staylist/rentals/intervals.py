"""
Half-open date intervals.

A stay is the range [start, end): the guest sleeps on ``start`` and leaves on
``end``. Every overlap check in the project, in Python or in SQL, goes through
``Interval.overlaps`` / ``Interval.overlap_q`` so a checkout day never collides
with the next guest's check-in day.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from django.db.models import Q

ONE_DAY = timedelta(days=1)


def as_date(value):
    """Drop the time-of-day part; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def nights_between(start, end) -> int:
    """Number of nights, rounding a partial day up."""
    return math.ceil((end - start) / ONE_DAY)


@dataclass(frozen=True)
class Interval:
    start: date
    end: date

    def __post_init__(self):
        if not self.end > self.start:
            raise ValueError(f"Interval end ({self.end}) must be after start ({self.start})")

    @classmethod
    def from_values(cls, start, end) -> "Interval":
        return cls(as_date(start), as_date(end))

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    @property
    def nights(self) -> int:
        return nights_between(self.start, self.end)

    def days(self):
        day = self.start
        while day < self.end:
            yield day
            day += ONE_DAY

    def overlap_q(self, prefix: str = "") -> Q:
        """ORM filter matching rows whose [start_date, end_date) overlaps self."""
        return Q(**{
            f"{prefix}start_date__lt": self.end,
            f"{prefix}end_date__gt": self.start,
        })

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
