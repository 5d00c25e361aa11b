from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    listing = models.ForeignKey(
        "rentals.Listing",
        on_delete=models.SET_NULL,
        null=True,
        related_name="reviews",
    )
    author_id = models.CharField(max_length=64, db_index=True)

    stars = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    text = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["listing", "stars"], name="review_listing_stars_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stars__gte=1) & models.Q(stars__lte=5),
                name="review_stars_1_to_5",
            ),
        ]

    def __str__(self):
        return f"Review {self.id} on {self.listing_id} by {self.author_id}"
