from django.db import models


class Favorite(models.Model):
    """Membership of a listing in a user's favorites."""
    user_id = models.CharField(max_length=64, db_index=True)
    listing = models.ForeignKey(
        "rentals.Listing",
        on_delete=models.SET_NULL,
        null=True,
        related_name="favorites",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user_id", "listing"], name="favorite_unique_user_listing"),
        ]

    def __str__(self):
        return f"Favorite listing {self.listing_id} by user {self.user_id}"
