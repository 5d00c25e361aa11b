from django.core.validators import MinValueValidator
from django.db import models


class Listing(models.Model):
    class Category(models.TextChoices):
        APARTMENT = "apartment", "Apartment"
        HOUSE = "house", "House"
        HOTEL = "hotel", "Hotel"
        GUESTHOUSE = "guesthouse", "Guesthouse"
        HOSTEL = "hostel", "Hostel"
        BNB = "bnb", "Bed & breakfast"
        OTHER = "other", "Other"

    # External identity-provider id; no FK on purpose
    owner_id = models.CharField(max_length=64, db_index=True)

    title = models.CharField(max_length=100)
    description = models.TextField()
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.APARTMENT,
    )
    price_per_night = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    beds = models.PositiveSmallIntegerField(db_index=True)
    baths = models.PositiveSmallIntegerField(default=1)
    city = models.CharField(max_length=100)
    country = models.CharField(max_length=100)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["category"], name="listing_category_idx"),
            models.Index(fields=["owner_id", "created_at"], name="listing_owner_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_night__gte=1),
                name="listing_price_positive",
            ),
        ]

    def __str__(self):
        return self.title

    @property
    def image_urls(self):
        return [image.url for image in self.images.all()]


class ListingImage(models.Model):
    listing = models.ForeignKey(Listing, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"Image #{self.pk} for Listing #{self.listing_id}"
