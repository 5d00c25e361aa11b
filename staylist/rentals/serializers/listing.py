from django.conf import settings
from django.db import transaction
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from staylist.users.serializers import PublicUserSerializer

from ..models import Listing, ListingImage
from .common import identity_payload

MAX_IMAGES = 20


class ListingSerializer(serializers.ModelSerializer):
    owner = serializers.SerializerMethodField(read_only=True)
    owner_id = serializers.CharField(read_only=True)
    category = serializers.ChoiceField(choices=Listing.Category.choices)
    image_urls = serializers.ListField(
        child=serializers.URLField(max_length=500),
        required=False,
        max_length=MAX_IMAGES,
    )

    # Read-time aggregates (see services.aggregation.annotate_listings)
    average_stars = serializers.FloatField(read_only=True, allow_null=True)
    review_count = serializers.IntegerField(read_only=True)
    favorite_count = serializers.IntegerField(read_only=True)
    is_favorited = serializers.BooleanField(read_only=True)
    viewer_booking_status = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = Listing
        fields = [
            "id", "title", "description", "category",
            "price_per_night", "beds", "baths", "city", "country",
            "image_urls",
            "owner", "owner_id",
            "average_stars", "review_count", "favorite_count",
            "is_favorited", "viewer_booking_status",
            "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "owner", "owner_id", "created_at", "updated_at",
            "average_stars", "review_count", "favorite_count",
            "is_favorited", "viewer_booking_status",
        ]

    @extend_schema_field(PublicUserSerializer(allow_null=True))
    def get_owner(self, obj):
        author = getattr(obj, "author", None)
        if author is not None:
            return author.as_dict()
        return identity_payload(obj.owner_id)

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title must not be blank.")
        return value

    def validate_price_per_night(self, value):
        if value < 1:
            raise serializers.ValidationError("Price per night must be at least 1.")
        return value

    @staticmethod
    def _save_images(listing, urls):
        listing.images.all().delete()
        ListingImage.objects.bulk_create(
            ListingImage(listing=listing, url=url, position=position)
            for position, url in enumerate(urls)
        )

    def create(self, validated_data):
        urls = validated_data.pop("image_urls", [])
        with transaction.atomic():
            listing = super().create(validated_data)
            self._save_images(listing, urls)
        return listing

    def update(self, instance, validated_data):
        urls = validated_data.pop("image_urls", None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if urls is not None:
                self._save_images(instance, urls)
        return instance


class ListingSearchParamsSerializer(serializers.Serializer):
    """Query string of GET /api/listings/."""
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
    category = serializers.ChoiceField(choices=Listing.Category.choices, required=False)
    min_beds = serializers.IntegerField(required=False, min_value=1)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    cursor = serializers.IntegerField(required=False, min_value=1)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=getattr(settings, "RENTALS_SEARCH_MAX_PAGE_SIZE", 50),
    )

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and end <= start:
            raise serializers.ValidationError({"end_date": "End date must be after start date."})
        return attrs


class CalendarParamsSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
