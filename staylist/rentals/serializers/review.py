from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from staylist.users.identity import lookup_identities
from staylist.users.serializers import PublicUserSerializer

from ..models import Review
from .common import ReviewShortSerializer, identity_payload


class ReviewSerializer(serializers.ModelSerializer):
    listing_id = serializers.IntegerField(read_only=True, allow_null=True)
    author = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ("id", "listing_id", "author_id", "author", "stars", "text", "created_at")
        read_only_fields = fields

    @extend_schema_field(PublicUserSerializer)
    def get_author(self, obj):
        identities = self.context.get("identities")
        if identities is None:
            identities = lookup_identities([obj.author_id])
        return identity_payload(obj.author_id, identities)


class ReviewCreateSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField(min_value=1)
    stars = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "min_value": "Rating must be 1-5.",
            "max_value": "Rating must be 1-5.",
        },
    )
    text = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)


class ReviewSummarySerializer(serializers.Serializer):
    total_reviews = serializers.IntegerField()
    average_stars = serializers.FloatField(allow_null=True)
    count_for_stars = serializers.DictField(child=serializers.IntegerField())
    highlights = ReviewShortSerializer(many=True)
