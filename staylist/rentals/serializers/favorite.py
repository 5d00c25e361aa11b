from rest_framework import serializers


class FavoriteCreateSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField(min_value=1)


class FavoriteStatusSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField()
    is_favorited = serializers.BooleanField()
    favorite_count = serializers.IntegerField()
