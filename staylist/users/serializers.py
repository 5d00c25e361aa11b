from rest_framework import serializers


class PublicUserSerializer(serializers.Serializer):
    """Public projection of an identity-provider user."""
    id = serializers.CharField()
    display_name = serializers.CharField(allow_blank=True)
    avatar_url = serializers.URLField(allow_null=True, required=False)
