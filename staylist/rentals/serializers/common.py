from rest_framework import serializers

from staylist.users.identity import Identity
from staylist.users.serializers import PublicUserSerializer


def identity_payload(user_id, identities=None):
    """Public projection of a user; unknown ids keep their id with an empty name."""
    if not user_id:
        return None
    identity = (identities or {}).get(user_id)
    if identity is None:
        identity = Identity(id=user_id, display_name="")
    return identity.as_dict()


class DateRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField(source="start")
    end_date = serializers.DateField(source="end")
    nights = serializers.IntegerField()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=["available", "booked"])


class ReviewShortSerializer(serializers.Serializer):
    """Public projection for the latest written reviews on host pages."""
    id = serializers.IntegerField()
    listing_id = serializers.IntegerField(allow_null=True)
    stars = serializers.IntegerField()
    text = serializers.CharField(allow_blank=True)
    author = PublicUserSerializer(allow_null=True)
    created_at = serializers.DateTimeField()
