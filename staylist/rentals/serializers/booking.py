from drf_spectacular.utils import extend_schema_field, OpenApiTypes
from rest_framework import serializers

from staylist.users.identity import lookup_identities
from staylist.users.serializers import PublicUserSerializer

from ..models import Booking
from ..permissions import caller_id
from .common import identity_payload


class BookingSerializer(serializers.ModelSerializer):
    """
    Read projection of a booking.

    Pass ``identities`` (user id -> Identity) in the context to resolve guests
    in one provider call for a whole list.
    """
    listing_id = serializers.IntegerField(read_only=True, allow_null=True)
    listing_title = serializers.CharField(source="listing.title", read_only=True, allow_null=True)
    guest = serializers.SerializerMethodField()
    nights = serializers.IntegerField(read_only=True)

    # Action flags for the current caller
    can_confirm = serializers.SerializerMethodField()
    can_reject = serializers.SerializerMethodField()
    can_withdraw = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = (
            "id",
            "listing_id", "listing_title",
            "guest_id", "guest",
            "start_date", "end_date", "nights",
            "status", "created_at",
            "can_confirm", "can_reject", "can_withdraw",
        )
        read_only_fields = fields

    @extend_schema_field(PublicUserSerializer)
    def get_guest(self, obj):
        identities = self.context.get("identities")
        if identities is None:
            identities = lookup_identities([obj.guest_id])
        return identity_payload(obj.guest_id, identities)

    def _caller(self):
        request = self.context.get("request")
        return caller_id(request) if request else None

    def _is_owner(self, obj):
        listing = getattr(obj, "listing", None)
        uid = self._caller()
        return bool(uid and listing is not None and listing.owner_id == uid)

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_confirm(self, obj):
        return self._is_owner(obj) and obj.status == Booking.PENDING

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_reject(self, obj):
        return self._is_owner(obj) and obj.status == Booking.PENDING

    @extend_schema_field(OpenApiTypes.BOOL)
    def get_can_withdraw(self, obj):
        uid = self._caller()
        return bool(uid and obj.guest_id == uid and obj.status != Booking.CONFIRMED)


class BookingCreateSerializer(serializers.Serializer):
    listing_id = serializers.IntegerField(min_value=1)
    start_date = serializers.DateField(
        error_messages={"invalid": "Invalid date or format. Expected YYYY-MM-DD and a real calendar date."}
    )
    end_date = serializers.DateField(
        error_messages={"invalid": "Invalid date or format. Expected YYYY-MM-DD and a real calendar date."}
    )


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Booking.CONFIRMED, Booking.CANCELED])


class BookingStatsSerializer(serializers.Serializer):
    as_guest = serializers.IntegerField()
    as_owner = serializers.IntegerField()
    pending_for_owner = serializers.IntegerField()
