import logging

from django.db.models import Q
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiResponse
)
from rest_framework import mixins, viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from staylist.users.identity import lookup_identities

from ..exceptions import ValidationError
from ..models import Booking
from ..pagination import RecentPagination
from ..permissions import IsBookingGuestOrListingOwner, caller_id
from ..serializers import (
    BookingCreateSerializer, BookingSerializer, BookingStatsSerializer,
)
from ..services import bookings as ledger
from ..throttling import ScopedRateThrottleIsolated
from .filters import BookingFilter

logger = logging.getLogger(__name__)

ROLES = ("guest", "owner")


@extend_schema_view(
    list=extend_schema(
        summary="List bookings",
        description="Bookings where the caller is the guest or the listing owner",
        parameters=[
            OpenApiParameter("role", OpenApiTypes.STR, description="`guest` (my trips) or `owner` (incoming requests)"),
        ],
        responses={
            200: BookingSerializer(many=True),
            400: OpenApiResponse(description="Invalid parameters"),
        }
    ),
    create=extend_schema(
        summary="Request a booking",
        description=(
            "Create a pending booking. Dates must not overlap a confirmed stay; "
            "overlapping pending requests are accepted."
        ),
        request=BookingCreateSerializer,
        responses={
            201: BookingSerializer,
            400: OpenApiResponse(description="Validation error"),
            401: OpenApiResponse(description="Authentication required"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    retrieve=extend_schema(
        summary="Get booking details",
        responses={
            200: BookingSerializer,
            404: OpenApiResponse(description="Booking not found"),
        }
    ),
)
class BookingViewSet(mixins.CreateModelMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    ViewSet for bookings.

    Guests request stays; listing owners confirm or reject them.
    """
    serializer_class = BookingSerializer
    permission_classes = (permissions.IsAuthenticated, IsBookingGuestOrListingOwner)
    pagination_class = RecentPagination
    filterset_class = BookingFilter
    throttle_classes = [ScopedRateThrottleIsolated]
    lookup_value_regex = r"\d+"

    def get_throttles(self):
        mutating = self.action in ("create", "confirm", "reject")
        self.throttle_scope = "bookings_mutation" if mutating else None
        return super().get_throttles()

    def get_queryset(self):
        """Filter bookings by the caller's role."""
        uid = caller_id(self.request)
        role = self.request.query_params.get("role")
        if role and role not in ROLES:
            raise ValidationError({"role": [f"Role must be one of: {', '.join(ROLES)}."]})

        if role == "guest":
            return ledger.list_by_user(uid)
        if role == "owner":
            return ledger.list_for_owner(uid)
        return (
            Booking.objects
            .filter(Q(guest_id=uid) | Q(listing__owner_id=uid))
            .select_related("listing")
            .order_by("-created_at", "-id")
        )

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        rows = page if page is not None else list(queryset)
        context = self.get_serializer_context()
        context["identities"] = lookup_identities({b.guest_id for b in rows})
        data = BookingSerializer(rows, many=True, context=context).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)

    def create(self, request, *args, **kwargs):
        payload = BookingCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        booking = ledger.create(
            listing_id=payload.validated_data["listing_id"],
            guest_id=caller_id(request),
            start_date=payload.validated_data["start_date"],
            end_date=payload.validated_data["end_date"],
        )
        return Response(self.get_serializer(booking).data, status=status.HTTP_201_CREATED)

    def _decide(self, request, pk, new_status):
        booking = ledger.update_status(pk, caller_id(request), new_status)
        return Response(self.get_serializer(booking).data)

    @extend_schema(
        summary="Confirm booking",
        description="Confirm a pending booking (listing owner only)",
        request=None,
        responses={
            200: BookingSerializer,
            400: OpenApiResponse(description="Not pending, or dates already taken"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Booking not found"),
        }
    )
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated])
    def confirm(self, request, pk=None):
        return self._decide(request, pk, Booking.CONFIRMED)

    @extend_schema(
        summary="Reject booking",
        description="Reject a pending booking (listing owner only)",
        request=None,
        responses={
            200: BookingSerializer,
            400: OpenApiResponse(description="Not pending"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Booking not found"),
        }
    )
    @action(detail=True, methods=['post'], permission_classes=[permissions.IsAuthenticated])
    def reject(self, request, pk=None):
        return self._decide(request, pk, Booking.CANCELED)

    @extend_schema(
        summary="Booking counters",
        description="How many bookings the caller has made, and received on their listings",
        responses={200: BookingStatsSerializer},
    )
    @action(detail=False, methods=['get'])
    def stats(self, request):
        uid = caller_id(request)
        incoming = ledger.list_for_owner(uid)
        return Response({
            "as_guest": ledger.count_for_user(uid),
            "as_owner": incoming.count(),
            "pending_for_owner": incoming.filter(status=Booking.PENDING).count(),
        })
