import logging

from drf_spectacular.utils import extend_schema_view, extend_schema, OpenApiResponse
from rest_framework import viewsets, permissions, status
from rest_framework.response import Response

from ..permissions import caller_id
from ..serializers import FavoriteCreateSerializer, FavoriteStatusSerializer, ListingSerializer
from ..services import favorites
from ..services.listings import get_listing
from ..throttling import ScopedRateThrottleIsolated

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="My favorites",
        description="Listings saved by the caller, most recently saved first",
        responses={200: ListingSerializer(many=True)},
    ),
    create=extend_schema(
        summary="Save a listing",
        request=FavoriteCreateSerializer,
        responses={
            201: FavoriteStatusSerializer,
            400: OpenApiResponse(description="Already in favorites"),
            404: OpenApiResponse(description="Listing not found"),
        },
    ),
    retrieve=extend_schema(
        summary="Favorite status of a listing",
        responses={
            200: FavoriteStatusSerializer,
            404: OpenApiResponse(description="Listing not found"),
        },
    ),
    destroy=extend_schema(
        summary="Remove a listing from favorites",
        responses={
            204: OpenApiResponse(description="Removed"),
            404: OpenApiResponse(description="Listing is not in favorites"),
        },
    ),
)
class FavoriteViewSet(viewsets.ViewSet):
    """The caller's favorites, addressed by listing id."""
    permission_classes = (permissions.IsAuthenticated,)
    throttle_classes = [ScopedRateThrottleIsolated]
    lookup_field = "listing_id"
    lookup_value_regex = r"\d+"

    def get_throttles(self):
        self.throttle_scope = "favorites_mutation" if self.action in ("create", "destroy") else None
        return super().get_throttles()

    def _status(self, uid, listing_id):
        return {
            "listing_id": listing_id,
            "is_favorited": favorites.is_favorited(uid, listing_id),
            "favorite_count": favorites.count_for_listing(listing_id),
        }

    def list(self, request):
        listings = favorites.list_for_user(caller_id(request))
        return Response(ListingSerializer(listings, many=True, context={"request": request}).data)

    def create(self, request):
        payload = FavoriteCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        uid = caller_id(request)
        favorite = favorites.add(uid, payload.validated_data["listing_id"])
        return Response(self._status(uid, favorite.listing_id), status=status.HTTP_201_CREATED)

    def retrieve(self, request, listing_id=None):
        listing = get_listing(listing_id)
        return Response(self._status(caller_id(request), listing.pk))

    def destroy(self, request, listing_id=None):
        favorites.remove(caller_id(request), int(listing_id))
        return Response(status=status.HTTP_204_NO_CONTENT)
