import logging

from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from staylist.users.identity import lookup_identities

from ..exceptions import Unauthorized, ValidationError
from ..models import Listing
from ..pagination import ListingCursorPagination
from ..permissions import IsListingOwnerOrReadOnly, caller_id
from ..serializers import (
    BookingSerializer, CalendarDaySerializer, CalendarParamsSerializer, DateRangeSerializer,
    ListingSearchParamsSerializer, ListingSerializer, ReviewSerializer,
)
from ..services import aggregation, availability
from ..services import bookings as ledger
from ..services import reviews as review_service
from ..services.listings import get_listing
from ..services.search import SearchCriteria, search_listings
from ..throttling import ScopedRateThrottleIsolated

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="Search listings",
        description=(
            "Listings ordered by popularity (favorite count desc, id asc), one cursor page at a time. "
            "The caller's own listings and listings with a confirmed stay in the requested window are excluded."
        ),
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR, description="Substring of city, country or title"),
            OpenApiParameter("category", OpenApiTypes.STR, description="Category (exact)"),
            OpenApiParameter("min_beds", OpenApiTypes.INT, description="Beds (exact; 5 means 5 or more)"),
            OpenApiParameter("start_date", OpenApiTypes.DATE, description="Check-in (YYYY-MM-DD)"),
            OpenApiParameter("end_date", OpenApiTypes.DATE, description="Check-out (YYYY-MM-DD)"),
            OpenApiParameter("cursor", OpenApiTypes.INT, description="next_cursor of the previous page"),
            OpenApiParameter("limit", OpenApiTypes.INT, description="Page size (1-50, default 8)"),
        ],
        responses={
            200: ListingSerializer(many=True),
            400: OpenApiResponse(description="Invalid search parameters"),
        }
    ),
    create=extend_schema(
        summary="Create listing",
        description="Create a new listing owned by the caller",
        responses={
            201: ListingSerializer,
            400: OpenApiResponse(description="Validation error"),
            401: OpenApiResponse(description="Authentication required"),
        }
    ),
    retrieve=extend_schema(
        summary="Get listing details",
        responses={
            200: ListingSerializer,
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    partial_update=extend_schema(
        summary="Update listing",
        description="Partially update a listing (owner only). `image_urls` replaces the whole gallery.",
        responses={
            200: ListingSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    destroy=extend_schema(
        summary="Delete listing",
        description="Delete a listing and its images (owner only). Bookings, reviews and favorites are kept detached.",
        responses={
            204: OpenApiResponse(description="Listing deleted"),
            403: OpenApiResponse(description="Permission denied"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
)
class ListingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for listings.

    Search on ``list``, owner-only mutation, and per-listing reads
    (booked dates, calendar, bookings, reviews, stats).
    """
    serializer_class = ListingSerializer
    permission_classes = (permissions.IsAuthenticatedOrReadOnly, IsListingOwnerOrReadOnly)
    pagination_class = ListingCursorPagination
    throttle_classes = [ScopedRateThrottleIsolated]
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_throttles(self):
        self.throttle_scope = "listings_search" if self.action == "list" else None
        return super().get_throttles()

    def get_queryset(self):
        """Listings with their read-time aggregates for the current viewer."""
        queryset = aggregation.annotate_listings(Listing.objects.all(), caller_id(self.request))
        return queryset.prefetch_related("images")

    def _fresh(self, pk):
        listing = self.get_queryset().get(pk=pk)
        return aggregation.attach_authors([listing])[0]

    def list(self, request, *args, **kwargs):
        params = ListingSearchParamsSerializer(data=request.query_params)
        if not params.is_valid():
            logger.warning("Invalid search parameters: %s", dict(params.errors))
            raise ValidationError(params.errors)
        data = params.validated_data

        criteria = SearchCriteria(
            search_text=data.get("search", ""),
            category=data.get("category"),
            min_beds=data.get("min_beds"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            viewer_id=caller_id(request),
        )
        page = search_listings(criteria, cursor=data.get("cursor"), limit=data.get("limit"))

        paginator = self.paginator
        paginator.next_cursor = page.next_cursor
        paginator.total_count = page.total_count
        return paginator.get_paginated_response(self.get_serializer(page.items, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        listing = self.get_object()
        aggregation.attach_authors([listing])
        return Response(self.get_serializer(listing).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        listing = serializer.save(owner_id=caller_id(request))
        logger.info("Listing %s created by %s", listing.pk, listing.owner_id)
        return Response(self.get_serializer(self._fresh(listing.pk)).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        listing = self.get_object()
        serializer = self.get_serializer(listing, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.get_serializer(self._fresh(listing.pk)).data)

    def perform_destroy(self, instance):
        pk = instance.pk
        instance.delete()
        logger.info("Listing %s deleted by %s", pk, caller_id(self.request))

    @extend_schema(
        summary="My listings",
        description="Listings owned by the caller, ranked like search results",
        parameters=[
            OpenApiParameter("cursor", OpenApiTypes.INT, description="next_cursor of the previous page"),
            OpenApiParameter("limit", OpenApiTypes.INT, description="Page size"),
        ],
        responses={200: ListingSerializer(many=True)},
    )
    @action(detail=False, methods=['get'], permission_classes=[permissions.IsAuthenticated])
    def mine(self, request):
        queryset = self.get_queryset().filter(owner_id=caller_id(request))
        page = self.paginate_queryset(queryset)
        aggregation.attach_authors(page)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(
        summary="Booked date ranges",
        description="Confirmed stays of a listing as half-open [start_date, end_date) ranges",
        responses={
            200: DateRangeSerializer(many=True),
            404: OpenApiResponse(description="Listing not found"),
        }
    )
    @action(detail=True, methods=['get'], url_path='booked-dates', permission_classes=[permissions.AllowAny])
    def booked_dates(self, request, pk=None):
        listing = get_listing(pk)
        ranges = ledger.list_confirmed_date_ranges(listing.pk)
        return Response(DateRangeSerializer(ranges, many=True).data)

    @extend_schema(
        summary="Availability calendar",
        description="Day-by-day availability of a listing for [start_date, end_date)",
        parameters=[
            OpenApiParameter("start_date", OpenApiTypes.DATE, required=True),
            OpenApiParameter("end_date", OpenApiTypes.DATE, required=True),
        ],
        responses={
            200: CalendarDaySerializer(many=True),
            400: OpenApiResponse(description="Invalid window"),
            404: OpenApiResponse(description="Listing not found"),
        },
        examples=[
            OpenApiExample(
                "Example response",
                value=[
                    {"date": "2024-06-01", "status": "available"},
                    {"date": "2024-06-02", "status": "booked"},
                ],
                response_only=True,
            )
        ],
    )
    @action(detail=True, methods=['get'], permission_classes=[permissions.AllowAny])
    def calendar(self, request, pk=None):
        listing = get_listing(pk)
        params = CalendarParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        days = availability.booked_calendar(
            listing.pk, params.validated_data["start_date"], params.validated_data["end_date"]
        )
        return Response(CalendarDaySerializer(days, many=True).data)

    @extend_schema(
        summary="Bookings of a listing",
        description="Latest booking requests for a listing (listing owner only)",
        responses={
            200: BookingSerializer(many=True),
            403: OpenApiResponse(description="Not the listing owner"),
            404: OpenApiResponse(description="Listing not found"),
        }
    )
    @action(detail=True, methods=['get'], url_path='bookings', url_name='bookings', permission_classes=[permissions.IsAuthenticated])
    def listing_bookings(self, request, pk=None):
        listing = get_listing(pk)
        if listing.owner_id != caller_id(request):
            raise Unauthorized("Only the listing owner can see its bookings.")
        rows = ledger.list_by_listing(listing.pk)
        context = self.get_serializer_context()
        context["identities"] = lookup_identities({b.guest_id for b in rows})
        return Response(BookingSerializer(rows, many=True, context=context).data)

    @extend_schema(
        summary="Reviews of a listing",
        description="Latest reviews of a listing, newest first",
        responses={
            200: ReviewSerializer(many=True),
            404: OpenApiResponse(description="Listing not found"),
        }
    )
    @action(detail=True, methods=['get'], url_path='reviews', url_name='reviews', permission_classes=[permissions.AllowAny])
    def listing_reviews(self, request, pk=None):
        listing = get_listing(pk)
        rows = review_service.list_by_listing(listing.pk)
        context = self.get_serializer_context()
        context["identities"] = lookup_identities({r.author_id for r in rows})
        return Response(ReviewSerializer(rows, many=True, context=context).data)

    @extend_schema(
        methods=['GET'],
        summary="My booking for a listing",
        description="The caller's most recent booking on this listing, or null",
        responses={200: BookingSerializer},
    )
    @extend_schema(
        methods=['DELETE'],
        summary="Withdraw my booking requests",
        description=(
            "Delete the caller's pending and canceled bookings on this listing. "
            "Refused while a confirmed booking exists."
        ),
        parameters=[
            OpenApiParameter("user_id", OpenApiTypes.STR, description="Whose bookings to withdraw (defaults to the caller)"),
        ],
        responses={
            200: OpenApiResponse(description="Number of deleted bookings"),
            400: OpenApiResponse(description="A confirmed booking exists"),
            403: OpenApiResponse(description="Not your bookings"),
            404: OpenApiResponse(description="Listing not found"),
        },
    )
    @action(
        detail=True, methods=['get', 'delete'], url_path='my-booking',
        permission_classes=[permissions.IsAuthenticatedOrReadOnly],
    )
    def my_booking(self, request, pk=None):
        listing = get_listing(pk)
        uid = caller_id(request)

        if request.method == "DELETE":
            user_id = request.query_params.get("user_id") or uid
            deleted = ledger.withdraw(user_id, listing.pk, uid)
            return Response({"deleted": deleted})

        booking = ledger.get_for_user_and_listing(uid, listing.pk)
        if booking is None:
            return Response(None)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @extend_schema(
        summary="Listing statistics",
        description="Read-time aggregates of a listing",
        responses={
            200: OpenApiResponse(
                description="Listing statistics",
                examples=[
                    OpenApiExample(
                        "Example response",
                        value={
                            "listing_id": 7,
                            "average_stars": 4.5,
                            "review_count": 2,
                            "favorite_count": 12,
                            "booking_count": 5,
                            "is_favorited": False,
                            "viewer_booking_status": None,
                        }
                    )
                ]
            ),
            404: OpenApiResponse(description="Listing not found"),
        }
    )
    @action(detail=True, methods=['get'], permission_classes=[permissions.AllowAny])
    def stats(self, request, pk=None):
        aggregate = aggregation.aggregate_for_listing(pk, caller_id(request))
        return Response({
            "listing_id": aggregate.listing_id,
            "average_stars": aggregate.average_stars,
            "review_count": aggregate.review_count,
            "favorite_count": aggregate.favorite_count,
            "booking_count": ledger.count_by_listing(aggregate.listing_id),
            "is_favorited": aggregate.is_favorited,
            "viewer_booking_status": aggregate.viewer_booking_status,
        })
