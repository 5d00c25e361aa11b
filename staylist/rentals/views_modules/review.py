import logging

from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)
from rest_framework import mixins, viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from staylist.users.identity import lookup_identities

from ..exceptions import ValidationError
from ..models import Review
from ..pagination import RecentPagination
from ..permissions import caller_id
from ..serializers import (
    ReviewCreateSerializer, ReviewSerializer, ReviewSummarySerializer,
)
from ..services import reviews as review_service
from ..serializers.common import identity_payload
from ..throttling import ScopedRateThrottleIsolated
from .filters import ReviewFilter

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(
        summary="List reviews",
        description="Reviews, newest first, filterable by listing, author and stars",
        responses={200: ReviewSerializer(many=True)},
    ),
    create=extend_schema(
        summary="Create review",
        description="Rate a listing with 1-5 stars and an optional text. Reviews cannot be edited.",
        request=ReviewCreateSerializer,
        responses={
            201: ReviewSerializer,
            400: OpenApiResponse(description="Validation error"),
            401: OpenApiResponse(description="Authentication required"),
            404: OpenApiResponse(description="Listing not found"),
        }
    ),
    retrieve=extend_schema(
        summary="Get review",
        responses={
            200: ReviewSerializer,
            404: OpenApiResponse(description="Review not found"),
        }
    ),
)
class ReviewViewSet(mixins.CreateModelMixin,
                    mixins.ListModelMixin,
                    mixins.RetrieveModelMixin,
                    viewsets.GenericViewSet):
    serializer_class = ReviewSerializer
    permission_classes = (permissions.IsAuthenticatedOrReadOnly,)
    pagination_class = RecentPagination
    filterset_class = ReviewFilter
    throttle_classes = [ScopedRateThrottleIsolated]
    lookup_value_regex = r"\d+"

    def get_throttles(self):
        self.throttle_scope = "reviews_mutation" if self.action == "create" else None
        return super().get_throttles()

    def get_queryset(self):
        return Review.objects.order_by("-created_at", "-id")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        rows = page if page is not None else list(queryset)
        context = self.get_serializer_context()
        context["identities"] = lookup_identities({r.author_id for r in rows})
        data = ReviewSerializer(rows, many=True, context=context).data
        if page is not None:
            return self.get_paginated_response(data)
        return Response(data)

    def create(self, request, *args, **kwargs):
        payload = ReviewCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        review = review_service.create(
            listing_id=payload.validated_data["listing_id"],
            author_id=caller_id(request),
            stars=payload.validated_data["stars"],
            text=payload.validated_data.get("text", ""),
        )
        return Response(self.get_serializer(review).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Review summary",
        description="Totals, average and per-star counts for a listing, or across all listings of a host",
        parameters=[
            OpenApiParameter("listing", OpenApiTypes.INT, description="Listing id"),
            OpenApiParameter("owner", OpenApiTypes.STR, description="Host user id"),
        ],
        responses={
            200: ReviewSummarySerializer,
            400: OpenApiResponse(description="Exactly one of listing/owner is required"),
        },
        examples=[
            OpenApiExample(
                "Example response",
                value={
                    "total_reviews": 3,
                    "average_stars": 4.33,
                    "count_for_stars": {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1},
                    "highlights": [],
                },
                response_only=True,
            )
        ],
    )
    @action(detail=False, methods=['get'], permission_classes=[permissions.AllowAny])
    def summary(self, request):
        listing = request.query_params.get("listing")
        owner = request.query_params.get("owner")
        if bool(listing) == bool(owner):
            raise ValidationError({"detail": "Pass exactly one of `listing` or `owner`."})

        if listing:
            try:
                listing_id = int(listing)
            except (TypeError, ValueError):
                raise ValidationError({"listing": ["Invalid listing id."]})
            summary = review_service.summary_for_listing(listing_id)
        else:
            summary = review_service.summary_for_owner(owner)

        identities = lookup_identities({r.author_id for r in summary.highlights})
        return Response({
            "total_reviews": summary.total_reviews,
            "average_stars": summary.average_stars,
            "count_for_stars": summary.count_for_stars,
            "highlights": [
                {
                    "id": r.id,
                    "listing_id": r.listing_id,
                    "stars": r.stars,
                    "text": r.text,
                    "author": identity_payload(r.author_id, identities),
                    "created_at": r.created_at,
                }
                for r in summary.highlights
            ],
        })
