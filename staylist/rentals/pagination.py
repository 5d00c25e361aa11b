from django.conf import settings
from django.db.models import Q
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import BasePagination, PageNumberPagination
from rest_framework.response import Response


def keyset_window(queryset, limit, rank_field, anchor=None):
    """
    One page of ``queryset`` ordered by ``-rank_field, pk``.

    ``anchor`` is ``(rank, pk)`` of the row opening the page (inclusive).
    Fetches ``limit + 1`` rows; the extra row, if any, becomes the next cursor.
    """
    queryset = queryset.order_by(f"-{rank_field}", "pk")
    if anchor is not None:
        rank, pk = anchor
        queryset = queryset.filter(
            Q(**{f"{rank_field}__lt": rank}) | Q(**{rank_field: rank, "pk__gte": pk})
        )
    rows = list(queryset[: limit + 1])
    next_cursor = None
    if len(rows) > limit:
        next_cursor = rows.pop().pk
    return rows, next_cursor


class ListingCursorPagination(BasePagination):
    """
    Cursor pagination over listings ranked by favorite count.

    Response: ``{"results": [...], "next_cursor": id | null, "total_count": n}``.
    """
    cursor_query_param = "cursor"
    limit_query_param = "limit"
    rank_field = "favorite_count"
    page_size = getattr(settings, "RENTALS_SEARCH_PAGE_SIZE", 8)
    max_page_size = getattr(settings, "RENTALS_SEARCH_MAX_PAGE_SIZE", 50)

    next_cursor = None
    total_count = 0

    def get_limit(self, request):
        raw = request.query_params.get(self.limit_query_param)
        if raw in (None, ""):
            return self.page_size
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            limit = 0
        if not 1 <= limit <= self.max_page_size:
            raise ValidationError({"limit": [f"Limit must be an integer between 1 and {self.max_page_size}."]})
        return limit

    def get_cursor(self, request):
        raw = request.query_params.get(self.cursor_query_param)
        if raw in (None, ""):
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError({"cursor": ["Cursor must be a listing id."]})

    def paginate_queryset(self, queryset, request, view=None):
        """
        Window over an already annotated queryset. The cursor row must still
        belong to ``queryset``; otherwise the page is empty.
        """
        limit = self.get_limit(request)
        cursor = self.get_cursor(request)
        self.total_count = queryset.count()
        self.next_cursor = None

        anchor = None
        if cursor is not None:
            rank = queryset.filter(pk=cursor).values_list(self.rank_field, flat=True).first()
            if rank is None:
                return []
            anchor = (rank, cursor)

        rows, self.next_cursor = keyset_window(queryset, limit, self.rank_field, anchor=anchor)
        return rows

    def get_paginated_response(self, data):
        return Response({
            "results": data,
            "next_cursor": self.next_cursor,
            "total_count": self.total_count,
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["results", "next_cursor", "total_count"],
            "properties": {
                "results": schema,
                "next_cursor": {"type": "integer", "nullable": True, "example": 42},
                "total_count": {"type": "integer", "example": 120},
            },
        }


class RecentPagination(PageNumberPagination):
    """Page-number pagination for booking and review lists."""
    page_size = 20                      # default items per page
    page_size_query_param = 'page_size' # allow ?page_size=
    max_page_size = getattr(settings, "RENTALS_RECENT_LIMIT", 100)
