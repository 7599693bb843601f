from __future__ import annotations

from django.db.models import QuerySet
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    # page_size comes from REST_FRAMEWORK["PAGE_SIZE"]
    page_size_query_param = "page_size"
    max_page_size = 200


def paginate(request, queryset, serializer_class, *, context: dict | None = None):
    """
    Page a selector result and serialize it as {count, next, previous, results}.

    Unordered querysets get a stable id ordering so pages never overlap.
    """
    if isinstance(queryset, QuerySet) and not queryset.ordered:
        queryset = queryset.order_by("id")

    paginator = DefaultPagination()
    page = paginator.paginate_queryset(queryset, request)
    ser = serializer_class(page, many=True, context=context or {"request": request})
    return paginator.get_paginated_response(ser.data)
