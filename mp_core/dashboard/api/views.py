# mp_core/dashboard/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.common.api.params import int_param
from mp_core.common.permissions import DashboardPermission
from mp_core.common.scope import owner_kwargs
from mp_core.dashboard import selectors

MIN_QUERY_LENGTH = 2


class DashboardViewSet(viewsets.ViewSet):
    permission_classes = [DashboardPermission]

    @extend_schema(tags=["Dashboard"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return Response(selectors.dashboard_stats(**owner_kwargs(request)), status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Dashboard"],
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, OpenApiParameter.QUERY)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"], url_path="recent-activity")
    def recent_activity(self, request):
        limit = int_param(request.query_params.get("limit"), "limit", default=10, hi=50)
        items = selectors.recent_activity(**owner_kwargs(request), limit=limit)
        return Response({"results": items}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Dashboard"],
        parameters=[OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=True)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        q = (request.query_params.get("q") or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            raise ValidationError({"q": f"Search term must have at least {MIN_QUERY_LENGTH} characters."})

        return Response(selectors.global_search(**owner_kwargs(request), q=q), status=status.HTTP_200_OK)
