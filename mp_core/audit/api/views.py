from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.audit.api.filters import AuditEventFilter
from mp_core.audit.api.serializers import AuditEventSerializer
from mp_core.audit.models import AuditEvent
from mp_core.audit.selectors import audit_timeline, entity_history
from mp_core.common.api.params import int_param, uuid_or_none
from mp_core.common.permissions import AuditPermission
from mp_core.common.scope import require_scope

TIMELINE_PARAMS = [
    OpenApiParameter("module", OpenApiTypes.STR, OpenApiParameter.QUERY, description="patient, finance, whatsapp..."),
    OpenApiParameter("entity_type", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Model name, e.g. Bill."),
    OpenApiParameter("entity_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
    OpenApiParameter("event_code", OpenApiTypes.STR, OpenApiParameter.QUERY),
    OpenApiParameter("event_prefix", OpenApiTypes.STR, OpenApiParameter.QUERY, description="e.g. finance.bill."),
    OpenApiParameter("actor_user_id", OpenApiTypes.INT, OpenApiParameter.QUERY),
    OpenApiParameter("occurred_after", OpenApiTypes.DATETIME, OpenApiParameter.QUERY),
    OpenApiParameter("occurred_before", OpenApiTypes.DATETIME, OpenApiParameter.QUERY),
    OpenApiParameter("limit", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Default 200, max 500."),
]


class AuditEventViewSet(viewsets.GenericViewSet):
    permission_classes = [AuditPermission]

    serializer_class = AuditEventSerializer
    queryset = AuditEvent.objects.none()

    @extend_schema(tags=["Audit"], parameters=TIMELINE_PARAMS, responses={200: AuditEventSerializer(many=True)})
    def list(self, request):
        scope = require_scope(request)
        qp = request.query_params

        filterset = AuditEventFilter(qp, queryset=audit_timeline(tenant_id=scope.tenant_id, facility_id=scope.facility_id))
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)

        limit = int_param(qp.get("limit"), "limit", default=200, lo=1, hi=500)
        return Response(AuditEventSerializer(filterset.qs[:limit], many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Audit"], responses={200: AuditEventSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path=r"history/(?P<entity_type>[A-Za-z]+)/(?P<entity_id>[^/.]+)")
    def history(self, request, entity_type=None, entity_id=None):
        """Every event recorded for one record, newest first."""
        scope = require_scope(request)
        qs = entity_history(
            tenant_id=scope.tenant_id,
            facility_id=scope.facility_id,
            entity_type=entity_type,
            entity_id=uuid_or_none(entity_id, "entity_id"),
        )
        return Response(AuditEventSerializer(qs, many=True).data, status=status.HTTP_200_OK)
