from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from mp_core.common.api.params import pk_uuid
from mp_core.tenants.api.serializers import (
    TenantCreateSerializer,
    TenantSerializer,
    TenantStatusUpdateSerializer,
)
from mp_core.tenants.models import Tenant
from mp_core.tenants.selectors import get_visible_tenant, visible_tenants
from mp_core.tenants.services import TenantService


def _require_superuser(request) -> None:
    if not getattr(request.user, "is_superuser", False):
        raise PermissionDenied("Only platform admins can manage practices.")


@extend_schema_view(
    list=extend_schema(tags=["Tenants"], responses={200: TenantSerializer(many=True)}),
    retrieve=extend_schema(tags=["Tenants"], responses={200: TenantSerializer}),
    create=extend_schema(tags=["Tenants"], request=TenantCreateSerializer, responses={201: TenantSerializer}),
    set_status=extend_schema(tags=["Tenants"], request=TenantStatusUpdateSerializer, responses={200: TenantSerializer}),
)
class TenantViewSet(viewsets.ViewSet):
    serializer_class = TenantSerializer
    queryset = Tenant.objects.none()

    def list(self, request):
        qs = visible_tenants(user=request.user)[:300]
        return Response(TenantSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        tenant = get_visible_tenant(user=request.user, tenant_id=pk_uuid(pk))
        return Response(TenantSerializer(tenant).data, status=status.HTTP_200_OK)

    def create(self, request):
        _require_superuser(request)
        ser = TenantCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tenant = TenantService.create(**ser.validated_data)
        return Response(TenantSerializer(tenant).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="set-status")
    def set_status(self, request, pk=None):
        _require_superuser(request)
        ser = TenantStatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        tenant = TenantService.set_status(tenant_id=pk_uuid(pk), status=ser.validated_data["status"])
        return Response(TenantSerializer(tenant).data, status=status.HTTP_200_OK)
