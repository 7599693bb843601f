from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from mp_core.common.api.params import flag, pk_uuid
from mp_core.common.permissions import ROLE_ADMIN, _user_roles
from mp_core.common.scope import require_scope
from mp_core.facilities.api.serializers import (
    FacilityCreateSerializer,
    FacilitySerializer,
    FacilityUpdateSerializer,
)
from mp_core.facilities.models import Facility
from mp_core.facilities.selectors import facilities_for_tenant, get_facility
from mp_core.facilities.services import FacilityService


def _require_admin(request) -> None:
    if ROLE_ADMIN not in _user_roles(request.user):
        raise PermissionDenied("Only admins can manage facilities.")


class FacilityViewSet(viewsets.ViewSet):
    """
    Facilities of the practice in the current scope. Reads are open to any
    member; changes need ADMIN.
    """

    serializer_class = FacilitySerializer
    queryset = Facility.objects.none()

    @extend_schema(
        tags=["Facilities"],
        parameters=[
            OpenApiParameter("active_only", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: FacilitySerializer(many=True)},
    )
    def list(self, request):
        scope = require_scope(request)
        qs = facilities_for_tenant(
            tenant_id=scope.tenant_id,
            active_only=flag(request.query_params.get("active_only")) is not False,
            q=request.query_params.get("q"),
        )
        return Response(FacilitySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], responses={200: FacilitySerializer})
    def retrieve(self, request, pk=None):
        scope = require_scope(request)
        obj = get_facility(tenant_id=scope.tenant_id, facility_id=pk_uuid(pk))
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Facilities"], request=FacilityCreateSerializer, responses={201: FacilitySerializer})
    def create(self, request):
        scope = require_scope(request)
        _require_admin(request)

        ser = FacilityCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        obj = FacilityService.create(tenant_id=scope.tenant_id, **ser.validated_data)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Facilities"], request=FacilityUpdateSerializer, responses={200: FacilitySerializer})
    def partial_update(self, request, pk=None):
        scope = require_scope(request)
        _require_admin(request)

        ser = FacilityUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        obj = FacilityService.update(tenant_id=scope.tenant_id, facility_id=pk_uuid(pk), data=ser.validated_data)
        return Response(FacilitySerializer(obj).data, status=status.HTTP_200_OK)
