# mp_core/medications/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import flag, pk_uuid
from mp_core.common.permissions import MedicationPermission
from mp_core.common.scope import require_scope, scope_kwargs
from mp_core.medications.api.serializers import (
    MedicationCreateSerializer,
    MedicationSerializer,
    MedicationUpdateSerializer,
)
from mp_core.medications.models import Medication
from mp_core.medications.selectors import medication_qs, search_medications
from mp_core.medications.services import MedicationService


class MedicationViewSet(viewsets.ViewSet):
    """
    Facility medication catalogue. Shared by every doctor of the facility.
    """
    permission_classes = [MedicationPermission]

    serializer_class = MedicationSerializer
    queryset = Medication.objects.none()

    @extend_schema(
        tags=["Medications"],
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Name or active ingredient."),
            OpenApiParameter("controlled", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("form", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("route", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: MedicationSerializer(many=True)},
    )
    def list(self, request):
        scope = require_scope(request)
        qp = request.query_params
        qs = search_medications(
            tenant_id=scope.tenant_id,
            facility_id=scope.facility_id,
            q=(qp.get("q") or "").strip(),
            controlled=flag(qp.get("controlled")),
            form=qp.get("form") or None,
            route=qp.get("route") or None,
        )
        return paginate(request, qs, MedicationSerializer)

    @extend_schema(tags=["Medications"], request=MedicationCreateSerializer, responses={201: MedicationSerializer})
    def create(self, request):
        ser = MedicationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        medication = MedicationService.create_medication(**scope_kwargs(request), data=ser.validated_data)
        return Response(MedicationSerializer(medication).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Medications"], responses={200: MedicationSerializer})
    def retrieve(self, request, pk=None):
        scope = require_scope(request)
        medication = medication_qs(tenant_id=scope.tenant_id, facility_id=scope.facility_id).get(id=pk_uuid(pk))
        return Response(MedicationSerializer(medication).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Medications"], request=MedicationUpdateSerializer, responses={200: MedicationSerializer})
    def partial_update(self, request, pk=None):
        ser = MedicationUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        medication = MedicationService.update_medication(
            **scope_kwargs(request),
            medication_id=pk_uuid(pk),
            data=ser.validated_data,
        )
        return Response(MedicationSerializer(medication).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Medications"], responses={204: None})
    def destroy(self, request, pk=None):
        MedicationService.delete_medication(**scope_kwargs(request), medication_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)
