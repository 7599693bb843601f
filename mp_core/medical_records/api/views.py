# mp_core/medical_records/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.params import pk_uuid
from mp_core.common.api.pagination import paginate
from mp_core.common.permissions import ClinicalPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.medical_records import selectors
from mp_core.medical_records.api.serializers import MedicalRecordSerializer
from mp_core.medical_records.models import MedicalRecord
from mp_core.medical_records.services import MedicalRecordService


class MedicalRecordViewSet(viewsets.ViewSet):
    """
    Records are addressed by patient id: /medical-records/{patient_id}/.
    """

    permission_classes = [ClinicalPermission]

    serializer_class = MedicalRecordSerializer
    queryset = MedicalRecord.objects.none()

    @extend_schema(
        tags=["Medical Records"],
        parameters=[OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Patient name.")],
        responses={200: MedicalRecordSerializer(many=True)},
    )
    def list(self, request):
        qs = selectors.list_records(**owner_kwargs(request), search=(request.query_params.get("search") or "").strip())
        return paginate(request, qs, MedicalRecordSerializer)

    @extend_schema(tags=["Medical Records"], responses={200: MedicalRecordSerializer})
    def retrieve(self, request, pk=None):
        record = MedicalRecordService.get_or_create_for_patient(**scope_kwargs(request), patient_id=pk_uuid(pk))
        return Response(MedicalRecordSerializer(record).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Medical Records"], request=None, responses={200: MedicalRecordSerializer})
    @action(detail=True, methods=["post"], url_path="refresh")
    def refresh(self, request, pk=None):
        record = MedicalRecordService.refresh_snapshot(**scope_kwargs(request), patient_id=pk_uuid(pk))
        return Response(MedicalRecordSerializer(record).data, status=status.HTTP_200_OK)
