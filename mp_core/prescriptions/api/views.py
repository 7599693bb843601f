# mp_core/prescriptions/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, flag, pk_uuid, uuid_or_none
from mp_core.common.permissions import ClinicalPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.prescriptions import selectors
from mp_core.prescriptions.api.serializers import (
    PrescriptionCreateSerializer,
    PrescriptionSerializer,
    PrescriptionUpdateSerializer,
)
from mp_core.prescriptions.models import Prescription
from mp_core.prescriptions.services import PrescriptionService


class PrescriptionViewSet(viewsets.ViewSet):
    permission_classes = [ClinicalPermission]

    serializer_class = PrescriptionSerializer
    queryset = Prescription.objects.none()

    @extend_schema(
        tags=["Prescriptions"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("prescription_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("expired", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("active", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: PrescriptionSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_prescriptions(
            **owner_kwargs(request),
            status=qp.get("status") or None,
            prescription_type=qp.get("prescription_type") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
            expired=flag(qp.get("expired")),
            active=flag(qp.get("active")),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, PrescriptionSerializer)

    @extend_schema(tags=["Prescriptions"], request=PrescriptionCreateSerializer, responses={201: PrescriptionSerializer})
    def create(self, request):
        ser = PrescriptionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        prescription = PrescriptionService.create_prescription(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Prescriptions"], responses={200: PrescriptionSerializer})
    def retrieve(self, request, pk=None):
        prescription = selectors.get_prescription(**owner_kwargs(request), prescription_id=pk_uuid(pk))
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Prescriptions"], request=PrescriptionUpdateSerializer, responses={200: PrescriptionSerializer})
    def partial_update(self, request, pk=None):
        ser = PrescriptionUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        prescription = PrescriptionService.update_prescription(
            **scope_kwargs(request),
            prescription_id=pk_uuid(pk),
            data=ser.validated_data,
        )
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Prescriptions"], responses={204: None})
    def destroy(self, request, pk=None):
        PrescriptionService.delete_prescription(**scope_kwargs(request), prescription_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Prescriptions"], request=None, responses={200: PrescriptionSerializer})
    @action(detail=True, methods=["post"], url_path="generate-pdf")
    def generate_pdf(self, request, pk=None):
        prescription = PrescriptionService.generate_pdf(**scope_kwargs(request), prescription_id=pk_uuid(pk))
        return Response(PrescriptionSerializer(prescription).data, status=status.HTTP_200_OK)
