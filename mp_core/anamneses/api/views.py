# mp_core/anamneses/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.anamneses import selectors
from mp_core.anamneses.api.serializers import (
    AnamnesisCreateSerializer,
    AnamnesisReportQuerySerializer,
    AnamnesisSerializer,
    AnamnesisUpdateSerializer,
)
from mp_core.anamneses.models import Anamnesis
from mp_core.anamneses.services import AnamnesisService
from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, pk_uuid, uuid_or_none
from mp_core.common.permissions import ClinicalPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.patients.selectors import get_patient


class AnamnesisViewSet(viewsets.ViewSet):
    permission_classes = [ClinicalPermission]

    serializer_class = AnamnesisSerializer
    queryset = Anamnesis.objects.none()

    @extend_schema(
        tags=["Anamneses"],
        parameters=[
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: AnamnesisSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_anamneses(
            **owner_kwargs(request),
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, AnamnesisSerializer)

    @extend_schema(tags=["Anamneses"], request=AnamnesisCreateSerializer, responses={201: AnamnesisSerializer})
    def create(self, request):
        ser = AnamnesisCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        anamnesis = AnamnesisService.create_anamnesis(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(AnamnesisSerializer(anamnesis).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Anamneses"], responses={200: AnamnesisSerializer})
    def retrieve(self, request, pk=None):
        anamnesis = selectors.get_anamnesis(**owner_kwargs(request), anamnesis_id=pk_uuid(pk))
        return Response(AnamnesisSerializer(anamnesis).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Anamneses"], request=AnamnesisUpdateSerializer, responses={200: AnamnesisSerializer})
    def partial_update(self, request, pk=None):
        ser = AnamnesisUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        anamnesis = AnamnesisService.update_anamnesis(
            **scope_kwargs(request),
            anamnesis_id=pk_uuid(pk),
            data=ser.validated_data,
        )
        return Response(AnamnesisSerializer(anamnesis).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Anamneses"], responses={204: None})
    def destroy(self, request, pk=None):
        AnamnesisService.delete_anamnesis(**scope_kwargs(request), anamnesis_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Anamneses"],
        parameters=[OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY, required=True)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"])
    def template(self, request):
        patient_id = uuid_or_none(request.query_params.get("patient_id"), "patient_id")
        if patient_id is None:
            raise ValidationError({"patient_id": "This query parameter is required."})

        kw = owner_kwargs(request)
        get_patient(**kw, patient_id=patient_id)
        return Response(selectors.anamnesis_template(**kw, patient_id=patient_id), status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Anamneses"],
        parameters=[
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"])
    def report(self, request):
        ser = AnamnesisReportQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)

        return Response(selectors.anamnesis_report(**owner_kwargs(request), **ser.validated_data), status=status.HTTP_200_OK)
