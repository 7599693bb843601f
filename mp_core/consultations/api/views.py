# mp_core/consultations/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, int_param, pk_uuid, uuid_or_none
from mp_core.common.permissions import ConsultationPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.consultations import selectors
from mp_core.consultations.api.serializers import (
    ConsultationCreateSerializer,
    ConsultationSerializer,
    ConsultationStatusSerializer,
    ConsultationUpdateSerializer,
)
from mp_core.consultations.models import Consultation
from mp_core.consultations.services import ConsultationService


class ConsultationViewSet(viewsets.ViewSet):
    permission_classes = [ConsultationPermission]

    serializer_class = ConsultationSerializer
    queryset = Consultation.objects.none()

    @extend_schema(
        tags=["Consultations"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("consultation_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Patient name, reason or diagnosis."),
        ],
        responses={200: ConsultationSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_consultations(
            **owner_kwargs(request),
            status=qp.get("status") or None,
            consultation_type=qp.get("consultation_type") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, ConsultationSerializer)

    @extend_schema(tags=["Consultations"], request=ConsultationCreateSerializer, responses={201: ConsultationSerializer})
    def create(self, request):
        ser = ConsultationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        consultation = ConsultationService.create_consultation(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Consultations"], responses={200: ConsultationSerializer})
    def retrieve(self, request, pk=None):
        consultation = selectors.get_consultation(**owner_kwargs(request), consultation_id=pk_uuid(pk))
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Consultations"], request=ConsultationUpdateSerializer, responses={200: ConsultationSerializer})
    def partial_update(self, request, pk=None):
        ser = ConsultationUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        consultation = ConsultationService.update_consultation(
            **scope_kwargs(request),
            consultation_id=pk_uuid(pk),
            data=ser.validated_data,
        )
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Consultations"], responses={204: None})
    def destroy(self, request, pk=None):
        ConsultationService.delete_consultation(**scope_kwargs(request), consultation_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Consultations"], request=ConsultationStatusSerializer, responses={200: ConsultationSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        ser = ConsultationStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        consultation = ConsultationService.update_status(
            **scope_kwargs(request),
            consultation_id=pk_uuid(pk),
            status=ser.validated_data["status"],
            reason=ser.validated_data.get("reason") or None,
        )
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Consultations"], responses={200: ConsultationSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def today(self, request):
        qs = selectors.today_consultations(**owner_kwargs(request))
        return Response(ConsultationSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Consultations"],
        parameters=[OpenApiParameter("limit", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Default 10.")],
        responses={200: ConsultationSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def upcoming(self, request):
        limit = int_param(request.query_params.get("limit"), "limit", default=10, hi=100)
        qs = selectors.upcoming_consultations(**owner_kwargs(request), limit=limit)
        return Response(ConsultationSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Consultations"],
        parameters=[OpenApiParameter("period", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Days, default 30.")],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"])
    def stats(self, request):
        period = int_param(request.query_params.get("period"), "period", default=30, hi=3650)
        return Response(selectors.consultation_stats(**owner_kwargs(request), period=period), status=status.HTTP_200_OK)
