# mp_core/exams/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, pk_uuid, uuid_or_none
from mp_core.common.permissions import ClinicalPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.exams import selectors
from mp_core.exams.api.serializers import (
    ExamCreateSerializer,
    ExamReportQuerySerializer,
    ExamSerializer,
    ExamStatusSerializer,
    ExamUpdateSerializer,
)
from mp_core.exams.models import Exam
from mp_core.exams.services import ExamService


class ExamViewSet(viewsets.ViewSet):
    permission_classes = [ClinicalPermission]

    serializer_class = ExamSerializer
    queryset = Exam.objects.none()

    @extend_schema(
        tags=["Exams"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("exam_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("exam_category", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: ExamSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_exams(
            **owner_kwargs(request),
            status=qp.get("status") or None,
            exam_type=qp.get("exam_type") or None,
            exam_category=qp.get("exam_category") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, ExamSerializer)

    @extend_schema(tags=["Exams"], request=ExamCreateSerializer, responses={201: ExamSerializer})
    def create(self, request):
        ser = ExamCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        exam = ExamService.create_exam(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(ExamSerializer(exam).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Exams"], responses={200: ExamSerializer})
    def retrieve(self, request, pk=None):
        exam = selectors.get_exam(**owner_kwargs(request), exam_id=pk_uuid(pk))
        return Response(ExamSerializer(exam).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Exams"], request=ExamUpdateSerializer, responses={200: ExamSerializer})
    def partial_update(self, request, pk=None):
        ser = ExamUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        exam = ExamService.update_exam(**scope_kwargs(request), exam_id=pk_uuid(pk), data=ser.validated_data)
        return Response(ExamSerializer(exam).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Exams"], responses={204: None})
    def destroy(self, request, pk=None):
        ExamService.delete_exam(**scope_kwargs(request), exam_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Exams"], request=ExamStatusSerializer, responses={200: ExamSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        ser = ExamStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        exam = ExamService.update_status(
            **scope_kwargs(request),
            exam_id=pk_uuid(pk),
            status=ser.validated_data["status"],
            results=ser.validated_data.get("results"),
            additional_notes=ser.validated_data.get("additional_notes"),
        )
        return Response(ExamSerializer(exam).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Exams"], responses={200: ExamSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def pending(self, request):
        qs = selectors.pending_exams(**owner_kwargs(request))
        return Response(ExamSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Exams"],
        parameters=[
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("exam_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"])
    def report(self, request):
        ser = ExamReportQuerySerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        return Response(selectors.exam_report(**owner_kwargs(request), **ser.validated_data), status=status.HTTP_200_OK)
