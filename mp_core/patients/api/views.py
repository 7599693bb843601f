# mp_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.anamneses.api.serializers import AnamnesisSerializer
from mp_core.anamneses.selectors import search_anamneses
from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import flag, pk_uuid
from mp_core.common.permissions import PatientPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.consultations.api.serializers import ConsultationSerializer
from mp_core.consultations.selectors import search_consultations
from mp_core.exams.api.serializers import ExamSerializer
from mp_core.exams.selectors import search_exams
from mp_core.notes.api.serializers import NoteSerializer
from mp_core.notes.selectors import search_notes
from mp_core.patients import selectors
from mp_core.patients.api.serializers import PatientCreateSerializer, PatientSerializer, PatientUpdateSerializer
from mp_core.patients.models import Patient
from mp_core.patients.services import PatientService
from mp_core.prescriptions.api.serializers import PrescriptionSerializer
from mp_core.prescriptions.selectors import search_prescriptions

MIN_QUERY_LENGTH = 2


class PatientViewSet(viewsets.ViewSet):
    permission_classes = [PatientPermission]

    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def _patient(self, request, pk) -> Patient:
        return selectors.get_patient(**owner_kwargs(request), patient_id=pk_uuid(pk))

    @extend_schema(
        tags=["Patients"],
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, description="Name, email, phone or CPF."),
            OpenApiParameter("favorite", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("blood_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("ordering", OpenApiTypes.STR, OpenApiParameter.QUERY, description="full_name, created_at, last_consultation_date (prefix - for desc)."),
        ],
        responses={200: PatientSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_patients(
            **owner_kwargs(request),
            q=(qp.get("q") or "").strip(),
            favorite=flag(qp.get("favorite")),
            blood_type=qp.get("blood_type") or None,
            ordering=qp.get("ordering") or None,
        )
        return paginate(request, qs, PatientSerializer)

    @extend_schema(tags=["Patients"], request=PatientCreateSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.create_patient(**scope_kwargs(request), data=ser.validated_data)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        return Response(PatientSerializer(self._patient(request, pk)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], request=PatientUpdateSerializer, responses={200: PatientSerializer})
    def partial_update(self, request, pk=None):
        ser = PatientUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(
            **scope_kwargs(request),
            patient_id=pk_uuid(pk),
            data=ser.validated_data,
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={204: None})
    def destroy(self, request, pk=None):
        PatientService.delete_patient(**scope_kwargs(request), patient_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Patients"], request=None, responses={200: PatientSerializer})
    @action(detail=True, methods=["post"], url_path="toggle-favorite")
    def toggle_favorite(self, request, pk=None):
        patient = PatientService.toggle_favorite(**scope_kwargs(request), patient_id=pk_uuid(pk))
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Patients"],
        parameters=[OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=True)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"], url_path="quick-search")
    def quick_search(self, request):
        q = (request.query_params.get("q") or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            raise ValidationError({"q": f"Provide at least {MIN_QUERY_LENGTH} characters."})
        return Response(selectors.quick_search(**owner_kwargs(request), q=q), status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(selectors.patient_stats(**owner_kwargs(request)), status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="health-summary")
    def health_summary(self, request, pk=None):
        return Response(selectors.health_summary(self._patient(request, pk)), status=status.HTTP_200_OK)

    @extend_schema(tags=["Patients"], responses={200: ConsultationSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def consultations(self, request, pk=None):
        patient = self._patient(request, pk)
        return paginate(request, search_consultations(**owner_kwargs(request), patient_id=patient.id), ConsultationSerializer)

    @extend_schema(tags=["Patients"], responses={200: AnamnesisSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def anamneses(self, request, pk=None):
        patient = self._patient(request, pk)
        return paginate(request, search_anamneses(**owner_kwargs(request), patient_id=patient.id), AnamnesisSerializer)

    @extend_schema(tags=["Patients"], responses={200: ExamSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def exams(self, request, pk=None):
        patient = self._patient(request, pk)
        return paginate(request, search_exams(**owner_kwargs(request), patient_id=patient.id), ExamSerializer)

    @extend_schema(tags=["Patients"], responses={200: PrescriptionSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def prescriptions(self, request, pk=None):
        patient = self._patient(request, pk)
        return paginate(
            request,
            search_prescriptions(**owner_kwargs(request), patient_id=patient.id),
            PrescriptionSerializer,
        )

    @extend_schema(tags=["Patients"], responses={200: NoteSerializer(many=True)})
    @action(detail=True, methods=["get"])
    def notes(self, request, pk=None):
        patient = self._patient(request, pk)
        return paginate(request, search_notes(**owner_kwargs(request), patient_id=patient.id), NoteSerializer)
