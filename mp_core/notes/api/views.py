# mp_core/notes/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import flag, pk_uuid, uuid_or_none
from mp_core.common.permissions import ClinicalPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.notes import selectors
from mp_core.notes.api.serializers import NoteCreateSerializer, NoteSerializer, NoteUpdateSerializer
from mp_core.notes.models import Note
from mp_core.notes.services import NoteService


class NoteViewSet(viewsets.ViewSet):
    permission_classes = [ClinicalPermission]

    serializer_class = NoteSerializer
    queryset = Note.objects.none()

    @extend_schema(
        tags=["Notes"],
        parameters=[
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("note_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("important", OpenApiTypes.BOOL, OpenApiParameter.QUERY),
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: NoteSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_notes(
            **owner_kwargs(request),
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            note_type=qp.get("note_type") or None,
            important=flag(qp.get("important")),
            search=(qp.get("search") or "").strip(),
        )
        return paginate(request, qs, NoteSerializer)

    @extend_schema(tags=["Notes"], request=NoteCreateSerializer, responses={201: NoteSerializer})
    def create(self, request):
        ser = NoteCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        note = NoteService.create_note(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(NoteSerializer(note).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Notes"], responses={200: NoteSerializer})
    def retrieve(self, request, pk=None):
        note = selectors.view_note(**owner_kwargs(request), note_id=pk_uuid(pk))
        return Response(NoteSerializer(note).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Notes"], request=NoteUpdateSerializer, responses={200: NoteSerializer})
    def partial_update(self, request, pk=None):
        ser = NoteUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        note = NoteService.update_note(**scope_kwargs(request), note_id=pk_uuid(pk), data=ser.validated_data)
        return Response(NoteSerializer(note).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Notes"], responses={204: None})
    def destroy(self, request, pk=None):
        NoteService.delete_note(**scope_kwargs(request), note_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Notes"], request=None, responses={200: NoteSerializer})
    @action(detail=True, methods=["post"], url_path="toggle-important")
    def toggle_important(self, request, pk=None):
        note = NoteService.toggle_important(**scope_kwargs(request), note_id=pk_uuid(pk))
        return Response(NoteSerializer(note).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Notes"],
        parameters=[OpenApiParameter("q", OpenApiTypes.STR, OpenApiParameter.QUERY, required=True)],
        responses={200: OpenApiTypes.OBJECT},
    )
    @action(detail=False, methods=["get"])
    def search(self, request):
        q = (request.query_params.get("q") or "").strip()
        if len(q) < 2:
            raise ValidationError({"q": "Provide at least 2 characters."})
        return Response(selectors.quick_search_notes(**owner_kwargs(request), q=q), status=status.HTTP_200_OK)
