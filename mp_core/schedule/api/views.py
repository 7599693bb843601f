# mp_core/schedule/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, pk_uuid, uuid_or_none
from mp_core.common.permissions import SchedulePermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.schedule import selectors
from mp_core.schedule.api.serializers import (
    ScheduleSlotCreateSerializer,
    ScheduleSlotSerializer,
    ScheduleSlotUpdateSerializer,
    SlotBookingSerializer,
)
from mp_core.schedule.models import ScheduleSlot
from mp_core.schedule.services import ScheduleService


class ScheduleSlotViewSet(viewsets.ViewSet):
    permission_classes = [SchedulePermission]

    serializer_class = ScheduleSlotSerializer
    queryset = ScheduleSlot.objects.none()

    @extend_schema(
        tags=["Schedule"],
        parameters=[
            OpenApiParameter("date", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
        ],
        responses={200: ScheduleSlotSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_slots(
            **owner_kwargs(request),
            day=date_or_none(qp.get("date"), "date"),
            status=qp.get("status") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
        )
        return paginate(request, qs, ScheduleSlotSerializer)

    @extend_schema(tags=["Schedule"], request=ScheduleSlotCreateSerializer, responses={201: ScheduleSlotSerializer})
    def create(self, request):
        ser = ScheduleSlotCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        slot = ScheduleService.create_slot(**scope_kwargs(request), data=ser.validated_data)
        return Response(ScheduleSlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Schedule"], responses={200: ScheduleSlotSerializer})
    def retrieve(self, request, pk=None):
        slot = selectors.get_slot(**owner_kwargs(request), slot_pk=pk_uuid(pk))
        return Response(ScheduleSlotSerializer(slot).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Schedule"], request=ScheduleSlotUpdateSerializer, responses={200: ScheduleSlotSerializer})
    def partial_update(self, request, pk=None):
        ser = ScheduleSlotUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        slot = ScheduleService.update_slot(**scope_kwargs(request), slot_pk=pk_uuid(pk), data=ser.validated_data)
        return Response(ScheduleSlotSerializer(slot).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Schedule"], responses={204: None})
    def destroy(self, request, pk=None):
        ScheduleService.delete_slot(**scope_kwargs(request), slot_pk=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Schedule"], request=SlotBookingSerializer, responses={200: ScheduleSlotSerializer})
    @action(detail=True, methods=["post"], url_path="book")
    def book(self, request, pk=None):
        ser = SlotBookingSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        slot = ScheduleService.book(**scope_kwargs(request), slot_pk=pk_uuid(pk), **ser.validated_data)
        return Response(ScheduleSlotSerializer(slot).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Schedule"], request=None, responses={200: ScheduleSlotSerializer})
    @action(detail=True, methods=["post"], url_path="release")
    def release(self, request, pk=None):
        slot = ScheduleService.release(**scope_kwargs(request), slot_pk=pk_uuid(pk))
        return Response(ScheduleSlotSerializer(slot).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Schedule"],
        parameters=[OpenApiParameter("date", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True)],
        responses={200: ScheduleSlotSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request):
        day = date_or_none(request.query_params.get("date"), "date")
        if day is None:
            raise ValidationError({"date": "This query parameter is required."})

        qs = selectors.available_slots(**owner_kwargs(request), day=day)
        return Response(ScheduleSlotSerializer(qs, many=True).data, status=status.HTTP_200_OK)
