# mp_core/whatsapp/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from mp_core.common.api.pagination import paginate
from mp_core.common.api.params import date_or_none, pk_uuid, uuid_or_none
from mp_core.common.permissions import WhatsAppPermission
from mp_core.common.scope import owner_kwargs, scope_kwargs
from mp_core.whatsapp import selectors
from mp_core.whatsapp.api.serializers import (
    ConnectedSerializer,
    ConnectionSerializer,
    MessageCreateSerializer,
    MessageSerializer,
    MessageStatusCallbackSerializer,
    QRCodeSerializer,
    ReminderCreateSerializer,
    ReminderSerializer,
    ReminderUpdateSerializer,
    SessionCreateSerializer,
)
from mp_core.whatsapp.models import WhatsAppConnection, WhatsAppMessage, WhatsAppReminder
from mp_core.whatsapp.services import ConnectionService, MessageService, ReminderService


def _owner(request) -> dict:
    return owner_kwargs(request, owner_field="user_id")


class WhatsAppConnectionViewSet(viewsets.ViewSet):
    """
    Session records. The gateway pushes QR codes and the connected phone
    number through the `qr` and `connected` actions.
    """

    permission_classes = [WhatsAppPermission]

    serializer_class = ConnectionSerializer
    queryset = WhatsAppConnection.objects.none()

    @extend_schema(
        tags=["WhatsApp"],
        parameters=[OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY)],
        responses={200: ConnectionSerializer(many=True)},
    )
    def list(self, request):
        qs = selectors.search_connections(**_owner(request), status=request.query_params.get("status") or None)
        return paginate(request, qs, ConnectionSerializer)

    @extend_schema(tags=["WhatsApp"], request=SessionCreateSerializer, responses={201: ConnectionSerializer})
    def create(self, request):
        ser = SessionCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        conn = ConnectionService.create_session(**scope_kwargs(request), device_info=ser.validated_data.get("device_info"))
        return Response(ConnectionSerializer(conn).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["WhatsApp"], responses={200: ConnectionSerializer})
    def retrieve(self, request, pk=None):
        conn = selectors.get_connection(**_owner(request), connection_id=pk_uuid(pk))
        return Response(ConnectionSerializer(conn).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], responses={204: None})
    def destroy(self, request, pk=None):
        ConnectionService.delete_session(**scope_kwargs(request), connection_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["WhatsApp"], request=QRCodeSerializer, responses={200: ConnectionSerializer})
    @action(detail=True, methods=["post"], url_path="qr")
    def qr(self, request, pk=None):
        ser = QRCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        conn = ConnectionService.update_qr_code(
            **scope_kwargs(request), connection_id=pk_uuid(pk), qr_code=ser.validated_data["qr_code"]
        )
        return Response(ConnectionSerializer(conn).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], request=ConnectedSerializer, responses={200: ConnectionSerializer})
    @action(detail=True, methods=["post"], url_path="connected")
    def connected(self, request, pk=None):
        ser = ConnectedSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        conn = ConnectionService.mark_connected(
            **scope_kwargs(request), connection_id=pk_uuid(pk), phone_number=ser.validated_data["phone_number"]
        )
        return Response(ConnectionSerializer(conn).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], request=None, responses={200: ConnectionSerializer})
    @action(detail=True, methods=["post"], url_path="disconnect")
    def disconnect(self, request, pk=None):
        conn = ConnectionService.disconnect(**scope_kwargs(request), connection_id=pk_uuid(pk))
        return Response(ConnectionSerializer(conn).data, status=status.HTTP_200_OK)


class WhatsAppMessageViewSet(viewsets.ViewSet):
    permission_classes = [WhatsAppPermission]

    serializer_class = MessageSerializer
    queryset = WhatsAppMessage.objects.none()

    @extend_schema(
        tags=["WhatsApp"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("to", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        responses={200: MessageSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_messages(
            **_owner(request),
            status=qp.get("status") or None,
            type=qp.get("type") or None,
            to=(qp.get("to") or "").strip(),
        )
        return paginate(request, qs, MessageSerializer)

    @extend_schema(tags=["WhatsApp"], request=MessageCreateSerializer, responses={201: MessageSerializer})
    def create(self, request):
        ser = MessageCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        msg = MessageService.queue_message(**scope_kwargs(request), data=ser.validated_data)
        return Response(MessageSerializer(msg).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["WhatsApp"], responses={200: MessageSerializer})
    def retrieve(self, request, pk=None):
        msg = selectors.get_message(**_owner(request), message_pk=pk_uuid(pk))
        return Response(MessageSerializer(msg).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], request=MessageStatusCallbackSerializer, responses={200: MessageSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def status_callback(self, request, pk=None):
        ser = MessageStatusCallbackSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        msg = MessageService.apply_status(**scope_kwargs(request), message_pk=pk_uuid(pk), **ser.validated_data)
        return Response(MessageSerializer(msg).data, status=status.HTTP_200_OK)


class WhatsAppReminderViewSet(viewsets.ViewSet):
    permission_classes = [WhatsAppPermission]

    serializer_class = ReminderSerializer
    queryset = WhatsAppReminder.objects.none()

    @extend_schema(
        tags=["WhatsApp"],
        parameters=[
            OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("reminder_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("patient_id", OpenApiTypes.UUID, OpenApiParameter.QUERY),
            OpenApiParameter("date_from", OpenApiTypes.DATE, OpenApiParameter.QUERY),
            OpenApiParameter("date_to", OpenApiTypes.DATE, OpenApiParameter.QUERY),
        ],
        responses={200: ReminderSerializer(many=True)},
    )
    def list(self, request):
        qp = request.query_params
        qs = selectors.search_reminders(
            **_owner(request),
            status=qp.get("status") or None,
            reminder_type=qp.get("reminder_type") or None,
            patient_id=uuid_or_none(qp.get("patient_id"), "patient_id"),
            date_from=date_or_none(qp.get("date_from"), "date_from"),
            date_to=date_or_none(qp.get("date_to"), "date_to"),
        )
        return paginate(request, qs, ReminderSerializer)

    @extend_schema(tags=["WhatsApp"], request=ReminderCreateSerializer, responses={201: ReminderSerializer})
    def create(self, request):
        ser = ReminderCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        data = dict(ser.validated_data)
        patient_id = data.pop("patient_id")

        reminder = ReminderService.create_reminder(**scope_kwargs(request), patient_id=patient_id, data=data)
        return Response(ReminderSerializer(reminder).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["WhatsApp"], responses={200: ReminderSerializer})
    def retrieve(self, request, pk=None):
        reminder = selectors.get_reminder(**_owner(request), reminder_id=pk_uuid(pk))
        return Response(ReminderSerializer(reminder).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], request=ReminderUpdateSerializer, responses={200: ReminderSerializer})
    def partial_update(self, request, pk=None):
        ser = ReminderUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reminder = ReminderService.update_reminder(
            **scope_kwargs(request), reminder_id=pk_uuid(pk), data=ser.validated_data
        )
        return Response(ReminderSerializer(reminder).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], responses={204: None})
    def destroy(self, request, pk=None):
        ReminderService.delete_reminder(**scope_kwargs(request), reminder_id=pk_uuid(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["WhatsApp"], request=None, responses={200: ReminderSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        reminder = ReminderService.cancel(**scope_kwargs(request), reminder_id=pk_uuid(pk))
        return Response(ReminderSerializer(reminder).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["WhatsApp"], request=None, responses={200: ReminderSerializer(many=True)})
    @action(detail=False, methods=["post"], url_path="dispatch-due")
    def dispatch_due(self, request):
        kw = scope_kwargs(request)
        reminders = ReminderService.dispatch_due(
            tenant_id=kw["tenant_id"], facility_id=kw["facility_id"], user_id=kw["actor_user_id"]
        )
        return Response(ReminderSerializer(reminders, many=True).data, status=status.HTTP_200_OK)
