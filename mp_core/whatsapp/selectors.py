from __future__ import annotations

from datetime import date
from uuid import UUID

from django.db.models import QuerySet

from mp_core.whatsapp.models import WhatsAppConnection, WhatsAppMessage, WhatsAppReminder


def connection_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[WhatsAppConnection]:
    return WhatsAppConnection.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_connection(*, tenant_id: UUID, facility_id: UUID, user_id: int, connection_id: UUID) -> WhatsAppConnection:
    return connection_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=connection_id)


def search_connections(*, tenant_id: UUID, facility_id: UUID, user_id: int, status: str | None = None) -> QuerySet[WhatsAppConnection]:
    qs = connection_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)
    if status:
        qs = qs.by_status(status)
    return qs.order_by("-created_at")


def message_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[WhatsAppMessage]:
    return WhatsAppMessage.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_message(*, tenant_id: UUID, facility_id: UUID, user_id: int, message_pk: UUID) -> WhatsAppMessage:
    return message_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=message_pk)


def search_messages(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    user_id: int,
    status: str | None = None,
    type: str | None = None,
    to: str = "",
) -> QuerySet[WhatsAppMessage]:
    qs = message_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)
    if status:
        qs = qs.by_status(status)
    if type:
        qs = qs.by_type(type)
    if to:
        qs = qs.filter(to__icontains=to)
    return qs.order_by("-created_at")


def reminder_qs(*, tenant_id: UUID, facility_id: UUID, user_id: int) -> QuerySet[WhatsAppReminder]:
    return WhatsAppReminder.objects.filter(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)


def get_reminder(*, tenant_id: UUID, facility_id: UUID, user_id: int, reminder_id: UUID) -> WhatsAppReminder:
    return reminder_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id).get(id=reminder_id)


def search_reminders(
    *,
    tenant_id: UUID,
    facility_id: UUID,
    user_id: int,
    status: str | None = None,
    reminder_type: str | None = None,
    patient_id: UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> QuerySet[WhatsAppReminder]:
    qs = reminder_qs(tenant_id=tenant_id, facility_id=facility_id, user_id=user_id)
    if status:
        qs = qs.filter(status=status)
    if reminder_type:
        qs = qs.by_type(reminder_type)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if date_from:
        qs = qs.filter(consultation_date__date__gte=date_from)
    if date_to:
        qs = qs.filter(consultation_date__date__lte=date_to)
    return qs.order_by("scheduled_for")
