# mp_core/whatsapp/services.py
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from mp_core.audit.services import AuditService
from mp_core.common.api.exceptions import ConflictError
from mp_core.common.services import apply_updates
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient
from mp_core.whatsapp.models import (
    ConnectionStatus,
    MessageStatus,
    ReminderStatus,
    WhatsAppConnection,
    WhatsAppMessage,
    WhatsAppReminder,
)

logger = logging.getLogger(__name__)

REMINDER_FIELDS = (
    "patient_name",
    "patient_phone",
    "consultation_date",
    "consultation_time",
    "reminder_type",
    "reminder_time",
    "scheduled_for",
)


def _audit(obj, code: str, actor_user_id: int | None, metadata: dict | None = None) -> None:
    AuditService.log(
        event_code=code,
        entity_type=obj.__class__.__name__,
        entity_id=obj.id,
        tenant_id=obj.tenant_id,
        facility_id=obj.facility_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


def _locked(model, *, tenant_id: UUID, facility_id: UUID, actor_user_id: int, pk: UUID):
    return model.objects.select_for_update().get(
        id=pk, tenant_id=tenant_id, facility_id=facility_id, user_id=actor_user_id
    )


class ConnectionService:
    @staticmethod
    @transaction.atomic
    def create_session(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, device_info: dict | None = None) -> WhatsAppConnection:
        conn = WhatsAppConnection.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            user_id=actor_user_id,
            device_info=device_info or {},
        )
        _audit(conn, "whatsapp.session.created", actor_user_id, {"session_id": conn.session_id})
        logger.info("WhatsApp session created id=%s session=%s", conn.id, conn.session_id)
        return conn

    @staticmethod
    @transaction.atomic
    def update_qr_code(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, connection_id: UUID, qr_code: str) -> WhatsAppConnection:
        conn = _locked(WhatsAppConnection, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=connection_id)
        if conn.status == ConnectionStatus.CONNECTED:
            logger.warning("QR update rejected: session=%s already connected", conn.session_id)
            raise ConflictError("Session is already connected.")

        conn.update_qr_code(qr_code)
        logger.info("WhatsApp QR updated session=%s expires_at=%s", conn.session_id, conn.expires_at)
        return conn

    @staticmethod
    @transaction.atomic
    def mark_connected(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, connection_id: UUID, phone_number: str) -> WhatsAppConnection:
        conn = _locked(WhatsAppConnection, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=connection_id)
        if conn.status != ConnectionStatus.WAITING_FOR_QR_SCAN:
            logger.warning("Connect rejected: session=%s status=%s", conn.session_id, conn.status)
            raise ConflictError(f"Session cannot connect from status '{conn.status}'.")
        if conn.is_expired:
            logger.warning("Connect rejected: session=%s QR expired", conn.session_id)
            raise ConflictError("QR code has expired. Request a new one.")

        conn.mark_as_connected(phone_number)
        _audit(conn, "whatsapp.session.connected", actor_user_id, {"phone_number": phone_number})
        logger.info("WhatsApp session connected session=%s", conn.session_id)
        return conn

    @staticmethod
    @transaction.atomic
    def disconnect(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, connection_id: UUID) -> WhatsAppConnection:
        conn = _locked(WhatsAppConnection, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=connection_id)
        if conn.status == ConnectionStatus.DISCONNECTED:
            raise ConflictError("Session is already disconnected.")

        conn.mark_as_disconnected()
        _audit(conn, "whatsapp.session.disconnected", actor_user_id)
        logger.info("WhatsApp session disconnected session=%s", conn.session_id)
        return conn

    @staticmethod
    @transaction.atomic
    def delete_session(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, connection_id: UUID) -> None:
        conn = _locked(WhatsAppConnection, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=connection_id)
        conn.soft_delete()
        _audit(conn, "whatsapp.session.deleted", actor_user_id)
        logger.info("WhatsApp session soft-deleted session=%s", conn.session_id)


class MessageService:
    @staticmethod
    @transaction.atomic
    def queue_message(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, data: dict) -> WhatsAppMessage:
        msg = WhatsAppMessage.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            user_id=actor_user_id,
            status=MessageStatus.PENDING,
            **data,
        )
        _audit(msg, "whatsapp.message.queued", actor_user_id, {"to": msg.to, "type": msg.type})
        logger.info("WhatsApp message queued id=%s to=%s", msg.id, msg.to)
        return msg

    @staticmethod
    @transaction.atomic
    def apply_status(
        *,
        tenant_id: UUID,
        facility_id: UUID,
        actor_user_id: int,
        message_pk: UUID,
        status: str,
        message_id: str = "",
        error: dict | None = None,
    ) -> WhatsAppMessage:
        """
        Delivery receipt from the gateway. Only forward transitions apply.
        """
        msg = _locked(WhatsAppMessage, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=message_pk)
        if not msg.can_transition(status):
            logger.warning("Message transition rejected id=%s %s -> %s", msg.id, msg.status, status)
            raise ConflictError(f"Cannot move message from '{msg.status}' to '{status}'.")

        if status == MessageStatus.SENT:
            if not message_id:
                raise ValidationError({"message_id": "Required when status is 'sent'."})
            msg.mark_as_sent(message_id)
        elif status == MessageStatus.DELIVERED:
            msg.mark_as_delivered()
        elif status == MessageStatus.READ:
            msg.mark_as_read()
        else:
            msg.mark_as_failed(error or {})

        logger.info("WhatsApp message id=%s status=%s", msg.id, msg.status)
        return msg


class ReminderService:
    @staticmethod
    @transaction.atomic
    def create_reminder(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, patient_id: UUID, data: dict) -> WhatsAppReminder:
        try:
            patient = Patient.objects.get(id=patient_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id)
        except Patient.DoesNotExist:
            raise ValidationError({"patient_id": "Patient not found in this scope."})

        consultation_id = data.get("consultation_id")
        if consultation_id is not None and not Consultation.objects.filter(
            id=consultation_id, tenant_id=tenant_id, facility_id=facility_id, doctor_id=actor_user_id, patient_id=patient.id
        ).exists():
            raise ValidationError({"consultation_id": "Consultation not found for this patient."})

        fields = {k: v for k, v in data.items() if k in REMINDER_FIELDS}
        if not fields.get("patient_name"):
            fields["patient_name"] = patient.full_name
        if not fields.get("patient_phone"):
            fields["patient_phone"] = patient.phone
        if not fields["patient_phone"]:
            raise ValidationError({"patient_phone": "Patient has no phone number on file."})

        reminder = WhatsAppReminder.objects.create(
            tenant_id=tenant_id,
            facility_id=facility_id,
            user_id=actor_user_id,
            patient=patient,
            consultation_id=consultation_id,
            **fields,
        )

        _audit(reminder, "whatsapp.reminder.created", actor_user_id, {"scheduled_for": reminder.scheduled_for})
        logger.info("Reminder created id=%s scheduled_for=%s", reminder.id, reminder.scheduled_for)
        return reminder

    @staticmethod
    @transaction.atomic
    def update_reminder(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, reminder_id: UUID, data: dict) -> WhatsAppReminder:
        reminder = _locked(WhatsAppReminder, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=reminder_id)
        if reminder.status != ReminderStatus.SCHEDULED:
            raise ConflictError(f"Only scheduled reminders can be edited (status: {reminder.status}).")

        changed = apply_updates(reminder, data, REMINDER_FIELDS)
        # recompute unless the caller pinned scheduled_for
        if {"consultation_date", "reminder_time"} & set(changed) and "scheduled_for" not in data:
            reminder.scheduled_for = None
            changed.append("scheduled_for")
        if changed:
            reminder.save(update_fields=changed + ["updated_at"])

        _audit(reminder, "whatsapp.reminder.updated", actor_user_id, {"updated_fields": sorted(changed)})
        return reminder

    @staticmethod
    @transaction.atomic
    def cancel(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, reminder_id: UUID) -> WhatsAppReminder:
        reminder = _locked(WhatsAppReminder, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=reminder_id)
        if reminder.status != ReminderStatus.SCHEDULED:
            logger.warning("Cancel rejected: reminder=%s status=%s", reminder.id, reminder.status)
            raise ConflictError(f"Only scheduled reminders can be cancelled (status: {reminder.status}).")

        reminder.mark_as_cancelled()
        _audit(reminder, "whatsapp.reminder.cancelled", actor_user_id)
        logger.info("Reminder cancelled id=%s", reminder.id)
        return reminder

    @staticmethod
    @transaction.atomic
    def delete_reminder(*, tenant_id: UUID, facility_id: UUID, actor_user_id: int, reminder_id: UUID) -> None:
        reminder = _locked(WhatsAppReminder, tenant_id=tenant_id, facility_id=facility_id, actor_user_id=actor_user_id, pk=reminder_id)
        reminder.soft_delete()
        _audit(reminder, "whatsapp.reminder.deleted", actor_user_id)
        logger.info("Reminder soft-deleted id=%s", reminder.id)

    @staticmethod
    @transaction.atomic
    def dispatch_due(
        *,
        tenant_id: UUID | None = None,
        facility_id: UUID | None = None,
        user_id: int | None = None,
        now: datetime | None = None,
    ) -> list[WhatsAppReminder]:
        """
        Queue one outbound message per due reminder and mark the reminder sent.
        Filters narrow the sweep; with none set every tenant is processed.
        """
        qs = WhatsAppReminder.objects.select_for_update().due_for_sending(now or timezone.now())
        if tenant_id is not None:
            qs = qs.filter(tenant_id=tenant_id)
        if facility_id is not None:
            qs = qs.filter(facility_id=facility_id)
        if user_id is not None:
            qs = qs.filter(user_id=user_id)

        dispatched: list[WhatsAppReminder] = []
        for reminder in qs.order_by("scheduled_for"):
            msg = WhatsAppMessage.objects.create(
                tenant_id=reminder.tenant_id,
                facility_id=reminder.facility_id,
                user_id=reminder.user_id,
                to=reminder.patient_phone,
                message=reminder.reminder_message,
                template_name=f"reminder_{reminder.reminder_type}",
                template_params={"reminder_id": str(reminder.id)},
                status=MessageStatus.PENDING,
            )
            reminder.mark_as_sent(str(msg.id))
            _audit(reminder, "whatsapp.reminder.dispatched", user_id, {"message_pk": str(msg.id)})
            dispatched.append(reminder)

        logger.info("Reminder dispatch: %d reminder(s) queued", len(dispatched))
        return dispatched
