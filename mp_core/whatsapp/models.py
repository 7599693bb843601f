# mp_core/whatsapp/models.py
"""
WhatsApp session, outbound message log and appointment reminders.

The socket-level client lives in an external gateway; these records are the
state the gateway reports back into (QR codes, delivery receipts).
"""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string

from mp_core.common.models import LiveManager, SoftDeleteModel, SoftDeleteQuerySet
from mp_core.common.validators import digits_only
from mp_core.consultations.models import Consultation
from mp_core.patients.models import Patient


def new_session_id() -> str:
    return "session_" + get_random_string(16)


def default_reminder_hours() -> int:
    return int(getattr(settings, "WHATSAPP_REMINDER_DEFAULT_HOURS", 24))


def qr_ttl() -> timedelta:
    return timedelta(seconds=int(getattr(settings, "WHATSAPP_QR_TTL_SECONDS", 120)))


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


class ConnectionStatus(models.TextChoices):
    WAITING_FOR_QR_SCAN = "waiting_for_qr_scan", "Waiting for QR scan"
    CONNECTED = "connected", "Connected"
    DISCONNECTED = "disconnected", "Disconnected"
    ERROR = "error", "Error"


class ConnectionQuerySet(SoftDeleteQuerySet):
    def connected(self):
        return self.filter(connected=True)

    def by_status(self, status: str):
        return self.filter(status=status)

    def active(self):
        return self.filter(status=ConnectionStatus.CONNECTED, connected=True)


class WhatsAppConnection(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="whatsapp_connections")

    session_id = models.CharField(max_length=64, unique=True, default=new_session_id)
    status = models.CharField(
        max_length=24,
        choices=ConnectionStatus.choices,
        default=ConnectionStatus.WAITING_FOR_QR_SCAN,
        db_index=True,
    )
    connected = models.BooleanField(default=False)
    qr_code = models.TextField(blank=True, default="")
    phone_number = models.CharField(max_length=20, blank=True, default="")
    device_info = models.JSONField(default=dict, blank=True)

    connected_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    objects = LiveManager.from_queryset(ConnectionQuerySet)()

    class Meta:
        db_table = "whatsapp_connection"
        ordering = ["-created_at"]
        default_manager_name = "objects"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="wa_conn_scope_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.session_id} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()

    def mark_as_connected(self, phone_number: str) -> None:
        self.status = ConnectionStatus.CONNECTED
        self.connected = True
        self.phone_number = phone_number
        self.connected_at = timezone.now()
        self.qr_code = ""
        self.save(update_fields=["status", "connected", "phone_number", "connected_at", "qr_code", "updated_at"])

    def mark_as_disconnected(self) -> None:
        self.status = ConnectionStatus.DISCONNECTED
        self.connected = False
        self.connected_at = None
        self.save(update_fields=["status", "connected", "connected_at", "updated_at"])

    def update_qr_code(self, qr_code: str) -> None:
        self.qr_code = qr_code
        self.status = ConnectionStatus.WAITING_FOR_QR_SCAN
        self.expires_at = timezone.now() + qr_ttl()
        self.save(update_fields=["qr_code", "status", "expires_at", "updated_at"])


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class MessageType(models.TextChoices):
    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    DOCUMENT = "document", "Document"
    AUDIO = "audio", "Audio"


class MessageStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    DELIVERED = "delivered", "Delivered"
    READ = "read", "Read"
    FAILED = "failed", "Failed"


# target status -> statuses it may be reached from
MESSAGE_TRANSITIONS = {
    MessageStatus.SENT: {MessageStatus.PENDING},
    MessageStatus.DELIVERED: {MessageStatus.SENT},
    MessageStatus.READ: {MessageStatus.SENT, MessageStatus.DELIVERED},
    MessageStatus.FAILED: {MessageStatus.PENDING, MessageStatus.SENT},
}


class MessageQuerySet(SoftDeleteQuerySet):
    def by_status(self, status: str):
        return self.filter(status=status)

    def by_type(self, type_: str):
        return self.filter(type=type_)

    def pending(self):
        return self.filter(status=MessageStatus.PENDING)

    def sent(self):
        return self.filter(status=MessageStatus.SENT)

    def failed(self):
        return self.filter(status=MessageStatus.FAILED)


class WhatsAppMessage(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="whatsapp_messages")

    to = models.CharField(max_length=32, db_index=True)
    message = models.TextField()
    type = models.CharField(max_length=10, choices=MessageType.choices, default=MessageType.TEXT)
    template_name = models.CharField(max_length=100, blank=True, default="")
    template_params = models.JSONField(default=dict, blank=True)

    status = models.CharField(max_length=10, choices=MessageStatus.choices, default=MessageStatus.PENDING, db_index=True)
    message_id = models.CharField(max_length=128, blank=True, default="", db_index=True)
    error = models.JSONField(null=True, blank=True)

    sent_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    read_at = models.DateTimeField(null=True, blank=True)

    objects = LiveManager.from_queryset(MessageQuerySet)()

    class Meta:
        db_table = "whatsapp_message"
        ordering = ["-created_at"]
        default_manager_name = "objects"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="wa_msg_scope_user_idx"),
        ]

    def __str__(self) -> str:
        return f"to {self.to} ({self.status})"

    @property
    def formatted_phone(self) -> str:
        digits = digits_only(self.to)
        if len(digits) == 13 and digits.startswith("55"):
            return f"+{digits[:2]} {digits[2:4]} {digits[4:]}"
        return self.to

    def can_transition(self, target: str) -> bool:
        return self.status in MESSAGE_TRANSITIONS.get(target, set())

    def mark_as_sent(self, message_id: str) -> None:
        self.status = MessageStatus.SENT
        self.message_id = message_id
        self.sent_at = timezone.now()
        self.save(update_fields=["status", "message_id", "sent_at", "updated_at"])

    def mark_as_delivered(self) -> None:
        self.status = MessageStatus.DELIVERED
        self.delivered_at = timezone.now()
        self.save(update_fields=["status", "delivered_at", "updated_at"])

    def mark_as_read(self) -> None:
        self.status = MessageStatus.READ
        self.read_at = timezone.now()
        self.save(update_fields=["status", "read_at", "updated_at"])

    def mark_as_failed(self, error: dict) -> None:
        self.status = MessageStatus.FAILED
        self.error = error
        self.save(update_fields=["status", "error", "updated_at"])


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


class ReminderType(models.TextChoices):
    CONSULTATION = "consultation", "Consultation"
    EXAM = "exam", "Exam"
    MEDICATION = "medication", "Medication"
    OTHER = "other", "Other"


class ReminderStatus(models.TextChoices):
    SCHEDULED = "scheduled", "Scheduled"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"
    CANCELLED = "cancelled", "Cancelled"


REMINDER_TEMPLATES = {
    ReminderType.CONSULTATION: (
        "Olá {name}! Lembrete: você tem uma consulta agendada para {date} às {time}. "
        "Em caso de necessidade de reagendamento, entre em contato conosco."
    ),
    ReminderType.EXAM: (
        "Olá {name}! Lembrete: você tem um exame agendado para {date} às {time}. "
        "Não se esqueça de seguir as orientações de preparo."
    ),
    ReminderType.MEDICATION: "Olá {name}! Lembrete: não se esqueça de tomar sua medicação conforme prescrito.",
}
DEFAULT_REMINDER_TEMPLATE = "Olá {name}! Você tem um compromisso agendado para {date} às {time}."


class ReminderQuerySet(SoftDeleteQuerySet):
    def scheduled(self):
        return self.filter(status=ReminderStatus.SCHEDULED)

    def sent(self):
        return self.filter(status=ReminderStatus.SENT)

    def failed(self):
        return self.filter(status=ReminderStatus.FAILED)

    def by_type(self, reminder_type: str):
        return self.filter(reminder_type=reminder_type)

    def due_for_sending(self, now=None):
        return self.scheduled().filter(scheduled_for__lte=now or timezone.now())


class WhatsAppReminder(SoftDeleteModel):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="whatsapp_reminders")
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="whatsapp_reminders")
    consultation = models.ForeignKey(
        Consultation,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="whatsapp_reminders",
    )

    patient_name = models.CharField(max_length=255)
    patient_phone = models.CharField(max_length=20)
    consultation_date = models.DateTimeField()
    consultation_time = models.TimeField()

    reminder_type = models.CharField(max_length=16, choices=ReminderType.choices, default=ReminderType.CONSULTATION)
    reminder_time = models.PositiveIntegerField(default=default_reminder_hours)  # hours before

    status = models.CharField(
        max_length=10, choices=ReminderStatus.choices, default=ReminderStatus.SCHEDULED, db_index=True
    )
    message_id = models.CharField(max_length=128, blank=True, default="")
    sent_at = models.DateTimeField(null=True, blank=True)
    error = models.JSONField(null=True, blank=True)

    scheduled_for = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = LiveManager.from_queryset(ReminderQuerySet)()

    class Meta:
        db_table = "whatsapp_reminder"
        ordering = ["scheduled_for"]
        default_manager_name = "objects"
        indexes = [
            models.Index(fields=["tenant_id", "facility_id", "user"], name="wa_rem_scope_user_idx"),
            models.Index(fields=["status", "scheduled_for"], name="wa_rem_due_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.reminder_type} reminder for {self.patient_name}"

    def save(self, *args, **kwargs):
        if self.scheduled_for is None and self.consultation_date is not None and self.reminder_time is not None:
            self.scheduled_for = self.consultation_date - timedelta(hours=self.reminder_time)
        super().save(*args, **kwargs)

    @property
    def reminder_message(self) -> str:
        template = REMINDER_TEMPLATES.get(self.reminder_type, DEFAULT_REMINDER_TEMPLATE)
        local = timezone.localtime(self.consultation_date) if timezone.is_aware(self.consultation_date) else self.consultation_date
        return template.format(
            name=self.patient_name,
            date=local.strftime("%d/%m/%Y"),
            time=self.consultation_time.strftime("%H:%M"),
        )

    @property
    def hours_until_reminder(self) -> int | None:
        if self.scheduled_for is None:
            return None
        seconds = (self.scheduled_for - timezone.now()).total_seconds()
        return int(seconds / 3600)

    def mark_as_sent(self, message_id: str) -> None:
        self.status = ReminderStatus.SENT
        self.message_id = message_id
        self.sent_at = timezone.now()
        self.save(update_fields=["status", "message_id", "sent_at", "updated_at"])

    def mark_as_failed(self, error: dict) -> None:
        self.status = ReminderStatus.FAILED
        self.error = error
        self.save(update_fields=["status", "error", "updated_at"])

    def mark_as_cancelled(self) -> None:
        self.status = ReminderStatus.CANCELLED
        self.save(update_fields=["status", "updated_at"])
