from datetime import datetime, time, timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from mp_core.tests.helpers import actor, scoped
from mp_core.whatsapp.models import (
    ConnectionStatus,
    MessageStatus,
    ReminderStatus,
    WhatsAppConnection,
    WhatsAppMessage,
    WhatsAppReminder,
)
from mp_core.whatsapp.services import ReminderService

pytestmark = pytest.mark.django_db


def _reminder(tenant, facility, user, patient, *, consultation_date, reminder_time=24, **extra):
    return WhatsAppReminder.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        patient=patient,
        patient_name=patient.full_name,
        patient_phone=patient.phone,
        consultation_date=consultation_date,
        consultation_time=time(15, 0),
        reminder_time=reminder_time,
        **extra,
    )


def _message(tenant, facility, user, **extra):
    fields = {"to": "5511987654321", "message": "Olá"}
    fields.update(extra)
    return WhatsAppMessage.objects.create(tenant_id=tenant.id, facility_id=facility.id, user=user, **fields)


# Reminders


def test_scheduled_for_is_hours_before_consultation(tenant, facility, user, patient):
    when = timezone.now() + timedelta(days=3)

    reminder = _reminder(tenant, facility, user, patient, consultation_date=when, reminder_time=24)
    assert reminder.scheduled_for == when - timedelta(hours=24)

    at_time = _reminder(tenant, facility, user, patient, consultation_date=when, reminder_time=0)
    assert at_time.scheduled_for == when


def test_hours_until_reminder_is_signed(tenant, facility, user, patient):
    now = timezone.now()

    ahead = _reminder(tenant, facility, user, patient, consultation_date=now + timedelta(hours=30, minutes=30))
    assert ahead.hours_until_reminder == 6

    behind = _reminder(tenant, facility, user, patient, consultation_date=now + timedelta(hours=19, minutes=30))
    assert behind.hours_until_reminder == -4

    assert WhatsAppReminder(scheduled_for=None).hours_until_reminder is None


def test_reminder_message_uses_type_template(tenant, facility, user, patient):
    when = timezone.make_aware(datetime(2026, 12, 1, 15, 0))
    reminder = _reminder(tenant, facility, user, patient, consultation_date=when)

    assert reminder.reminder_message.startswith("Olá Maria da Silva! Lembrete: você tem uma consulta")
    assert "01/12/2026 às 15:00" in reminder.reminder_message

    reminder.reminder_type = "other"
    assert reminder.reminder_message == "Olá Maria da Silva! Você tem um compromisso agendado para 01/12/2026 às 15:00."


def test_create_reminder_defaults_contact_from_patient(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/whatsapp/reminders/",
        {
            "patient_id": str(patient.id),
            "consultation_date": "2026-12-01T15:00:00-03:00",
            "consultation_time": "15:00",
            "reminder_time": 2,
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["patient_name"] == patient.full_name
    assert r.data["patient_phone"] == patient.phone
    assert r.data["status"] == "scheduled"
    assert parse_datetime(r.data["scheduled_for"]) == parse_datetime("2026-12-01T13:00:00-03:00")


def test_create_reminder_for_unknown_patient(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/whatsapp/reminders/",
        {
            "patient_id": "00000000-0000-0000-0000-000000000000",
            "consultation_date": "2026-12-01T15:00:00-03:00",
            "consultation_time": "15:00",
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "patient_id" in r.data["error"]["details"]


def test_update_recomputes_scheduled_for(tenant, facility, user, patient):
    when = timezone.now() + timedelta(days=5)
    reminder = _reminder(tenant, facility, user, patient, consultation_date=when, reminder_time=24)

    updated = ReminderService.update_reminder(
        **actor(user, tenant, facility), reminder_id=reminder.id, data={"reminder_time": 48}
    )
    assert updated.scheduled_for == when - timedelta(hours=48)


def test_cancel_only_scheduled(api_client, tenant, facility, user, patient):
    reminder = _reminder(tenant, facility, user, patient, consultation_date=timezone.now() + timedelta(days=2))

    r = api_client.post(f"/api/v1/whatsapp/reminders/{reminder.id}/cancel/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["status"] == "cancelled"

    r = api_client.post(f"/api/v1/whatsapp/reminders/{reminder.id}/cancel/", **scoped(tenant, facility))
    assert r.status_code == 409


def test_dispatch_due_queues_messages(tenant, facility, user, patient):
    due = _reminder(tenant, facility, user, patient, consultation_date=timezone.now() + timedelta(hours=1))
    later = _reminder(tenant, facility, user, patient, consultation_date=timezone.now() + timedelta(days=3))

    dispatched = ReminderService.dispatch_due(tenant_id=tenant.id)

    assert [r.id for r in dispatched] == [due.id]
    due.refresh_from_db()
    later.refresh_from_db()
    assert due.status == ReminderStatus.SENT
    assert later.status == ReminderStatus.SCHEDULED

    msg = WhatsAppMessage.objects.get()
    assert due.message_id == str(msg.id)
    assert msg.to == patient.phone
    assert msg.status == MessageStatus.PENDING
    assert msg.template_params == {"reminder_id": str(due.id)}


def test_dispatch_due_endpoint_is_scoped_to_caller(api_client, tenant, facility, user, other_doctor, patient):
    mine = _reminder(tenant, facility, user, patient, consultation_date=timezone.now() + timedelta(hours=1))
    theirs = _reminder(tenant, facility, other_doctor, patient, consultation_date=timezone.now() + timedelta(hours=1))

    r = api_client.post("/api/v1/whatsapp/reminders/dispatch-due/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert [row["id"] for row in r.data] == [str(mine.id)]

    theirs.refresh_from_db()
    assert theirs.status == ReminderStatus.SCHEDULED


def test_dispatch_due_reminders_command(tenant, facility, user, patient):
    _reminder(tenant, facility, user, patient, consultation_date=timezone.now() + timedelta(hours=1))

    out = StringIO()
    call_command("dispatch_due_reminders", stdout=out)

    assert "Reminders dispatched: 1" in out.getvalue()
    assert WhatsAppMessage.objects.count() == 1


# Messages


def test_formatted_phone(tenant, facility, user):
    assert _message(tenant, facility, user).formatted_phone == "+55 11 987654321"
    assert _message(tenant, facility, user, to="11987654321").formatted_phone == "11987654321"


def test_message_status_transitions(api_client, tenant, facility, user):
    msg = _message(tenant, facility, user)
    url = f"/api/v1/whatsapp/messages/{msg.id}/status/"

    r = api_client.post(url, {"status": "delivered"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 409
    assert r.data["error"]["code"] == "conflict"

    r = api_client.post(url, {"status": "sent"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 400
    assert "message_id" in r.data["error"]["details"]

    r = api_client.post(url, {"status": "sent", "message_id": "wamid.1"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["status"] == "sent"
    assert r.data["sent_at"] is not None

    r = api_client.post(url, {"status": "read"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["status"] == "read"

    r = api_client.post(url, {"status": "failed", "error": {"code": 500}}, format="json", **scoped(tenant, facility))
    assert r.status_code == 409


def test_queue_message(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/whatsapp/messages/",
        {"to": "5511912345678", "message": "Sua consulta foi confirmada."},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["status"] == "pending"
    assert r.data["type"] == "text"

    r = api_client.get("/api/v1/whatsapp/messages/?status=pending", **scoped(tenant, facility))
    assert r.data["count"] == 1


# Connections


def test_connection_lifecycle(api_client, tenant, facility):
    r = api_client.post("/api/v1/whatsapp/connections/", {}, format="json", **scoped(tenant, facility))
    assert r.status_code == 201, r.data
    assert r.data["status"] == ConnectionStatus.WAITING_FOR_QR_SCAN
    assert r.data["session_id"].startswith("session_")
    base = f"/api/v1/whatsapp/connections/{r.data['id']}"

    r = api_client.post(f"{base}/qr/", {"qr_code": "2@abc"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["qr_code"] == "2@abc"
    assert r.data["is_expired"] is False

    r = api_client.post(f"{base}/connected/", {"phone_number": "5511987654321"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["connected"] is True
    assert r.data["qr_code"] == ""

    r = api_client.post(f"{base}/qr/", {"qr_code": "2@def"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 409

    r = api_client.post(f"{base}/disconnect/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["status"] == ConnectionStatus.DISCONNECTED

    r = api_client.post(f"{base}/disconnect/", **scoped(tenant, facility))
    assert r.status_code == 409


def test_expired_qr_cannot_connect(api_client, tenant, facility, user):
    conn = WhatsAppConnection.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        user=user,
        qr_code="2@old",
        expires_at=timezone.now() - timedelta(seconds=1),
    )

    r = api_client.post(
        f"/api/v1/whatsapp/connections/{conn.id}/connected/",
        {"phone_number": "5511987654321"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 409
    assert "expired" in r.data["error"]["message"]


def test_status_scopes(tenant, facility, user, patient):
    live = WhatsAppConnection.objects.create(tenant_id=tenant.id, facility_id=facility.id, user=user)
    live.mark_as_connected("5511987654321")
    WhatsAppConnection.objects.create(tenant_id=tenant.id, facility_id=facility.id, user=user)

    assert list(WhatsAppConnection.objects.connected()) == [live]
    assert list(WhatsAppConnection.objects.active()) == [live]

    sent = _message(tenant, facility, user)
    sent.mark_as_sent("wamid.1")
    failed = _message(tenant, facility, user)
    failed.mark_as_failed({"code": 131026})

    assert list(WhatsAppMessage.objects.sent()) == [sent]
    assert list(WhatsAppMessage.objects.failed()) == [failed]

    when = timezone.now() + timedelta(days=2)
    done = _reminder(tenant, facility, user, patient, consultation_date=when)
    done.mark_as_sent("wamid.2")
    broken = _reminder(tenant, facility, user, patient, consultation_date=when)
    broken.mark_as_failed({"detail": "number not on WhatsApp"})

    assert list(WhatsAppReminder.objects.sent()) == [done]
    assert list(WhatsAppReminder.objects.failed()) == [broken]
