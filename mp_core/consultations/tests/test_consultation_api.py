from datetime import timedelta

import pytest
from django.utils import timezone

from mp_core.audit.models import AuditEvent
from mp_core.consultations.models import Consultation
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _future(days=2):
    return (timezone.now() + timedelta(days=days)).isoformat()


def test_create_consultation_touches_patient(api_client, tenant, facility, patient):
    when = _future()
    r = api_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": when, "reason_for_visit": "Dor de cabeça"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["status"] == "scheduled"
    assert r.data["consultation_duration"] == 30
    assert r.data["patient_name"] == patient.full_name

    patient.refresh_from_db()
    assert patient.last_consultation_date is not None


def test_create_consultation_rejects_past_date(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": _future(days=-3)},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "consultation_date" in r.data["error"]["details"]


def test_online_consultation_needs_room_link(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": _future(), "consultation_type": "online"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "room_link" in r.data["error"]["details"]

    r = api_client.post(
        "/api/v1/consultations/",
        {
            "patient_id": str(patient.id),
            "consultation_date": _future(),
            "consultation_type": "online",
            "room_link": "https://meet.example.com/abc",
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data


def test_duration_bounds(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": _future(), "consultation_duration": 10},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "consultation_duration" in r.data["error"]["details"]


def test_patient_of_other_doctor_is_rejected(other_client, tenant, facility, patient):
    r = other_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": _future()},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "patient_id" in r.data["error"]["details"]


def test_status_change_with_reason_is_audited(api_client, tenant, facility, patient, user):
    c = Consultation.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        doctor=user,
        patient=patient,
        consultation_date=timezone.now() + timedelta(days=1),
    )

    r = api_client.post(
        f"/api/v1/consultations/{c.id}/status/",
        {"status": "cancelled", "reason": "Paciente viajou"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["status"] == "cancelled"
    assert r.data["additional_notes"] == "Paciente viajou"

    ev = AuditEvent.objects.get(event_code="consultation.status_changed", entity_id=c.id)
    assert ev.metadata["from"] == "scheduled"
    assert ev.metadata["to"] == "cancelled"


def test_list_filters_and_stats(api_client, tenant, facility, patient, user):
    now = timezone.now()
    Consultation.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient,
        consultation_date=now - timedelta(days=2), status="completed",
    )
    Consultation.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient,
        consultation_date=now + timedelta(days=2), consultation_type="domicilio",
    )

    r = api_client.get("/api/v1/consultations/?status=completed", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1

    r = api_client.get("/api/v1/consultations/upcoming/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert len(r.data) == 1
    assert r.data[0]["consultation_type"] == "domicilio"

    r = api_client.get("/api/v1/consultations/stats/?period=7", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["period"] == 7
    assert r.data["period_stats"]["completed"] == 1
    assert r.data["summary"]["total"] == 2


def test_delete_is_soft(api_client, tenant, facility, patient, user):
    c = Consultation.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient,
        consultation_date=timezone.now() + timedelta(days=1),
    )
    r = api_client.delete(f"/api/v1/consultations/{c.id}/", **scoped(tenant, facility))
    assert r.status_code == 204
    assert Consultation.all_objects.get(id=c.id).is_deleted
