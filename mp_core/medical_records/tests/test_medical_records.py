from datetime import timedelta

import pytest
from django.utils import timezone

from mp_core.common import events
from mp_core.medical_records.models import MedicalRecord
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _payload(patient, user, doc_id="doc-1"):
    return {
        "id": doc_id,
        "patient_id": str(patient.id),
        "doctor_id": user.id,
        "tenant_id": str(patient.tenant_id),
        "facility_id": str(patient.facility_id),
    }


def test_published_ids_are_appended_once(patient, user):
    events.publish("exam.created", _payload(patient, user, "e-1"))
    events.publish("exam.created", _payload(patient, user, "e-1"))
    events.publish("prescription.created", _payload(patient, user, "p-1"))

    record = MedicalRecord.objects.get(patient=patient, doctor=user)
    assert record.exam_ids == ["e-1"]
    assert record.prescription_ids == ["p-1"]
    assert record.consultation_ids == []


def test_one_record_per_patient_and_doctor(patient, user):
    events.publish("consultation.created", _payload(patient, user, "c-1"))
    events.publish("anamnesis.created", _payload(patient, user, "a-1"))

    assert MedicalRecord.objects.filter(patient=patient).count() == 1


def test_consultation_api_feeds_record(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/consultations/",
        {"patient_id": str(patient.id), "consultation_date": (timezone.now() + timedelta(days=1)).isoformat()},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data

    r = api_client.get(f"/api/v1/medical-records/{patient.id}/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert len(r.data["consultation_ids"]) == 1
    assert r.data["patient_info"]["full_name"] == patient.full_name


def test_retrieve_creates_record_with_snapshot(api_client, tenant, facility, patient):
    assert not MedicalRecord.objects.exists()

    r = api_client.get(f"/api/v1/medical-records/{patient.id}/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert str(r.data["patient_id"]) == str(patient.id)
    assert r.data["health_summary"]["full_name"] == patient.full_name
    assert MedicalRecord.objects.count() == 1


def test_refresh_picks_up_patient_changes(api_client, tenant, facility, patient):
    api_client.get(f"/api/v1/medical-records/{patient.id}/", **scoped(tenant, facility))

    patient.allergies = ["amendoim"]
    patient.save(update_fields=["allergies", "updated_at"])

    r = api_client.post(f"/api/v1/medical-records/{patient.id}/refresh/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["health_summary"]["allergies"] == ["amendoim"]


def test_record_of_unknown_patient_is_404(api_client, tenant, facility):
    r = api_client.get("/api/v1/medical-records/00000000-0000-0000-0000-000000000042/", **scoped(tenant, facility))
    assert r.status_code == 404


def test_model_append_dedupes_by_string():
    record = MedicalRecord()
    assert record.add_exam_id(1) is True
    assert record.add_exam_id("1") is False
    assert record.exam_ids == ["1"]
