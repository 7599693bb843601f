from datetime import timedelta

import pytest
from django.utils import timezone

from mp_core.consultations.models import Consultation
from mp_core.exams.models import Exam
from mp_core.medical_records.models import MedicalRecord
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _exam(tenant, facility, user, patient, **kw):
    defaults = {"exam_name": "Hemograma", "exam_type": "laboratorial", "exam_date": "2026-05-10"}
    defaults.update(kw)
    return Exam.objects.create(tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient, **defaults)


def test_create_exam_is_pending_and_recorded(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/exams/",
        {"patient_id": str(patient.id), "exam_name": "Raio-X tórax", "exam_type": "imagem", "exam_date": "2026-11-02"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["status"] == "pending"
    assert MedicalRecord.objects.get(patient=patient).exam_ids == [r.data["id"]]


def test_create_exam_rejects_consultation_of_other_patient(api_client, tenant, facility, user, patient):
    from mp_core.patients.models import Patient

    other = Patient.objects.create(tenant_id=tenant.id, facility_id=facility.id, doctor=user, full_name="Outro")
    c = Consultation.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=other,
        consultation_date=timezone.now() + timedelta(days=1),
    )

    r = api_client.post(
        "/api/v1/exams/",
        {
            "patient_id": str(patient.id),
            "consultation_id": str(c.id),
            "exam_name": "Glicemia",
            "exam_type": "laboratorial",
            "exam_date": "2026-11-02",
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "consultation_id" in r.data["error"]["details"]


def test_status_update_stores_results(api_client, tenant, facility, user, patient):
    exam = _exam(tenant, facility, user, patient)

    r = api_client.post(
        f"/api/v1/exams/{exam.id}/status/",
        {"status": "completed", "results": {"hemoglobina": "13.5 g/dL"}},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["status"] == "completed"
    assert r.data["results"] == {"hemoglobina": "13.5 g/dL"}


def test_pending_lists_only_pending(api_client, tenant, facility, user, patient):
    _exam(tenant, facility, user, patient)
    _exam(tenant, facility, user, patient, exam_name="TSH", status="completed")

    r = api_client.get("/api/v1/exams/pending/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [row["exam_name"] for row in r.data] == ["Hemograma"]


def test_report_groups_and_completion_rate(api_client, tenant, facility, user, patient):
    _exam(tenant, facility, user, patient, exam_category="sangue")
    _exam(tenant, facility, user, patient, exam_name="TSH", status="completed", exam_category="sangue")
    _exam(tenant, facility, user, patient, exam_name="RM", exam_type="imagem", exam_date="2026-08-01")

    r = api_client.get("/api/v1/exams/report/?date_from=2026-05-01&date_to=2026-05-31", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert r.data["total"] == 2
    assert r.data["by_status"] == {"completed": 1, "pending": 1}
    assert r.data["by_type"] == {"laboratorial": 2}
    assert r.data["by_category"] == {"sangue": 2}
    assert r.data["completion_rate"] == 50.0


def test_list_filters_by_type(api_client, tenant, facility, user, patient):
    _exam(tenant, facility, user, patient)
    _exam(tenant, facility, user, patient, exam_name="RM", exam_type="imagem")

    r = api_client.get("/api/v1/exams/?exam_type=imagem", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
