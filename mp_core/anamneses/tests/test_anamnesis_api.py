from datetime import date

import pytest

from mp_core.anamneses.models import Anamnesis
from mp_core.medical_records.models import MedicalRecord
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _create(client, tenant, facility, patient, **extra):
    body = {
        "patient_id": str(patient.id),
        "chief_complaint": "Tosse há 5 dias",
        "illness_history": "Início após resfriado",
        **extra,
    }
    return client.post("/api/v1/anamneses/", body, format="json", **scoped(tenant, facility))


def test_create_anamnesis_defaults_date_and_links_record(api_client, tenant, facility, patient):
    r = _create(api_client, tenant, facility, patient, allergies=["dipirona"])
    assert r.status_code == 201, r.data
    assert r.data["chief_complaint"] == "Tosse há 5 dias"

    a = Anamnesis.objects.get(id=r.data["id"])
    assert a.anamnesis_date is not None

    record = MedicalRecord.objects.get(patient=patient)
    assert record.anamnesis_ids == [str(a.id)]


def test_create_anamnesis_requires_complaint_and_history(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/anamneses/",
        {"patient_id": str(patient.id)},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    details = r.data["error"]["details"]
    assert "chief_complaint" in details
    assert "illness_history" in details


def test_template_carries_history_from_latest(api_client, tenant, facility, patient):
    r = api_client.get(f"/api/v1/anamneses/template/?patient_id={patient.id}", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["has_previous"] is False
    assert r.data["template"]["allergies"] == []

    _create(api_client, tenant, facility, patient, allergies=["látex"], family_history="Diabetes (mãe)")

    r = api_client.get(f"/api/v1/anamneses/template/?patient_id={patient.id}", **scoped(tenant, facility))
    assert r.data["has_previous"] is True
    assert r.data["template"]["allergies"] == ["látex"]
    assert r.data["template"]["family_history"] == "Diabetes (mãe)"
    assert r.data["template"]["chief_complaint"] == ""


def test_template_requires_patient_id(api_client, tenant, facility):
    r = api_client.get("/api/v1/anamneses/template/", **scoped(tenant, facility))
    assert r.status_code == 400


def test_report_counts_diagnoses(api_client, tenant, facility, patient):
    _create(api_client, tenant, facility, patient, anamnesis_date="2026-03-02", diagnosis="Gripe")
    _create(api_client, tenant, facility, patient, anamnesis_date="2026-03-04", diagnosis="Gripe")
    _create(api_client, tenant, facility, patient, anamnesis_date="2026-04-10", diagnosis="Sinusite")

    r = api_client.get(
        "/api/v1/anamneses/report/?date_from=2026-03-01&date_to=2026-03-31",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["total"] == 2
    assert r.data["unique_patients"] == 1
    assert r.data["most_common_diagnoses"] == {"Gripe": 2}
    assert r.data["avg_per_day"] == round(2 / 31, 2)


def test_report_rejects_inverted_range(api_client, tenant, facility):
    r = api_client.get(
        "/api/v1/anamneses/report/?date_from=2026-03-31&date_to=2026-03-01",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400


def test_list_filters_by_date(api_client, tenant, facility, patient):
    _create(api_client, tenant, facility, patient, anamnesis_date=date(2026, 1, 5).isoformat())
    _create(api_client, tenant, facility, patient, anamnesis_date=date(2026, 2, 5).isoformat())

    r = api_client.get("/api/v1/anamneses/?date_from=2026-02-01", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
