from datetime import timedelta

import pytest
from django.utils import timezone

from mp_core.consultations.models import Consultation
from mp_core.prescriptions.models import Prescription
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


@pytest.fixture
def consultation(tenant, facility, user, patient):
    return Consultation.objects.create(
        tenant_id=tenant.id,
        facility_id=facility.id,
        doctor=user,
        patient=patient,
        consultation_date=timezone.now(),
    )


def _body(patient, **extra):
    return {
        "patient_id": str(patient.id),
        "title": "Tratamento amigdalite",
        "medications": [{"name": "Amoxicilina", "dosage": "500mg", "frequency": "8/8h"}],
        **extra,
    }


def test_create_links_consultation(api_client, tenant, facility, patient, consultation):
    r = api_client.post(
        "/api/v1/prescriptions/",
        _body(patient, consultation_id=str(consultation.id)),
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["status"] == "active"
    assert r.data["prescription_type"] == "medicamento"
    assert str(r.data["consultation_id"]) == str(consultation.id)

    consultation.refresh_from_db()
    assert str(consultation.prescription_id) == r.data["id"]


def test_relinking_consultation_detaches_previous_prescription(api_client, tenant, facility, patient, consultation):
    ids = []
    for title in ("Primeira receita", "Segunda receita"):
        r = api_client.post(
            "/api/v1/prescriptions/",
            _body(patient, title=title, consultation_id=str(consultation.id)),
            format="json",
            **scoped(tenant, facility),
        )
        assert r.status_code == 201, r.data
        ids.append(r.data["id"])

    consultation.refresh_from_db()
    assert str(consultation.prescription_id) == ids[1]
    assert [str(p.id) for p in Prescription.objects.filter(consultation_id=consultation.id)] == [ids[1]]
    assert Prescription.objects.get(id=ids[0]).consultation_id is None


def test_issue_date_in_future_is_rejected(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/prescriptions/",
        _body(patient, issued_at=(timezone.now() + timedelta(days=1)).isoformat()),
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "issued_at" in r.data["error"]["details"]


def test_expiration_must_follow_issue(api_client, tenant, facility, patient):
    issued = timezone.now() - timedelta(days=1)
    r = api_client.post(
        "/api/v1/prescriptions/",
        _body(patient, issued_at=issued.isoformat(), expiration_date=(issued - timedelta(hours=1)).isoformat()),
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "expiration_date" in r.data["error"]["details"]


def test_generate_pdf_sets_url(api_client, tenant, facility, patient, user):
    p = Prescription.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient, title="Repouso",
        prescription_type="repouso",
    )
    r = api_client.post(f"/api/v1/prescriptions/{p.id}/generate-pdf/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["pdf_url"] == f"/storage/prescriptions/{p.id}.pdf"


def test_expired_filter(api_client, tenant, facility, patient, user):
    Prescription.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient, title="Antiga",
        issued_at=timezone.now() - timedelta(days=60), expiration_date=timezone.now() - timedelta(days=30),
    )
    Prescription.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient, title="Nova",
    )

    r = api_client.get("/api/v1/prescriptions/?expired=true", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [row["title"] for row in r.data["results"]] == ["Antiga"]
    assert r.data["results"][0]["is_expired"] is True


def test_patient_prescriptions_action(api_client, tenant, facility, patient, user):
    Prescription.objects.create(tenant_id=tenant.id, facility_id=facility.id, doctor=user, patient=patient, title="A")

    r = api_client.get(f"/api/v1/patients/{patient.id}/prescriptions/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
