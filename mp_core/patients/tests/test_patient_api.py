import pytest

from mp_core.audit.models import AuditEvent
from mp_core.patients.models import Patient
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def test_create_patient_sets_owner_and_audits(api_client, tenant, facility, user):
    r = api_client.post(
        "/api/v1/patients/",
        {
            "full_name": "João Souza",
            "mobile_phone": "(21) 99999-0000",
            "state": "rj",
            "allergies": ["penicilina"],
        },
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["full_name"] == "João Souza"
    assert r.data["state"] == "RJ"

    p = Patient.objects.get(id=r.data["id"])
    assert p.doctor_id == user.id
    assert p.tenant_id == tenant.id
    assert AuditEvent.objects.filter(event_code="patient.created", entity_id=p.id).exists()


def test_create_patient_requires_full_name(api_client, tenant, facility):
    r = api_client.post("/api/v1/patients/", {"email": "x@example.com"}, format="json", **scoped(tenant, facility))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert "full_name" in r.data["error"]["details"]


def test_create_patient_rejects_bad_phone(api_client, tenant, facility):
    r = api_client.post(
        "/api/v1/patients/",
        {"full_name": "Ana", "mobile_phone": "123"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "mobile_phone" in r.data["error"]["details"]


def test_duplicate_cpf_in_scope_is_rejected(api_client, tenant, facility, patient):
    r = api_client.post(
        "/api/v1/patients/",
        {"full_name": "Outra Maria", "cpf": patient.cpf},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "cpf" in r.data["error"]["details"]


def test_cpf_formatting_does_not_bypass_uniqueness(api_client, tenant, facility, patient):
    assert patient.cpf == "12345678909"

    r = api_client.post(
        "/api/v1/patients/",
        {"full_name": "Maria S.", "cpf": "123.456.789-09"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 400
    assert "cpf" in r.data["error"]["details"]

    r = api_client.post(
        "/api/v1/patients/",
        {"full_name": "João Souza", "cpf": "987.654.321-00"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 201, r.data
    assert r.data["cpf"] == "98765432100"

    r = api_client.get("/api/v1/patients/?q=987.654", **scoped(tenant, facility))
    assert [row["full_name"] for row in r.data["results"]] == ["João Souza"]


def test_list_filters_by_query_and_favorite(api_client, tenant, facility, user, patient):
    Patient.objects.create(tenant_id=tenant.id, facility_id=facility.id, doctor=user, full_name="Carlos Lima", favorite=True)

    r = api_client.get("/api/v1/patients/?q=maria", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [row["full_name"] for row in r.data["results"]] == ["Maria da Silva"]

    r = api_client.get("/api/v1/patients/?favorite=true", **scoped(tenant, facility))
    assert [row["full_name"] for row in r.data["results"]] == ["Carlos Lima"]


def test_other_doctor_cannot_see_patient(other_client, tenant, facility, patient):
    r = other_client.get(f"/api/v1/patients/{patient.id}/", **scoped(tenant, facility))
    assert r.status_code == 404
    assert r.data["error"]["code"] == "not_found"

    r = other_client.get("/api/v1/patients/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 0


def test_partial_update_requires_a_field(api_client, tenant, facility, patient):
    r = api_client.patch(f"/api/v1/patients/{patient.id}/", {}, format="json", **scoped(tenant, facility))
    assert r.status_code == 400


def test_partial_update_and_toggle_favorite(api_client, tenant, facility, patient):
    r = api_client.patch(
        f"/api/v1/patients/{patient.id}/",
        {"city": "Campinas"},
        format="json",
        **scoped(tenant, facility),
    )
    assert r.status_code == 200, r.data
    assert r.data["city"] == "Campinas"

    r = api_client.post(f"/api/v1/patients/{patient.id}/toggle-favorite/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["favorite"] is True


def test_delete_is_soft(api_client, tenant, facility, patient):
    r = api_client.delete(f"/api/v1/patients/{patient.id}/", **scoped(tenant, facility))
    assert r.status_code == 204

    assert not Patient.objects.filter(id=patient.id).exists()
    assert Patient.all_objects.get(id=patient.id).deleted_at is not None

    r = api_client.get(f"/api/v1/patients/{patient.id}/", **scoped(tenant, facility))
    assert r.status_code == 404


def test_quick_search_needs_two_characters(api_client, tenant, facility, patient):
    r = api_client.get("/api/v1/patients/quick-search/?q=m", **scoped(tenant, facility))
    assert r.status_code == 400

    r = api_client.get("/api/v1/patients/quick-search/?q=ma", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data[0]["full_name"] == "Maria da Silva"
    assert r.data[0]["phone"] == patient.mobile_phone


def test_stats_counts_favorites_and_blood_types(api_client, tenant, facility, user, patient):
    Patient.objects.create(
        tenant_id=tenant.id, facility_id=facility.id, doctor=user, full_name="B", blood_type="O+", favorite=True
    )

    r = api_client.get("/api/v1/patients/stats/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["total"] == 2
    assert r.data["favorites"] == 1
    assert r.data["blood_types"] == {"O+": 1}


def test_missing_scope_headers_is_forbidden(api_client):
    r = api_client.get("/api/v1/patients/")
    assert r.status_code == 403


def test_malformed_id_is_not_found(api_client, tenant, facility):
    r = api_client.get("/api/v1/patients/not-a-uuid/", **scoped(tenant, facility))
    assert r.status_code == 404
    assert r.data["error"]["code"] == "not_found"
