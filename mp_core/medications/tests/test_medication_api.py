import pytest

from mp_core.medications.models import Medication
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _post(client, tenant, facility, **body):
    return client.post("/api/v1/medications/", body, format="json", **scoped(tenant, facility))


def test_catalogue_is_shared_by_the_facility(api_client, other_client, tenant, facility):
    r = _post(api_client, tenant, facility, medication_name="Amoxicilina", dosage="500mg", form="cápsula")
    assert r.status_code == 201, r.data

    r = other_client.get("/api/v1/medications/?q=amoxi", **scoped(tenant, facility))
    assert r.status_code == 200
    assert r.data["count"] == 1
    assert r.data["results"][0]["dosage"] == "500mg"


def test_controlled_medication_needs_type(api_client, tenant, facility):
    r = _post(api_client, tenant, facility, medication_name="Clonazepam", is_controlled=True)
    assert r.status_code == 400
    assert "controlled_type" in r.data["error"]["details"]

    r = _post(api_client, tenant, facility, medication_name="Clonazepam", is_controlled=True, controlled_type="B1")
    assert r.status_code == 201, r.data


def test_filter_by_controlled_flag(api_client, tenant, facility):
    _post(api_client, tenant, facility, medication_name="Dipirona")
    _post(api_client, tenant, facility, medication_name="Morfina", is_controlled=True, controlled_type="A1")

    r = api_client.get("/api/v1/medications/?controlled=true", **scoped(tenant, facility))
    assert [row["medication_name"] for row in r.data["results"]] == ["Morfina"]


def test_only_admin_can_delete(api_client, other_client, tenant, facility):
    med = Medication.objects.create(tenant_id=tenant.id, facility_id=facility.id, medication_name="Paracetamol")

    r = other_client.delete(f"/api/v1/medications/{med.id}/", **scoped(tenant, facility))
    assert r.status_code == 403

    r = api_client.delete(f"/api/v1/medications/{med.id}/", **scoped(tenant, facility))
    assert r.status_code == 204
    assert not Medication.objects.filter(id=med.id).exists()


def test_other_facility_cannot_see_catalogue(api_client, tenant, facility, other_facility, other_tenant):
    Medication.objects.create(tenant_id=tenant.id, facility_id=facility.id, medication_name="Ibuprofeno")

    r = api_client.get("/api/v1/medications/", **scoped(other_tenant, other_facility))
    assert r.status_code == 200
    assert r.data["count"] == 0
