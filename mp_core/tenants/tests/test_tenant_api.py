import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from mp_core.tenants.models import Tenant

pytestmark = pytest.mark.django_db


@pytest.fixture
def platform_client(db):
    admin = get_user_model().objects.create_superuser(username="root", password="pass123", email="root@example.com")
    c = APIClient()
    c.force_authenticate(user=admin)
    return c


def test_member_sees_only_own_tenants(api_client, tenant, other_tenant):
    res = api_client.get("/api/v1/tenants/")
    assert res.status_code == 200
    assert [t["code"] for t in res.data] == ["test-tenant"]

    res = api_client.get(f"/api/v1/tenants/{other_tenant.id}/")
    assert res.status_code == 404


def test_only_superuser_creates(api_client, platform_client):
    payload = {"name": "Clínica Nova", "code": "clinica-nova"}

    res = api_client.post("/api/v1/tenants/", payload, format="json")
    assert res.status_code == 403

    res = platform_client.post("/api/v1/tenants/", payload, format="json")
    assert res.status_code == 201, res.data
    assert res.data["status"] == "ACTIVE"

    res = platform_client.post("/api/v1/tenants/", payload, format="json")
    assert res.status_code == 400
    assert "code" in res.data["error"]["details"]


def test_set_status(platform_client, tenant):
    res = platform_client.post(f"/api/v1/tenants/{tenant.id}/set-status/", {"status": "SUSPENDED"}, format="json")
    assert res.status_code == 200
    assert Tenant.objects.get(id=tenant.id).status == "SUSPENDED"


def test_cnpj_is_stored_as_digits(platform_client):
    payload = {"name": "Clínica Sul", "code": "clinica-sul", "cnpj": "12.345.678/0001-95"}

    res = platform_client.post("/api/v1/tenants/", payload, format="json")
    assert res.status_code == 201, res.data
    assert res.data["cnpj"] == "12345678000195"
    assert Tenant.objects.get(code="clinica-sul").cnpj == "12345678000195"
