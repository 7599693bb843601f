import pytest
from rest_framework.test import APIClient

from mp_core.conftest import _member
from mp_core.facilities.models import Facility
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def test_list_is_limited_to_scope_tenant(api_client, tenant, facility, other_facility):
    Facility.objects.create(tenant=tenant, code="annex", name="Annex", is_active=False)

    res = api_client.get("/api/v1/facilities/", **scoped(tenant, facility))
    assert res.status_code == 200
    assert [f["code"] for f in res.data] == ["main"]

    res = api_client.get("/api/v1/facilities/?active_only=false", **scoped(tenant, facility))
    assert sorted(f["code"] for f in res.data) == ["annex", "main"]


def test_list_requires_scope(api_client):
    res = api_client.get("/api/v1/facilities/")
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"


def test_admin_creates_and_updates(api_client, tenant, facility):
    res = api_client.post(
        "/api/v1/facilities/", {"name": "Consultório Centro", "code": "centro"}, format="json", **scoped(tenant, facility)
    )
    assert res.status_code == 201, res.data
    new_id = res.data["id"]

    res = api_client.post(
        "/api/v1/facilities/", {"name": "Duplicate", "code": "centro"}, format="json", **scoped(tenant, facility)
    )
    assert res.status_code == 400

    res = api_client.patch(
        f"/api/v1/facilities/{new_id}/", {"city": "São Paulo", "state": "SP"}, format="json", **scoped(tenant, facility)
    )
    assert res.status_code == 200
    assert res.data["city"] == "São Paulo"


def test_doctor_cannot_create(tenant, facility):
    c = APIClient()
    c.force_authenticate(user=_member("doc", tenant, facility, group_name="DOCTOR"))

    res = c.post("/api/v1/facilities/", {"name": "X", "code": "x"}, format="json", **scoped(tenant, facility))
    assert res.status_code == 403


def test_search_and_full_address(api_client, tenant, facility):
    Facility.objects.create(
        tenant=tenant,
        code="campinas",
        name="Consultório Campinas",
        address="Rua Barão de Jaguara, 100",
        city="Campinas",
        state="SP",
        postal_code="13015-001",
    )

    res = api_client.get("/api/v1/facilities/?q=campi", **scoped(tenant, facility))
    assert res.status_code == 200
    assert [f["code"] for f in res.data] == ["campinas"]
    assert res.data[0]["full_address"] == "Rua Barão de Jaguara, 100, Campinas - SP, 13015-001"


def test_invalid_postal_code_rejected(api_client, tenant, facility):
    res = api_client.post(
        "/api/v1/facilities/",
        {"name": "Centro", "code": "centro", "postal_code": "123"},
        format="json",
        **scoped(tenant, facility),
    )
    assert res.status_code == 400
    assert "postal_code" in res.data["error"]["details"]
