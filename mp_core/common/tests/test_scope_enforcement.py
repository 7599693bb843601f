import json

import pytest
from django.contrib.auth.models import User
from django.test import RequestFactory

from mp_core.common.middleware import TenantFacilityScopeMiddleware

pytestmark = pytest.mark.django_db


def _run(path="/api/v1/patients/", user=None, **headers):
    req = RequestFactory().get(path, **headers)
    req.user = user or User.objects.create_user(username="mw", password="pass123")
    return req, TenantFacilityScopeMiddleware(get_response=lambda r: None).process_request(req)


def _body(resp):
    return json.loads(resp.content.decode("utf-8"))


def test_missing_scope_returns_error_envelope():
    _, resp = _run()

    assert resp.status_code == 400
    body = _body(resp)
    assert body["error"]["code"] == "validation_error"
    assert "Missing scope headers" in body["error"]["message"]
    assert body["error"]["request_id"]


def test_partial_scope_is_missing_scope():
    _, resp = _run(HTTP_X_TENANT_ID="11111111-1111-1111-1111-111111111111")

    assert resp.status_code == 400
    assert "Missing scope headers" in _body(resp)["error"]["message"]


def test_invalid_scope_returns_error_envelope():
    _, resp = _run(HTTP_X_TENANT_ID="not-a-uuid", HTTP_X_FACILITY_ID="also-not-a-uuid")

    assert resp.status_code == 400
    body = _body(resp)
    assert body["error"]["code"] == "validation_error"
    assert "Invalid scope headers" in body["error"]["message"]


def test_non_member_returns_403_envelope(monkeypatch):
    monkeypatch.setattr(
        "mp_core.iam.services.membership.is_user_member_of_facility",
        lambda **kwargs: False,
        raising=True,
    )

    _, resp = _run(
        HTTP_X_TENANT_ID="11111111-1111-1111-1111-111111111111",
        HTTP_X_FACILITY_ID="22222222-2222-2222-2222-222222222222",
    )

    assert resp.status_code == 403
    body = _body(resp)
    assert body["error"]["code"] == "permission_denied"
    assert "do not have access" in body["error"]["message"].lower()


def test_member_scope_is_attached(user, tenant, facility):
    req, resp = _run(user=user, HTTP_X_TENANT_ID=str(tenant.id), HTTP_X_FACILITY_ID=str(facility.id))

    assert resp is None
    assert req.tenant_id == tenant.id
    assert req.facility_id == facility.id


@pytest.mark.parametrize("path", ["/api/v1/me/", "/api/v1/tenants/", "/api/v1/auth/login/", "/api/docs/", "/api/redoc/", "/admin/"])
def test_unscoped_paths_pass_without_headers(path):
    _, resp = _run(path=path)
    assert resp is None
