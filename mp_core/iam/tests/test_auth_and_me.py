import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from mp_core.iam.models import FacilityMembership, UserProfile
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _bearer(user) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies_and_cookie_authenticates(user, tenant, facility, settings):
    user.set_password("Pass@12345")
    user.save(update_fields=["password"])

    client = APIClient()
    res = client.post("/api/v1/auth/login/", {"username": user.username, "password": "Pass@12345"}, format="json")
    assert res.status_code == 200
    assert res.json()["default_scope"] == {"tenant_id": str(tenant.id), "facility_id": str(facility.id)}

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies

    res = client.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["user"]["id"] == user.id


def test_login_with_wrong_password(user):
    res = APIClient().post("/api/v1/auth/login/", {"username": user.username, "password": "nope"}, format="json")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"
    assert res["WWW-Authenticate"].startswith("Bearer")


def test_refresh_with_bad_token():
    res = APIClient().post("/api/v1/auth/refresh/", {"refresh": "not-a-token"}, format="json")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "not_authenticated"


def test_me_returns_profile_and_memberships(api_client, user, tenant, facility):
    res = api_client.get("/api/v1/me/")
    assert res.status_code == 200

    body = res.json()
    assert body["user"]["id"] == user.id
    assert body["profile"] is not None
    assert body["active_scope"] is None
    assert [m["facility_id"] for m in body["memberships"]] == [str(facility.id)]
    assert body["memberships"][0]["is_primary"] is True


def test_me_echoes_valid_scope(api_client, tenant, facility):
    res = api_client.get("/api/v1/me/", **scoped(tenant, facility))
    assert res.status_code == 200
    assert res.json()["active_scope"] == {"tenant_id": str(tenant.id), "facility_id": str(facility.id)}


def test_switch_scope_requires_membership(api_client, tenant, facility, other_tenant, other_facility):
    res = api_client.post(
        "/api/v1/me/", {"tenant_id": str(tenant.id), "facility_id": str(facility.id)}, format="json"
    )
    assert res.status_code == 200
    assert res.json()["active_scope"]["facility_id"] == str(facility.id)

    res = api_client.post(
        "/api/v1/me/", {"tenant_id": str(other_tenant.id), "facility_id": str(other_facility.id)}, format="json"
    )
    assert res.status_code == 403

    res = api_client.post("/api/v1/me/", {"tenant_id": str(tenant.id)}, format="json")
    assert res.status_code == 400


def test_update_profile(api_client, user):
    res = api_client.patch(
        "/api/v1/me/profile/",
        {"crm": "CRM/SP 123456", "specialty": "Cardiologia", "first_name": "Ana"},
        format="json",
    )
    assert res.status_code == 200, res.data
    assert res.data["crm"] == "CRM/SP 123456"

    user.refresh_from_db()
    assert user.first_name == "Ana"
    assert UserProfile.objects.get(user=user).specialty == "Cardiologia"


def test_jwt_scope_headers_allow_member(user, patient, tenant, facility):
    res = _bearer(user).get("/api/v1/patients/", **scoped(tenant, facility))
    assert res.status_code == 200
    assert res.json()["count"] == 1


def test_jwt_scope_headers_block_non_member(user, tenant, facility):
    FacilityMembership.objects.filter(user_profile__user=user).update(is_active=False)

    res = _bearer(user).get("/api/v1/patients/", **scoped(tenant, facility))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"
