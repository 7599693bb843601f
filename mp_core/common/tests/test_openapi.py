import pytest
from drf_spectacular.generators import SchemaGenerator

pytestmark = pytest.mark.django_db


@pytest.fixture
def schema():
    return SchemaGenerator().get_schema(request=None, public=True)


def _headers(schema, path, method="get"):
    params = schema["paths"][path][method].get("parameters", [])
    return {p["name"]: p.get("required", False) for p in params if p["in"] == "header"}


def test_only_versioned_paths_are_documented(schema):
    assert "/api/v1/patients/" in schema["paths"]
    assert not any(p.startswith("/api/patients/") for p in schema["paths"])


def test_scope_headers_follow_scope_policy(schema):
    assert _headers(schema, "/api/v1/patients/") == {"X-Tenant-Id": True, "X-Facility-Id": True}
    assert _headers(schema, "/api/v1/me/") == {"X-Tenant-Id": False, "X-Facility-Id": False}
    assert _headers(schema, "/api/v1/auth/login/", "post") == {}
