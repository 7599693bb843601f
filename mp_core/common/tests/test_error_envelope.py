import uuid

import pytest

from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def test_serializer_errors_go_to_details(api_client, tenant, facility):
    res = api_client.post("/api/v1/patients/", {}, format="json", **scoped(tenant, facility))

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "validation_error"
    assert error["message"] == "Request failed."
    assert "full_name" in error["details"]
    assert error["request_id"]


def test_missing_object_is_not_found(api_client, tenant, facility):
    res = api_client.get(f"/api/v1/patients/{uuid.uuid4()}/", **scoped(tenant, facility))

    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "not_found"
    assert error["message"] == "Not found in this scope."
    assert error["details"] is None


def test_missing_scope_on_drf_layer_is_permission_denied(api_client):
    res = api_client.get("/api/v1/patients/")

    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"


def test_conflict_keeps_its_code(api_client, tenant, facility, patient):
    res = api_client.post(
        "/api/v1/schedule/slots/",
        {"schedule_date": "2026-11-03", "start_time": "09:00", "end_time": "09:30", "status": "blocked"},
        format="json",
        **scoped(tenant, facility),
    )
    slot_id = res.json()["id"]

    res = api_client.post(
        f"/api/v1/schedule/slots/{slot_id}/book/", {"patient_name": "Walk-in"}, format="json", **scoped(tenant, facility)
    )
    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "conflict"
    assert error["message"] == "Slot is not available (status: blocked)."
