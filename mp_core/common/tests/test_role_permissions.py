import pytest
from rest_framework.test import APIClient

from mp_core.conftest import _member
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _client_for(username, tenant, facility, group_name):
    c = APIClient()
    c.force_authenticate(user=_member(username, tenant, facility, group_name=group_name))
    return c


def test_readonly_can_list_but_not_create(tenant, facility):
    c = _client_for("viewer", tenant, facility, "READONLY")

    assert c.get("/api/v1/patients/", **scoped(tenant, facility)).status_code == 200

    res = c.post("/api/v1/patients/", {"full_name": "Novo Paciente"}, format="json", **scoped(tenant, facility))
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "permission_denied"


def test_billing_reaches_finance_not_clinical(tenant, facility):
    c = _client_for("cashier", tenant, facility, "BILLING")

    assert c.get("/api/v1/finance/bills/", **scoped(tenant, facility)).status_code == 200
    res = c.post(
        "/api/v1/exams/",
        {"patient_id": "11111111-1111-1111-1111-111111111111", "exam_name": "X", "exam_type": "imagem", "exam_date": "2026-01-01"},
        format="json",
        **scoped(tenant, facility),
    )
    assert res.status_code == 403


def test_secretary_books_slots(tenant, facility):
    c = _client_for("desk", tenant, facility, "SECRETARY")

    res = c.post(
        "/api/v1/schedule/slots/",
        {"schedule_date": "2026-11-03", "start_time": "08:00", "end_time": "08:20"},
        format="json",
        **scoped(tenant, facility),
    )
    assert res.status_code == 201, res.data
