import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from mp_core.audit.models import AuditEvent
from mp_core.audit.services import AuditService
from mp_core.tests.helpers import scoped

pytestmark = pytest.mark.django_db


def _log(tenant, facility, user, code, entity_type="Patient", entity_id=None, metadata=None):
    return AuditService.log(
        event_code=code,
        entity_type=entity_type,
        entity_id=entity_id or uuid.uuid4(),
        tenant_id=tenant.id,
        facility_id=facility.id,
        actor_user_id=user.id,
        metadata=metadata,
    )


def test_log_makes_metadata_json_safe(tenant, facility, user):
    entity = uuid.uuid4()
    event = _log(
        tenant,
        facility,
        user,
        "finance.bill.created",
        entity_type="Bill",
        metadata={"amount": Decimal("10.50"), "due_date": date(2026, 3, 1), "ref": entity},
    )
    event.refresh_from_db()
    assert event.metadata == {"amount": "10.50", "due_date": "2026-03-01", "ref": str(entity)}


def test_list_is_scoped_and_newest_first(api_client, tenant, facility, other_tenant, other_facility, user):
    _log(tenant, facility, user, "patient.created")
    _log(tenant, facility, user, "patient.updated")
    _log(other_tenant, other_facility, user, "patient.created")

    r = api_client.get("/api/v1/audit/events/", **scoped(tenant, facility))
    assert r.status_code == 200, r.data
    assert [row["event_code"] for row in r.data] == ["patient.updated", "patient.created"]
    assert r.data[0]["actor_user_id"] == user.id


def test_filters(api_client, tenant, facility, user):
    target = uuid.uuid4()
    _log(tenant, facility, user, "consultation.created", entity_type="Consultation", entity_id=target)
    _log(tenant, facility, user, "patient.created")
    old = _log(tenant, facility, user, "patient.updated")
    AuditEvent.objects.filter(id=old.id).update(occurred_at=timezone.now() - timedelta(days=10))

    r = api_client.get("/api/v1/audit/events/?entity_type=Consultation", **scoped(tenant, facility))
    assert [row["entity_id"] for row in r.data] == [str(target)]

    r = api_client.get("/api/v1/audit/events/?event_code=patient.created", **scoped(tenant, facility))
    assert len(r.data) == 1

    after = (timezone.now() - timedelta(days=1)).isoformat()
    r = api_client.get("/api/v1/audit/events/", {"occurred_after": after}, **scoped(tenant, facility))
    assert {row["event_code"] for row in r.data} == {"consultation.created", "patient.created"}

    r = api_client.get("/api/v1/audit/events/?limit=1", **scoped(tenant, facility))
    assert len(r.data) == 1


def test_invalid_filter_is_rejected(api_client, tenant, facility):
    r = api_client.get("/api/v1/audit/events/?entity_id=not-a-uuid", **scoped(tenant, facility))
    assert r.status_code == 400
    assert r.data["error"]["code"] == "validation_error"
    assert "entity_id" in r.data["error"]["details"]


def test_module_filter_and_entity_history(api_client, tenant, facility, user):
    bill_id = uuid.uuid4()
    _log(tenant, facility, user, "finance.bill.created", entity_type="Bill", entity_id=bill_id)
    _log(tenant, facility, user, "finance.bill.paid", entity_type="Bill", entity_id=bill_id)
    _log(tenant, facility, user, "patient.created")

    r = api_client.get("/api/v1/audit/events/?module=finance", **scoped(tenant, facility))
    assert r.status_code == 200
    assert {row["module"] for row in r.data} == {"finance"}
    assert len(r.data) == 2

    r = api_client.get("/api/v1/audit/events/?event_prefix=finance.bill.", **scoped(tenant, facility))
    assert len(r.data) == 2

    r = api_client.get(f"/api/v1/audit/events/history/Bill/{bill_id}/", **scoped(tenant, facility))
    assert r.status_code == 200
    assert [row["event_code"] for row in r.data] == ["finance.bill.paid", "finance.bill.created"]
    assert r.data[0]["actor_username"] == user.username

    r = api_client.get("/api/v1/audit/events/history/Bill/nope/", **scoped(tenant, facility))
    assert r.status_code == 400
